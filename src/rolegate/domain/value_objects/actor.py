"""Acting identity."""

from dataclasses import dataclass, field

ANONYMOUS_USER_ID = "anonymous"


@dataclass(frozen=True)
class Actor:
    """Identity on whose behalf role operations are performed."""

    user_id: str
    realm_roles: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_anonymous(self) -> bool:
        return self.user_id == ANONYMOUS_USER_ID

    @classmethod
    def anonymous(cls) -> "Actor":
        return cls(user_id=ANONYMOUS_USER_ID)
