"""Role member entity - user attached to role."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleMember:
    """Link between a role and a user."""

    role_id: int
    user_id: int
