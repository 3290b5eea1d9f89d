"""Role search filter."""

from collections.abc import Callable
from dataclasses import dataclass

from rolegate.domain.entities.role import Role
from rolegate.domain.value_objects import FilterState


@dataclass
class RoleFilter:
    """Query shape for role search.

    is_readable is set by the role service from the access controller;
    any value supplied by the caller is overwritten.
    """

    query: str = ""
    name: str = ""
    handle: str = ""
    deleted: FilterState = FilterState.EXCLUDED
    archived: FilterState = FilterState.EXCLUDED
    limit: int = 100
    is_readable: Callable[[Role], bool] | None = None

    @property
    def includes_restricted(self) -> bool:
        """Whether deleted or archived roles are requested."""
        return (
            self.deleted != FilterState.EXCLUDED
            or self.archived != FilterState.EXCLUDED
        )

    def matches(self, role: Role) -> bool:
        """Check role against every filter criterion, readability included."""
        if not self.deleted.admits(role.is_deleted):
            return False
        if not self.archived.admits(role.is_archived):
            return False
        if self.name and role.name != self.name:
            return False
        if self.handle and role.handle != self.handle:
            return False
        if self.query:
            q = self.query.lower()
            if q not in role.name.lower() and q not in role.handle.lower():
                return False
        if self.is_readable is not None and not self.is_readable(role):
            return False
        return True
