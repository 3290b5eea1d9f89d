"""Domain entities."""

from rolegate.domain.entities.role import Role
from rolegate.domain.entities.role_filter import RoleFilter
from rolegate.domain.entities.role_member import RoleMember

__all__ = [
    "Role",
    "RoleFilter",
    "RoleMember",
]
