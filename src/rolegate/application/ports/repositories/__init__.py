"""Repository ports."""

from rolegate.application.ports.repositories.role_repository import RoleRepository

__all__ = [
    "RoleRepository",
]
