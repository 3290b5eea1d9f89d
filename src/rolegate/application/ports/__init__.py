"""Application ports - interfaces for external adapters."""

from rolegate.application.ports.access_controller import RoleAccessController
from rolegate.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "RoleAccessController",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
