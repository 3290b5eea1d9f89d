"""Unit of Work port - transactional boundary."""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from rolegate.application.ports.repositories.role_repository import RoleRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def roles(self) -> RoleRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances.

    The returned context manager commits on normal exit and rolls back when
    the block raises. Calling the factory while a unit of work is active in
    the same task nests into it.
    """

    def __call__(self) -> AbstractAsyncContextManager[UnitOfWork]: ...
