"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar

from psycopg import sql
from psycopg_pool import AsyncConnectionPool

from rolegate.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None
        self._savepoints = 0

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._roles = PostgresRoleRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()

    @asynccontextmanager
    async def savepoint(self) -> AsyncIterator["PostgresUnitOfWork"]:
        """Nested unit: released on success, rolled back to on error."""
        self._savepoints += 1
        name = sql.Identifier(f"uow_{self._savepoints}")
        try:
            await self._conn.execute(sql.SQL("SAVEPOINT {}").format(name))
            try:
                yield self
            except BaseException:
                await self._conn.execute(sql.SQL("ROLLBACK TO SAVEPOINT {}").format(name))
                raise
            await self._conn.execute(sql.SQL("RELEASE SAVEPOINT {}").format(name))
        finally:
            self._savepoints -= 1


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Entering the factory inside an active unit of work of the same task
    reuses its connection under a savepoint.
    """
    active: ContextVar[PostgresUnitOfWork | None] = ContextVar("active_uow", default=None)

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        current = active.get()
        if current is not None:
            async with current.savepoint() as nested:
                yield nested
            return

        uow = PostgresUnitOfWork(pool)
        async with uow:
            token = active.set(uow)
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise
            finally:
                active.reset(token)

    return factory
