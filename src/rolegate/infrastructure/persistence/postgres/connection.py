"""PostgreSQL async connection pool."""

from psycopg import AsyncConnection
from psycopg_pool import AsyncConnectionPool

from rolegate.config import Settings


async def _configure(conn: AsyncConnection) -> None:
    # Timestamps are returned as UTC
    await conn.execute("SET TIME ZONE 'UTC'")
    await conn.commit()


def create_pool(settings: Settings) -> AsyncConnectionPool:
    """Create async connection pool from settings.

    Pool is created with open=False. It is opened and closed by
    PoolLifespanMiddleware in the ASGI lifespan.
    """
    return AsyncConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
        configure=_configure,
        name="rolegate",
        open=False,
    )


async def ping(pool: AsyncConnectionPool) -> bool:
    """Check that a pooled connection can run a query."""
    async with pool.connection() as conn:
        cur = await conn.execute("SELECT 1")
        return (await cur.fetchone()) == (1,)
