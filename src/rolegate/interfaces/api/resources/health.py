"""Health check endpoints."""

import falcon.asgi
from psycopg import Error as PsycopgError
from psycopg_pool import AsyncConnectionPool

from rolegate.infrastructure.persistence.postgres.connection import ping
from rolegate.logging import get_logger

logger = get_logger(__name__)


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(self, pool: AsyncConnectionPool | None = None) -> None:
        self._pool = pool

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness (database)."""
        if self._pool is not None:
            try:
                ready = await ping(self._pool)
            except PsycopgError as e:
                logger.warning("health.database_unavailable", error=str(e))
                ready = False
            if not ready:
                resp.media = {"status": "unavailable"}
                resp.status = falcon.HTTP_503
                return
        resp.media = {"status": "ready"}
        resp.status = falcon.HTTP_200
