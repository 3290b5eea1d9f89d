"""Request logging middleware - request id, actor id and access log."""

import time
import uuid

import falcon.asgi
import structlog

from rolegate.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware:
    """Binds request context for structured logs and logs each response.

    Must be registered before AuthMiddleware so the request id is bound
    first; the actor id is bound once auth has run.
    """

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        structlog.contextvars.clear_contextvars()
        request_id = req.get_header(REQUEST_ID_HEADER) or uuid.uuid4().hex
        req.context.request_id = request_id
        req.context.started_at = time.perf_counter()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        resp.set_header(REQUEST_ID_HEADER, request_id)

    async def process_resource(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params
    ) -> None:
        user = getattr(req.context, "user", None)
        if user is not None:
            structlog.contextvars.bind_contextvars(actor_id=user.user_id)

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        started_at = getattr(req.context, "started_at", None)
        duration_ms = (
            round((time.perf_counter() - started_at) * 1000, 2) if started_at is not None else None
        )
        logger.info(
            "http.request",
            method=req.method,
            path=req.path,
            status=resp.status,
            duration_ms=duration_ms,
        )
        structlog.contextvars.clear_contextvars()
