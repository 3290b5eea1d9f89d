"""Mapping of domain errors to HTTP responses."""

import falcon
import falcon.asgi

from rolegate.domain.exceptions import (
    InvalidHandle,
    InvalidID,
    NoPermission,
    NotFound,
    RoleHandleNotUnique,
    RolegateError,
    RoleNameNotUnique,
    ValidationError,
)
from rolegate.logging import get_logger

logger = get_logger(__name__)

ERROR_STATUS: dict[type[RolegateError], str] = {
    InvalidID: falcon.HTTP_400,
    InvalidHandle: falcon.HTTP_400,
    ValidationError: falcon.HTTP_400,
    NoPermission: falcon.HTTP_403,
    NotFound: falcon.HTTP_404,
    RoleNameNotUnique: falcon.HTTP_409,
    RoleHandleNotUnique: falcon.HTTP_409,
}


def status_for(ex: RolegateError) -> str:
    """HTTP status for a domain error, subclasses map like their parents."""
    for cls in type(ex).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return falcon.HTTP_500


async def handle_rolegate_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: RolegateError, params: dict
) -> None:
    resp.status = status_for(ex)
    resp.media = {"error": ex.code, "message": str(ex)}


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params: dict
) -> None:
    logger.exception("http.unhandled_error", method=req.method, path=req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "InternalServerError", "message": "Internal server error"}


def register_error_handlers(app: falcon.asgi.App) -> None:
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(RolegateError, handle_rolegate_error)
