"""Application entry point and composition root."""

import falcon.asgi

from rolegate import __version__
from rolegate.application.services.role_service import RoleService
from rolegate.config import Settings, get_settings
from rolegate.domain.value_objects import Actor
from rolegate.infrastructure.access_control.realm_role_access_controller import (
    RealmRoleAccessController,
)
from rolegate.infrastructure.auth.keycloak_provider import KeycloakProvider
from rolegate.infrastructure.persistence.postgres.connection import create_pool
from rolegate.infrastructure.persistence.postgres.unit_of_work import (
    create_uow_factory,
)
from rolegate.interfaces.api.app import create_app
from rolegate.interfaces.api.middleware.auth import AuthMiddleware
from rolegate.interfaces.api.middleware.cors import CORSMiddleware
from rolegate.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from rolegate.interfaces.api.middleware.request_logging import RequestLoggingMiddleware
from rolegate.interfaces.api.resources.health import HealthResource
from rolegate.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_rolegate_app(settings: Settings | None = None) -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    configure_logging(settings)

    pool = create_pool(settings)
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("auth.keycloak_disabled", reason="keycloak_client_secret is empty")

    access_controller = RealmRoleAccessController(
        admin_roles=settings.admin_realm_role_set,
        manager_roles=settings.manager_realm_role_set,
    )
    role_service = RoleService(
        unit_of_work_factory=uow_factory,
        access_controller=access_controller,
        actor=Actor.anonymous(),
        unique_check_fail_open=settings.unique_check_fail_open,
    )

    return create_app(
        role_service,
        HealthResource(pool),
        middleware=[
            RequestLoggingMiddleware(),
            CORSMiddleware(settings.cors_origin_list),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak),
        ],
    )


def main() -> None:
    """CLI entry point - run uvicorn server."""
    import uvicorn

    settings = get_settings()
    app = create_rolegate_app(settings)
    logger.info("rolegate.starting", version=__version__, host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
