"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from rolegate.application.services.role_service import RoleService
from rolegate.domain.value_objects import Actor
from rolegate.infrastructure.access_control.realm_role_access_controller import (
    RealmRoleAccessController,
)
from rolegate.interfaces.api.app import create_app
from rolegate.interfaces.api.middleware.request_logging import RequestLoggingMiddleware
from rolegate.interfaces.api.resources.health import HealthResource

from tests.conftest import FakeUnitOfWork, make_uow_factory

TEST_USER_HEADER = "X-Test-User"

ACTORS = {
    "admin": Actor(user_id="admin-1", realm_roles=frozenset({"rolegate-admin"})),
    "manager": Actor(user_id="manager-1", realm_roles=frozenset({"rolegate-manager"})),
    "user": Actor(user_id="user-1"),
    "anonymous": Actor.anonymous(),
}


class AuthBypassMiddleware:
    """Middleware that sets context.user from a test header (admin by default)."""

    async def process_request(self, req, resp):
        req.context.user = ACTORS[req.get_header(TEST_USER_HEADER) or "admin"]


@pytest.fixture
def api_uow() -> FakeUnitOfWork:
    """UoW shared by every request in a test."""
    return FakeUnitOfWork()


@pytest.fixture
def app(api_uow):
    """Falcon ASGI app with role resources for testing."""
    role_service = RoleService(
        unit_of_work_factory=make_uow_factory(api_uow),
        access_controller=RealmRoleAccessController(
            admin_roles={"rolegate-admin"}, manager_roles={"rolegate-manager"}
        ),
        actor=Actor.anonymous(),
    )
    return create_app(
        role_service,
        HealthResource(),
        middleware=[RequestLoggingMiddleware(), AuthBypassMiddleware()],
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    return TestClient(app)


def as_user(name: str) -> dict[str, str]:
    return {TEST_USER_HEADER: name}
