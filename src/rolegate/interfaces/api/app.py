"""Falcon ASGI application."""

from collections.abc import Iterable

import falcon.asgi
from falcon.asgi import App

from rolegate.application.services.role_service import RoleService
from rolegate.interfaces.api.errors import register_error_handlers
from rolegate.interfaces.api.resources.health import HealthResource
from rolegate.interfaces.api.resources.roles import (
    RoleLookupResource,
    RoleMemberResource,
    RoleMembersResource,
    RoleRelocationResource,
    RoleResource,
    RolesResource,
    RoleStateResource,
    UserMembershipsResource,
)


def create_app(
    role_service: RoleService,
    health_resource: HealthResource,
    middleware: Iterable[object] = (),
) -> App:
    """Create Falcon ASGI app with routes.

    role_service is bound to the request's actor inside each resource.
    """
    app = falcon.asgi.App(middleware=list(middleware))
    register_error_handlers(app)

    lookup = RoleLookupResource(role_service)
    state = RoleStateResource(role_service)
    relocation = RoleRelocationResource(role_service)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/roles", RolesResource(role_service))
    app.add_route("/v1/roles/by-handle/{handle}", lookup, suffix="by_handle")
    app.add_route("/v1/roles/by-name/{name}", lookup, suffix="by_name")
    app.add_route("/v1/roles/{role_id}", RoleResource(role_service))
    app.add_route("/v1/roles/{role_id}/undelete", state, suffix="undelete")
    app.add_route("/v1/roles/{role_id}/archive", state, suffix="archive")
    app.add_route("/v1/roles/{role_id}/unarchive", state, suffix="unarchive")
    app.add_route("/v1/roles/{role_id}/merge/{target_role_id}", relocation, suffix="merge")
    app.add_route("/v1/roles/{role_id}/move/{organisation_id}", relocation, suffix="move")
    app.add_route("/v1/roles/{role_id}/members", RoleMembersResource(role_service))
    app.add_route("/v1/roles/{role_id}/members/{user_id}", RoleMemberResource(role_service))
    app.add_route("/v1/users/{user_id}/memberships", UserMembershipsResource(role_service))
    return app
