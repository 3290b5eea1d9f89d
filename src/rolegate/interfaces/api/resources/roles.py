"""Roles API resources."""

import falcon
import falcon.asgi

from rolegate.application.services.role_service import RoleService
from rolegate.domain.entities import Role, RoleFilter, RoleMember
from rolegate.domain.exceptions import NotFound, ValidationError
from rolegate.domain.value_objects import FilterState


async def require_actor(req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, params) -> None:
    """Bind the resource's role service to the authenticated actor."""
    user = getattr(req.context, "user", None)
    if user is None or user.is_anonymous:
        raise falcon.HTTPUnauthorized(title="Unauthorized")
    req.context.roles = resource.role_service.with_actor(user)


def _parse_id(value: str, name: str) -> int:
    # ASCII digits only: no sign, whitespace or underscores
    if not (value.isascii() and value.isdigit()):
        raise ValidationError(f"Invalid {name}: {value!r}")
    return int(value)


def _filter_state(req: falcon.asgi.Request, name: str) -> FilterState:
    value = req.get_param(name)
    try:
        return FilterState.parse(value)
    except (KeyError, ValueError):
        raise ValidationError(f"Invalid {name} filter: {value!r}") from None


def _role_to_dict(role: Role) -> dict:
    return {
        "id": str(role.id),
        "name": role.name,
        "handle": role.handle,
        "organisation_id": str(role.organisation_id),
        "created_at": role.created_at.isoformat() if role.created_at else None,
        "updated_at": role.updated_at.isoformat() if role.updated_at else None,
        "archived_at": role.archived_at.isoformat() if role.archived_at else None,
        "deleted_at": role.deleted_at.isoformat() if role.deleted_at else None,
    }


def _member_to_dict(member: RoleMember) -> dict:
    return {"role_id": str(member.role_id), "user_id": str(member.user_id)}


async def _role_payload(req: falcon.asgi.Request) -> tuple[str, str]:
    body = await req.get_media(default_when_empty=None)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    name = body.get("name", "")
    handle = body.get("handle", "")
    if not isinstance(name, str) or not isinstance(handle, str):
        raise ValidationError("Fields name and handle must be strings")
    return name.strip(), handle.strip()


class _RoleResourceBase:
    def __init__(self, role_service: RoleService) -> None:
        self.role_service = role_service


@falcon.before(require_actor)
class RolesResource(_RoleResourceBase):
    """GET/POST /v1/roles - search and create roles."""

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Search roles visible to the caller."""
        role_filter = RoleFilter(
            query=req.get_param("query", default=""),
            name=req.get_param("name", default=""),
            handle=req.get_param("handle", default=""),
            deleted=_filter_state(req, "deleted"),
            archived=_filter_state(req, "archived"),
            limit=req.get_param_as_int("limit", min_value=1, max_value=1000, default=100),
        )
        roles, effective = await req.context.roles.find(role_filter)
        resp.media = {
            "items": [_role_to_dict(r) for r in roles],
            "filter": {
                "query": effective.query,
                "name": effective.name,
                "handle": effective.handle,
                "deleted": int(effective.deleted),
                "archived": int(effective.archived),
                "limit": effective.limit,
            },
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create role."""
        name, handle = await _role_payload(req)
        role = await req.context.roles.create(Role(name=name, handle=handle))
        resp.media = _role_to_dict(role)
        resp.status = falcon.HTTP_201


@falcon.before(require_actor)
class RoleResource(_RoleResourceBase):
    """GET/PUT/DELETE /v1/roles/{role_id}."""

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str) -> None:
        role = await req.context.roles.find_by_id(_parse_id(role_id, "role ID"))
        resp.media = _role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_put(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str) -> None:
        """Update role name and handle."""
        name, handle = await _role_payload(req)
        role = await req.context.roles.update(
            Role(id=_parse_id(role_id, "role ID"), name=name, handle=handle)
        )
        resp.media = _role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_delete(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str) -> None:
        await req.context.roles.delete(_parse_id(role_id, "role ID"))
        resp.status = falcon.HTTP_204


@falcon.before(require_actor)
class RoleLookupResource(_RoleResourceBase):
    """GET /v1/roles/by-handle/{handle} and /v1/roles/by-name/{name}."""

    async def on_get_by_handle(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, handle: str
    ) -> None:
        role = await req.context.roles.find_by_handle(handle)
        if role is None:
            raise NotFound("Role", handle)
        resp.media = _role_to_dict(role)
        resp.status = falcon.HTTP_200

    async def on_get_by_name(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, name: str
    ) -> None:
        role = await req.context.roles.find_by_name(name)
        if role is None:
            raise NotFound("Role", name)
        resp.media = _role_to_dict(role)
        resp.status = falcon.HTTP_200


@falcon.before(require_actor)
class RoleStateResource(_RoleResourceBase):
    """POST /v1/roles/{role_id}/undelete|archive|unarchive."""

    async def on_post_undelete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        await req.context.roles.undelete(_parse_id(role_id, "role ID"))
        resp.status = falcon.HTTP_204

    async def on_post_archive(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        await req.context.roles.archive(_parse_id(role_id, "role ID"))
        resp.status = falcon.HTTP_204

    async def on_post_unarchive(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        await req.context.roles.unarchive(_parse_id(role_id, "role ID"))
        resp.status = falcon.HTTP_204


@falcon.before(require_actor)
class RoleRelocationResource(_RoleResourceBase):
    """POST /v1/roles/{role_id}/merge/{target_role_id} and /move/{organisation_id}."""

    async def on_post_merge(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: str,
        target_role_id: str,
    ) -> None:
        await req.context.roles.merge(
            _parse_id(role_id, "role ID"), _parse_id(target_role_id, "target role ID")
        )
        resp.status = falcon.HTTP_204

    async def on_post_move(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: str,
        organisation_id: str,
    ) -> None:
        await req.context.roles.move(
            _parse_id(role_id, "role ID"), _parse_id(organisation_id, "organisation ID")
        )
        resp.status = falcon.HTTP_204


@falcon.before(require_actor)
class RoleMembersResource(_RoleResourceBase):
    """GET /v1/roles/{role_id}/members."""

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str) -> None:
        members = await req.context.roles.member_list(_parse_id(role_id, "role ID"))
        resp.media = {"items": [_member_to_dict(m) for m in members]}
        resp.status = falcon.HTTP_200


@falcon.before(require_actor)
class RoleMemberResource(_RoleResourceBase):
    """POST/DELETE /v1/roles/{role_id}/members/{user_id}."""

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str, user_id: str
    ) -> None:
        await req.context.roles.member_add(
            _parse_id(role_id, "role ID"), _parse_id(user_id, "user ID")
        )
        resp.status = falcon.HTTP_204

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str, user_id: str
    ) -> None:
        await req.context.roles.member_remove(
            _parse_id(role_id, "role ID"), _parse_id(user_id, "user ID")
        )
        resp.status = falcon.HTTP_204


@falcon.before(require_actor)
class UserMembershipsResource(_RoleResourceBase):
    """GET /v1/users/{user_id}/memberships."""

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str) -> None:
        members = await req.context.roles.membership(_parse_id(user_id, "user ID"))
        resp.media = {"items": [_member_to_dict(m) for m in members]}
        resp.status = falcon.HTTP_200
