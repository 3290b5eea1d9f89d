"""Access controller backed by identity provider realm roles."""

from collections.abc import Callable, Iterable

from rolegate.domain.entities import Role
from rolegate.domain.value_objects import Actor


class RealmRoleAccessController:
    """Grants role capabilities from the actor's realm roles.

    Admins can do everything. Managers can read, update and manage members of
    roles that are not deleted. Other identified actors can read roles that
    are not deleted. Anonymous actors can do nothing.
    """

    def __init__(self, admin_roles: Iterable[str], manager_roles: Iterable[str] = ()) -> None:
        self._admin_roles = frozenset(admin_roles)
        self._manager_roles = frozenset(manager_roles)

    def _is_admin(self, actor: Actor) -> bool:
        return not actor.is_anonymous and bool(actor.realm_roles & self._admin_roles)

    def _is_manager(self, actor: Actor) -> bool:
        return not actor.is_anonymous and bool(actor.realm_roles & self._manager_roles)

    async def can_access(self, actor: Actor) -> bool:
        return self._is_admin(actor)

    async def can_create_role(self, actor: Actor) -> bool:
        return self._is_admin(actor)

    async def can_read_role(self, actor: Actor, role: Role) -> bool:
        return self._readable(actor)(role)

    async def can_update_role(self, actor: Actor, role: Role) -> bool:
        if self._is_admin(actor):
            return True
        return self._is_manager(actor) and not role.is_deleted

    async def can_delete_role(self, actor: Actor, role: Role) -> bool:
        return self._is_admin(actor)

    async def can_manage_role_members(self, actor: Actor, role: Role) -> bool:
        return await self.can_update_role(actor, role)

    async def filter_readable_roles(self, actor: Actor) -> Callable[[Role], bool]:
        return self._readable(actor)

    def _readable(self, actor: Actor) -> Callable[[Role], bool]:
        if self._is_admin(actor):
            return lambda role: True
        if actor.is_anonymous:
            return lambda role: False
        return lambda role: not role.is_deleted
