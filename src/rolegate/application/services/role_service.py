"""Role service - validation, authorization and lifecycle of roles."""

from collections.abc import Awaitable, Callable
from dataclasses import replace

import structlog

from rolegate.application.ports import RoleAccessController, UnitOfWorkFactory
from rolegate.application.ports.repositories import RoleRepository
from rolegate.domain.entities import Role, RoleFilter, RoleMember
from rolegate.domain.exceptions import (
    InvalidHandle,
    InvalidID,
    MemberManagementDenied,
    NoCreatePermission,
    NoPermission,
    NotFound,
    NoUpdatePermission,
    RoleHandleNotUnique,
    RoleNameNotUnique,
)
from rolegate.domain.value_objects import Actor, is_valid_handle
from rolegate.logging import get_logger


class RoleService:
    """Single entry point for role reads, writes and membership changes.

    Bound to one acting identity. Authorization runs before any write and,
    for operations on existing roles, against the role as currently stored.
    No access controller call is made while a unit of work is open.
    """

    def __init__(
        self,
        unit_of_work_factory: UnitOfWorkFactory,
        access_controller: RoleAccessController,
        actor: Actor,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
        unique_check_fail_open: bool = False,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._ac = access_controller
        self._actor = actor
        self._logger = logger or get_logger("rolegate.role")
        self._log = self._logger.bind(actor_id=actor.user_id)
        self._unique_check_fail_open = unique_check_fail_open

    @property
    def actor(self) -> Actor:
        return self._actor

    def with_actor(self, actor: Actor) -> "RoleService":
        """Return service with same dependencies bound to another actor."""
        return RoleService(
            self._uow_factory,
            self._ac,
            actor,
            logger=self._logger,
            unique_check_fail_open=self._unique_check_fail_open,
        )

    # --- reads ---

    async def find_by_id(self, role_id: int) -> Role:
        """Get role by id. Actor must be able to read it."""
        return await self._find_by_id(role_id)

    async def find(self, role_filter: RoleFilter | None = None) -> tuple[list[Role], RoleFilter]:
        """Search roles visible to the actor.

        Deleted or archived roles are only listed for actors that can access
        restricted views.
        """
        f = replace(role_filter) if role_filter else RoleFilter()
        f.is_readable = await self._ac.filter_readable_roles(self._actor)

        if f.includes_restricted:
            self._require(await self._ac.can_access(self._actor), "access", None)

        async with self._uow_factory() as uow:
            return await uow.roles.find(f)

    async def find_by_name(self, name: str) -> Role | None:
        """Get role by name. Not authorization-gated."""
        async with self._uow_factory() as uow:
            return await uow.roles.get_by_name(name)

    async def find_by_handle(self, handle: str) -> Role | None:
        """Get role by handle. Not authorization-gated."""
        async with self._uow_factory() as uow:
            return await uow.roles.get_by_handle(handle)

    # --- writes ---

    async def create(self, role: Role) -> Role:
        """Validate, authorize and persist a new role.

        Uniqueness check and insert share one unit of work.
        """
        if not is_valid_handle(role.handle):
            raise InvalidHandle()

        if not await self._ac.can_create_role(self._actor):
            self._log.warning("role.permission_denied", capability="create")
            raise NoCreatePermission()

        new = replace(role, id=0, archived_at=None, deleted_at=None)
        async with self._uow_factory() as uow:
            await self._unique_check(uow.roles, new)
            created = await uow.roles.create(new)

        self._log.info("role.created", role_id=created.id, handle=created.handle)
        return created

    async def update(self, role: Role) -> Role:
        """Update name and handle of an existing role.

        The permission gate sees the incoming role, the stored one is fetched
        inside the unit of work. Fields other than name and handle are kept.
        """
        if role.id <= 0:
            raise InvalidID()

        if not is_valid_handle(role.handle):
            raise InvalidHandle()

        if not await self._ac.can_update_role(self._actor, role):
            self._log.warning("role.permission_denied", capability="update", role_id=role.id)
            raise NoUpdatePermission()

        # TODO: reject edits of archived and deleted roles
        async with self._uow_factory() as uow:
            current = await uow.roles.get_by_id(role.id)
            if current is None:
                raise NotFound("Role", role.id)

            await self._unique_check(uow.roles, role)

            current.name = role.name
            current.handle = role.handle
            updated = await uow.roles.update(current)

        self._log.info("role.updated", role_id=updated.id, handle=updated.handle)
        return updated

    async def unique_check(self, role: Role) -> None:
        """Raise if another role already owns role's handle or name."""
        async with self._uow_factory() as uow:
            await self._unique_check(uow.roles, role)

    async def delete(self, role_id: int) -> None:
        role = await self._find_by_id(role_id)
        self._require(await self._ac.can_delete_role(self._actor, role), "delete", role_id)
        async with self._uow_factory() as uow:
            await uow.roles.soft_delete(role_id)
        self._log.info("role.deleted", role_id=role_id)

    async def undelete(self, role_id: int) -> None:
        role = await self._find_by_id(role_id)
        self._require(await self._ac.can_delete_role(self._actor, role), "delete", role_id)
        async with self._uow_factory() as uow:
            await uow.roles.undelete(role_id)
        self._log.info("role.undeleted", role_id=role_id)

    async def archive(self, role_id: int) -> None:
        """Archive role. Archiving counts as an update, not a delete."""
        role = await self._find_by_id(role_id)
        self._require(await self._ac.can_update_role(self._actor, role), "update", role_id)
        async with self._uow_factory() as uow:
            await uow.roles.archive(role_id)
        self._log.info("role.archived", role_id=role_id)

    async def unarchive(self, role_id: int) -> None:
        role = await self._find_by_id(role_id)
        self._require(await self._ac.can_update_role(self._actor, role), "update", role_id)
        async with self._uow_factory() as uow:
            await uow.roles.unarchive(role_id)
        self._log.info("role.unarchived", role_id=role_id)

    async def merge(self, role_id: int, target_role_id: int) -> None:
        """Merge role into target role. How members are merged is up to the repository."""
        role = await self._find_by_id(role_id)

        if target_role_id <= 0 or target_role_id == role_id:
            raise InvalidID()

        self._require(await self._ac.can_update_role(self._actor, role), "update", role_id)
        async with self._uow_factory() as uow:
            await uow.roles.merge(role_id, target_role_id)
        self._log.info("role.merged", role_id=role_id, target_role_id=target_role_id)

    async def move(self, role_id: int, organisation_id: int) -> None:
        """Move role to another organisation."""
        role = await self._find_by_id(role_id)

        if organisation_id <= 0:
            raise InvalidID()

        self._require(await self._ac.can_update_role(self._actor, role), "update", role_id)
        async with self._uow_factory() as uow:
            await uow.roles.move(role_id, organisation_id)
        self._log.info("role.moved", role_id=role_id, organisation_id=organisation_id)

    # --- membership ---

    async def membership(self, user_id: int) -> list[RoleMember]:
        """List all role memberships of a user. Not authorization-gated."""
        async with self._uow_factory() as uow:
            return await uow.roles.list_memberships_by_user(user_id)

    async def member_list(self, role_id: int) -> list[RoleMember]:
        await self._find_by_id(role_id)
        async with self._uow_factory() as uow:
            return await uow.roles.list_members_by_role(role_id)

    async def member_add(self, role_id: int, user_id: int) -> None:
        role = await self._find_by_id(role_id)

        if user_id <= 0:
            raise InvalidID()

        await self._require_member_management(role)
        async with self._uow_factory() as uow:
            await uow.roles.add_member(role_id, user_id)
        self._log.info("role.member_added", role_id=role_id, user_id=user_id)

    async def member_remove(self, role_id: int, user_id: int) -> None:
        role = await self._find_by_id(role_id)

        if user_id <= 0:
            raise InvalidID()

        await self._require_member_management(role)
        async with self._uow_factory() as uow:
            await uow.roles.remove_member(role_id, user_id)
        self._log.info("role.member_removed", role_id=role_id, user_id=user_id)

    # --- helpers ---

    async def _find_by_id(self, role_id: int) -> Role:
        if role_id <= 0:
            raise InvalidID()

        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
        if role is None:
            raise NotFound("Role", role_id)

        self._require(await self._ac.can_read_role(self._actor, role), "read", role_id)
        return role

    def _require(self, allowed: bool, capability: str, role_id: int | None) -> None:
        if allowed:
            return
        self._log.warning("role.permission_denied", capability=capability, role_id=role_id)
        raise NoPermission(f"Not allowed to {capability} role")

    async def _require_member_management(self, role: Role) -> None:
        if not await self._ac.can_manage_role_members(self._actor, role):
            self._log.warning(
                "role.permission_denied", capability="manage_members", role_id=role.id
            )
            raise MemberManagementDenied()

    async def _unique_check(self, roles: RoleRepository, role: Role) -> None:
        # Handle before name.
        if role.handle:
            existing = await self._lookup(roles.get_by_handle, role.handle)
            if existing is not None and existing.id > 0 and existing.id != role.id:
                raise RoleHandleNotUnique()

        if role.name:
            existing = await self._lookup(roles.get_by_name, role.name)
            if existing is not None and existing.id > 0 and existing.id != role.id:
                raise RoleNameNotUnique()

    async def _lookup(
        self, lookup: Callable[[str], Awaitable[Role | None]], value: str
    ) -> Role | None:
        """Run a uniqueness lookup; failures propagate unless fail-open is configured.

        The lookup runs in a nested unit so that a failed statement is rolled
        back on its own and the enclosing unit stays usable.
        """
        try:
            async with self._uow_factory():
                return await lookup(value)
        except Exception:
            if not self._unique_check_fail_open:
                raise
            self._log.warning("role.unique_check_lookup_failed", value=value, exc_info=True)
            return None
