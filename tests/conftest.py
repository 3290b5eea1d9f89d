"""Pytest fixtures for Rolegate tests."""

from __future__ import annotations

import asyncio
import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from rolegate.application.services.role_service import RoleService
from rolegate.domain.entities import Role, RoleFilter, RoleMember
from rolegate.domain.exceptions import NotFound, RoleHandleNotUnique, RoleNameNotUnique
from rolegate.domain.value_objects import Actor


# --- Fake repositories ---


class FakeRoleRepository:
    """In-memory role repository.

    Lookups yield to the event loop so concurrent callers interleave.
    create/update enforce uniqueness like the database unique indexes.
    """

    def __init__(self) -> None:
        self._by_id: dict[int, Role] = {}
        self._members: set[tuple[int, int]] = set()
        self._next_id = 1

    def snapshot(self) -> tuple:
        return copy.deepcopy((self._by_id, self._members, self._next_id))

    def restore(self, state: tuple) -> None:
        self._by_id, self._members, self._next_id = state

    async def get_by_id(self, role_id: int) -> Role | None:
        await asyncio.sleep(0)
        role = self._by_id.get(role_id)
        return replace(role) if role else None

    async def get_by_name(self, name: str) -> Role | None:
        await asyncio.sleep(0)
        for role in self._by_id.values():
            if role.name == name:
                return replace(role)
        return None

    async def get_by_handle(self, handle: str) -> Role | None:
        await asyncio.sleep(0)
        for role in self._by_id.values():
            if role.handle == handle:
                return replace(role)
        return None

    async def find(self, role_filter: RoleFilter) -> tuple[list[Role], RoleFilter]:
        items = [
            replace(r)
            for r in sorted(self._by_id.values(), key=lambda r: r.id)
            if role_filter.matches(r)
        ]
        return items[: role_filter.limit], role_filter

    def _check_unique(self, role: Role) -> None:
        for other in self._by_id.values():
            if other.id == role.id:
                continue
            if role.handle and other.handle == role.handle:
                raise RoleHandleNotUnique()
            if role.name and other.name == role.name:
                raise RoleNameNotUnique()

    async def create(self, role: Role) -> Role:
        self._check_unique(role)
        now = datetime.now(UTC)
        created = replace(role, id=self._next_id, created_at=now)
        self._next_id += 1
        self._by_id[created.id] = created
        return replace(created)

    async def update(self, role: Role) -> Role:
        if role.id not in self._by_id:
            raise NotFound("Role", role.id)
        self._check_unique(role)
        updated = replace(role, updated_at=datetime.now(UTC))
        self._by_id[role.id] = updated
        return replace(updated)

    def _set(self, role_id: int, **changes: object) -> None:
        role = self._by_id.get(role_id)
        if role is None:
            raise NotFound("Role", role_id)
        self._by_id[role_id] = replace(role, **changes)

    async def archive(self, role_id: int) -> None:
        role = self._by_id.get(role_id)
        self._set(role_id, archived_at=(role and role.archived_at) or datetime.now(UTC))

    async def unarchive(self, role_id: int) -> None:
        self._set(role_id, archived_at=None)

    async def soft_delete(self, role_id: int) -> None:
        role = self._by_id.get(role_id)
        self._set(role_id, deleted_at=(role and role.deleted_at) or datetime.now(UTC))

    async def undelete(self, role_id: int) -> None:
        self._set(role_id, deleted_at=None)

    async def merge(self, role_id: int, target_role_id: int) -> None:
        target = self._by_id.get(target_role_id)
        if target is None or target.is_deleted:
            raise NotFound("Role", target_role_id)
        for rid, uid in list(self._members):
            if rid == role_id:
                self._members.discard((rid, uid))
                self._members.add((target_role_id, uid))
        await self.soft_delete(role_id)

    async def move(self, role_id: int, organisation_id: int) -> None:
        self._set(role_id, organisation_id=organisation_id)

    async def list_memberships_by_user(self, user_id: int) -> list[RoleMember]:
        return [RoleMember(r, u) for r, u in sorted(self._members) if u == user_id]

    async def list_members_by_role(self, role_id: int) -> list[RoleMember]:
        return [RoleMember(r, u) for r, u in sorted(self._members) if r == role_id]

    async def add_member(self, role_id: int, user_id: int) -> None:
        self._members.add((role_id, user_id))

    async def remove_member(self, role_id: int, user_id: int) -> None:
        self._members.discard((role_id, user_id))

    def add_role(self, role: Role) -> Role:
        """Helper to add role for tests."""
        if not role.id:
            role = replace(role, id=self._next_id)
        self._next_id = max(self._next_id, role.id + 1)
        self._by_id[role.id] = role
        return role

    def stored(self, role_id: int) -> Role | None:
        """Helper to read stored role without yielding."""
        return self._by_id.get(role_id)


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work over a shared role repository."""

    def __init__(self, roles: FakeRoleRepository | None = None) -> None:
        self.roles = roles or FakeRoleRepository()
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def make_uow_factory(uow: FakeUnitOfWork, *, restore: bool = True):
    """Factory yielding the same UoW; state is restored when the block raises.

    Snapshots are shared, so pass restore=False when blocks interleave.
    """

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        state = uow.roles.snapshot() if restore else None
        try:
            yield uow
        except BaseException:
            if state is not None:
                uow.roles.restore(state)
            await uow.rollback()
            raise
        await uow.commit()

    return _factory


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow):
    """Factory returning async context manager with the test's FakeUnitOfWork."""
    return make_uow_factory(fake_uow)


@pytest.fixture
def mock_access_controller():
    """AsyncMock for RoleAccessController - allows everything by default."""
    mock = AsyncMock()
    mock.can_access.return_value = True
    mock.can_create_role.return_value = True
    mock.can_read_role.return_value = True
    mock.can_update_role.return_value = True
    mock.can_delete_role.return_value = True
    mock.can_manage_role_members.return_value = True
    mock.filter_readable_roles.return_value = lambda role: True
    return mock


@pytest.fixture
def actor() -> Actor:
    return Actor(user_id="user-1", realm_roles=frozenset({"rolegate-admin"}))


@pytest.fixture
def role_service(uow_factory, mock_access_controller, actor) -> RoleService:
    return RoleService(
        unit_of_work_factory=uow_factory,
        access_controller=mock_access_controller,
        actor=actor,
    )
