"""Role repository port."""

from typing import Protocol

from rolegate.domain.entities import Role, RoleFilter, RoleMember


class RoleRepository(Protocol):
    """Port for role persistence.

    Lookups return None when the role does not exist; any exception is a
    storage failure. get_by_id returns archived and deleted roles as well.
    State transitions are idempotent.
    """

    async def get_by_id(self, role_id: int) -> Role | None: ...

    async def get_by_name(self, name: str) -> Role | None: ...

    async def get_by_handle(self, handle: str) -> Role | None: ...

    async def find(self, role_filter: RoleFilter) -> tuple[list[Role], RoleFilter]: ...

    async def create(self, role: Role) -> Role: ...

    async def update(self, role: Role) -> Role: ...

    async def archive(self, role_id: int) -> None: ...

    async def unarchive(self, role_id: int) -> None: ...

    async def soft_delete(self, role_id: int) -> None: ...

    async def undelete(self, role_id: int) -> None: ...

    async def merge(self, role_id: int, target_role_id: int) -> None: ...

    async def move(self, role_id: int, organisation_id: int) -> None: ...

    async def list_memberships_by_user(self, user_id: int) -> list[RoleMember]: ...

    async def list_members_by_role(self, role_id: int) -> list[RoleMember]: ...

    async def add_member(self, role_id: int, user_id: int) -> None: ...

    async def remove_member(self, role_id: int, user_id: int) -> None: ...
