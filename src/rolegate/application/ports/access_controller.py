"""Access controller port - role capability checks."""

from collections.abc import Callable
from typing import Protocol

from rolegate.domain.entities import Role
from rolegate.domain.value_objects import Actor


class RoleAccessController(Protocol):
    """Port for checking actor capabilities on roles."""

    async def can_access(self, actor: Actor) -> bool: ...

    async def can_create_role(self, actor: Actor) -> bool: ...

    async def can_read_role(self, actor: Actor, role: Role) -> bool: ...

    async def can_update_role(self, actor: Actor, role: Role) -> bool: ...

    async def can_delete_role(self, actor: Actor, role: Role) -> bool: ...

    async def can_manage_role_members(self, actor: Actor, role: Role) -> bool: ...

    async def filter_readable_roles(self, actor: Actor) -> Callable[[Role], bool]: ...
