"""PostgreSQL role repository implementation."""

from psycopg import AsyncConnection, errors

from rolegate.domain.entities import Role, RoleFilter, RoleMember
from rolegate.domain.exceptions import NotFound, RoleHandleNotUnique, RoleNameNotUnique
from rolegate.domain.value_objects import FilterState

_COLUMNS = "id, name, handle, organisation_id, created_at, updated_at, archived_at, deleted_at"

# Unique index name -> error raised when it is violated
_UNIQUE_INDEXES = {
    "ix_role_handle_unique": RoleHandleNotUnique,
    "ix_role_name_unique": RoleNameNotUnique,
}

FIND_BATCH_SIZE = 200


def _unique_error(e: errors.UniqueViolation) -> type[Exception] | None:
    """Domain error for the violated unique index, None if the index is unknown."""
    return _UNIQUE_INDEXES.get(e.diag.constraint_name or "")


def _row_to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        handle=r[2],
        organisation_id=r[3],
        created_at=r[4],
        updated_at=r[5],
        archived_at=r[6],
        deleted_at=r[7],
    )


def _state_condition(column: str, state: FilterState) -> str | None:
    if state == FilterState.EXCLUDED:
        return f"{column} IS NULL"
    if state == FilterState.EXCLUSIVE:
        return f"{column} IS NOT NULL"
    return None


def _like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _build_filter_conditions(role_filter: RoleFilter) -> tuple[list[str], list[object]]:
    """Build SQL WHERE conditions and params for the SQL-expressible filter parts."""
    conditions: list[str] = []
    params: list[object] = []
    for column, state in (
        ("deleted_at", role_filter.deleted),
        ("archived_at", role_filter.archived),
    ):
        cond = _state_condition(column, state)
        if cond:
            conditions.append(cond)
    if role_filter.name:
        conditions.append("name = %s")
        params.append(role_filter.name)
    if role_filter.handle:
        conditions.append("handle = %s")
        params.append(role_filter.handle)
    if role_filter.query:
        pattern = _like_pattern(role_filter.query)
        conditions.append("(name ILIKE %s OR handle ILIKE %s)")
        params.extend([pattern, pattern])
    return conditions, params


class PostgresRoleRepository:
    """Role repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def _get_one(self, column: str, value: object) -> Role | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM role WHERE {column} = %s",
            (value,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return _row_to_role(r)

    async def get_by_id(self, role_id: int) -> Role | None:
        """Get role by id, archived and deleted included."""
        return await self._get_one("id", role_id)

    async def get_by_name(self, name: str) -> Role | None:
        """Get role by name."""
        return await self._get_one("name", name)

    async def get_by_handle(self, handle: str) -> Role | None:
        """Get role by handle."""
        return await self._get_one("handle", handle)

    async def find(self, role_filter: RoleFilter) -> tuple[list[Role], RoleFilter]:
        """Search roles.

        SQL narrows by state, name, handle and query; the readability
        predicate is applied to fetched rows. Rows are read in id-ordered
        batches until limit readable roles are collected.
        """
        conditions, params = _build_filter_conditions(role_filter)
        conditions.append("id > %s")

        q = (
            f"SELECT {_COLUMNS} FROM role WHERE "
            + " AND ".join(conditions)
            + " ORDER BY id LIMIT %s"
        )

        roles: list[Role] = []
        last_id = 0
        while len(roles) < role_filter.limit:
            cur = await self._conn.execute(q, (*params, last_id, FIND_BATCH_SIZE))
            rows = await cur.fetchall()
            for r in rows:
                role = _row_to_role(r)
                if role_filter.is_readable is None or role_filter.is_readable(role):
                    roles.append(role)
                    if len(roles) >= role_filter.limit:
                        break
            if len(rows) < FIND_BATCH_SIZE:
                break
            last_id = rows[-1][0]
        return roles, role_filter

    async def create(self, role: Role) -> Role:
        """Insert role, id and timestamps are assigned by the database."""
        try:
            cur = await self._conn.execute(
                "INSERT INTO role (name, handle, organisation_id, created_at) "
                f"VALUES (%s, %s, %s, now()) RETURNING {_COLUMNS}",
                (role.name, role.handle, role.organisation_id),
            )
        except errors.UniqueViolation as e:
            error = _unique_error(e)
            if error is None:
                raise
            raise error() from e
        r = await cur.fetchone()
        return _row_to_role(r)

    async def update(self, role: Role) -> Role:
        """Update role name and handle."""
        try:
            cur = await self._conn.execute(
                "UPDATE role SET name = %s, handle = %s, updated_at = now() "
                f"WHERE id = %s RETURNING {_COLUMNS}",
                (role.name, role.handle, role.id),
            )
        except errors.UniqueViolation as e:
            error = _unique_error(e)
            if error is None:
                raise
            raise error() from e
        r = await cur.fetchone()
        if not r:
            raise NotFound("Role", role.id)
        return _row_to_role(r)

    async def _set_state(self, role_id: int, assignment: str) -> None:
        cur = await self._conn.execute(
            f"UPDATE role SET {assignment}, updated_at = now() WHERE id = %s",
            (role_id,),
        )
        if cur.rowcount == 0:
            raise NotFound("Role", role_id)

    async def archive(self, role_id: int) -> None:
        await self._set_state(role_id, "archived_at = COALESCE(archived_at, now())")

    async def unarchive(self, role_id: int) -> None:
        await self._set_state(role_id, "archived_at = NULL")

    async def soft_delete(self, role_id: int) -> None:
        await self._set_state(role_id, "deleted_at = COALESCE(deleted_at, now())")

    async def undelete(self, role_id: int) -> None:
        await self._set_state(role_id, "deleted_at = NULL")

    async def merge(self, role_id: int, target_role_id: int) -> None:
        """Move members of role to target role and soft-delete role."""
        cur = await self._conn.execute(
            "SELECT 1 FROM role WHERE id = %s AND deleted_at IS NULL",
            (target_role_id,),
        )
        if not await cur.fetchone():
            raise NotFound("Role", target_role_id)

        await self._conn.execute(
            "INSERT INTO role_member (role_id, user_id) "
            "SELECT %s, user_id FROM role_member WHERE role_id = %s "
            "ON CONFLICT DO NOTHING",
            (target_role_id, role_id),
        )
        await self._conn.execute(
            "DELETE FROM role_member WHERE role_id = %s",
            (role_id,),
        )
        await self.soft_delete(role_id)

    async def move(self, role_id: int, organisation_id: int) -> None:
        cur = await self._conn.execute(
            "UPDATE role SET organisation_id = %s, updated_at = now() WHERE id = %s",
            (organisation_id, role_id),
        )
        if cur.rowcount == 0:
            raise NotFound("Role", role_id)

    async def list_memberships_by_user(self, user_id: int) -> list[RoleMember]:
        """List memberships of user."""
        cur = await self._conn.execute(
            "SELECT role_id, user_id FROM role_member WHERE user_id = %s ORDER BY role_id",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [RoleMember(role_id=r[0], user_id=r[1]) for r in rows]

    async def list_members_by_role(self, role_id: int) -> list[RoleMember]:
        """List members of role."""
        cur = await self._conn.execute(
            "SELECT role_id, user_id FROM role_member WHERE role_id = %s ORDER BY user_id",
            (role_id,),
        )
        rows = await cur.fetchall()
        return [RoleMember(role_id=r[0], user_id=r[1]) for r in rows]

    async def add_member(self, role_id: int, user_id: int) -> None:
        await self._conn.execute(
            "INSERT INTO role_member (role_id, user_id) VALUES (%s, %s) ON CONFLICT DO NOTHING",
            (role_id, user_id),
        )

    async def remove_member(self, role_id: int, user_id: int) -> None:
        await self._conn.execute(
            "DELETE FROM role_member WHERE role_id = %s AND user_id = %s",
            (role_id, user_id),
        )
