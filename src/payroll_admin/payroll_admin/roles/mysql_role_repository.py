from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..common.pagination import Page, PageQuery, like_pattern
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone, in_clause
from .model import Role
from .repository import RoleRepository

_COLUMNS = "role_id, name, description, is_active, created_at, updated_at"
_UPDATABLE = ("name", "description")


def _row_to_role(row: dict, permission_ids: Sequence[int]) -> Role:
    return Role(
        role_id=int(row["role_id"]),
        name=row["name"],
        description=row.get("description"),
        permission_ids=tuple(sorted(int(p) for p in permission_ids)),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _load_permission_ids(cur, role_ids: Sequence[int]) -> dict[int, list[int]]:
    by_role: dict[int, list[int]] = defaultdict(list)
    if not role_ids:
        return by_role
    cur.execute(
        f"SELECT role_id, permission_id FROM role_permissions WHERE role_id IN ({in_clause(role_ids)})",
        tuple(role_ids),
    )
    for r in fetchall(cur):
        by_role[int(r["role_id"])].append(int(r["permission_id"]))
    return by_role


class MySQLRoleRepository(RoleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_where(self, where: str, value) -> Optional[Role]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM roles WHERE {where}=%s", (value,))
            row = fetchone(cur)
            if not row:
                return None
            perms = _load_permission_ids(cur, [int(row["role_id"])])
            return _row_to_role(row, perms[int(row["role_id"])])

    def get_by_id(self, role_id: int) -> Optional[Role]:
        return self._get_where("role_id", role_id)

    def get_by_name(self, name: str) -> Optional[Role]:
        return self._get_where("name", name)

    def list_page(self, query: PageQuery, *, is_active: Optional[bool] = None) -> Page[Role]:
        where: list[str] = []
        params: list = []
        if query.search:
            pattern = like_pattern(query.search)
            where.append("(name LIKE %s OR description LIKE %s)")
            params.extend([pattern, pattern])
        if is_active is not None:
            where.append("is_active=%s")
            params.append(1 if is_active else 0)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM roles {where_sql}", tuple(params))
            total = count(cur)
            cur.execute(
                f"SELECT {_COLUMNS} FROM roles {where_sql} ORDER BY name ASC LIMIT %s OFFSET %s",
                tuple(params + [query.limit, query.offset]),
            )
            rows = fetchall(cur)
            perms = _load_permission_ids(cur, [int(r["role_id"]) for r in rows])
            items = [_row_to_role(r, perms[int(r["role_id"])]) for r in rows]
        return Page(items=items, total=total, query=query)

    def create(self, *, name: str, description: Optional[str], permission_ids: Sequence[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO roles(name, description, is_active) VALUES(%s,%s,1)",
                (name, description),
            )
            role_id = int(cur.lastrowid)
            if permission_ids:
                cur.executemany(
                    "INSERT INTO role_permissions(role_id, permission_id) VALUES(%s,%s)",
                    [(role_id, int(p)) for p in sorted(set(permission_ids))],
                )
            return role_id

    def update(self, role_id: int, **fields) -> bool:
        changes = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if not changes:
            return True
        assignments = ", ".join(f"{k}=%s" for k in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE roles SET {assignments} WHERE role_id=%s",
                tuple(changes.values()) + (role_id,),
            )
            return cur.rowcount > 0

    def set_permissions(self, role_id: int, permission_ids: Sequence[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM role_permissions WHERE role_id=%s", (role_id,))
            if permission_ids:
                cur.executemany(
                    "INSERT INTO role_permissions(role_id, permission_id) VALUES(%s,%s)",
                    [(role_id, int(p)) for p in sorted(set(permission_ids))],
                )

    def delete_by_id(self, role_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM roles WHERE role_id=%s", (role_id,))
            return cur.rowcount > 0

    def set_active(self, role_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE roles SET is_active=%s WHERE role_id=%s", (1 if is_active else 0, role_id))
            return cur.rowcount > 0

    def count_all(self, *, is_active: Optional[bool] = None) -> int:
        sql = "SELECT COUNT(*) AS total FROM roles"
        params: tuple = ()
        if is_active is not None:
            sql += " WHERE is_active=%s"
            params = (1 if is_active else 0,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return count(cur)
