from __future__ import annotations

from typing import Optional, Sequence

from ..common.pagination import Page, PageQuery, like_pattern
from ..core.enums import PermissionAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone, in_clause
from .model import Permission
from .repository import PermissionRepository

_COLUMNS = "permission_id, name, description, module, action, is_active, created_at, updated_at"
_UPDATABLE = ("name", "description", "module", "action")


def _row_to_permission(row: dict) -> Permission:
    return Permission(
        permission_id=int(row["permission_id"]),
        name=row["name"],
        description=row.get("description"),
        module=row["module"],
        action=PermissionAction(row["action"]),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLPermissionRepository(PermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, permission_id: int) -> Optional[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM permissions WHERE permission_id=%s", (permission_id,))
            row = fetchone(cur)
            return _row_to_permission(row) if row else None

    def get_by_name(self, name: str) -> Optional[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM permissions WHERE name=%s", (name,))
            row = fetchone(cur)
            return _row_to_permission(row) if row else None

    def get_many(self, permission_ids: Sequence[int]) -> Sequence[Permission]:
        ids = [int(i) for i in permission_ids]
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM permissions WHERE permission_id IN ({in_clause(ids)})",
                tuple(ids),
            )
            return [_row_to_permission(r) for r in fetchall(cur)]

    def list_page(
        self,
        query: PageQuery,
        *,
        module: Optional[str] = None,
        action: Optional[PermissionAction] = None,
    ) -> Page[Permission]:
        where: list[str] = []
        params: list = []
        if query.search:
            pattern = like_pattern(query.search)
            where.append("(name LIKE %s OR description LIKE %s OR module LIKE %s)")
            params.extend([pattern, pattern, pattern])
        if module:
            where.append("module LIKE %s")
            params.append(like_pattern(module))
        if action:
            where.append("action=%s")
            params.append(action.value)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM permissions {where_sql}", tuple(params))
            total = count(cur)
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM permissions
                {where_sql}
                ORDER BY module ASC, name ASC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [query.limit, query.offset]),
            )
            items = [_row_to_permission(r) for r in fetchall(cur)]
        return Page(items=items, total=total, query=query)

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        module: str,
        action: PermissionAction,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO permissions(name, description, module, action, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (name, description, module, action.value),
            )
            return int(cur.lastrowid)

    def update(self, permission_id: int, **fields) -> bool:
        changes = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if not changes:
            return True
        if isinstance(changes.get("action"), PermissionAction):
            changes["action"] = changes["action"].value
        assignments = ", ".join(f"{k}=%s" for k in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE permissions SET {assignments} WHERE permission_id=%s",
                tuple(changes.values()) + (permission_id,),
            )
            return cur.rowcount > 0

    def delete_by_id(self, permission_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM permissions WHERE permission_id=%s", (permission_id,))
            return cur.rowcount > 0

    def set_active(self, permission_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE permissions SET is_active=%s WHERE permission_id=%s",
                (1 if is_active else 0, permission_id),
            )
            return cur.rowcount > 0

    def count_roles_using(self, permission_id: int, *, active_only: bool) -> int:
        sql = """
            SELECT COUNT(*) AS total
            FROM role_permissions rp
            JOIN roles r ON r.role_id = rp.role_id
            WHERE rp.permission_id=%s
        """
        if active_only:
            sql += " AND r.is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (permission_id,))
            return count(cur)

    def list_modules(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT module FROM permissions ORDER BY module")
            return [r["module"] for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM permissions")
            return count(cur)
