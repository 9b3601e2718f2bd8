from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.pagination import Page, PageQuery, like_pattern
from ..core.enums import AuthProvider
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_SELECT = """
    SELECT u.user_id, u.first_name, u.last_name, u.email, u.phone, u.password_hash,
           u.role_id, u.is_active, u.auth_provider, u.auth_provider_id, u.last_login,
           u.created_at, u.updated_at, r.name AS role_name
    FROM users u
    LEFT JOIN roles r ON r.role_id = u.role_id
"""
_UPDATABLE = ("first_name", "last_name", "email", "phone", "role_id", "password_hash")


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone=row["phone"],
        role_id=int(row["role_id"]),
        password_hash=row.get("password_hash"),
        is_active=bool(row.get("is_active", True)),
        auth_provider=AuthProvider(row.get("auth_provider") or AuthProvider.LOCAL.value),
        auth_provider_id=row.get("auth_provider_id"),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        role_name=row.get("role_name"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE u.user_id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE u.email=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_page(
        self,
        query: PageQuery,
        *,
        role_id: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Page[User]:
        where: list[str] = []
        params: list = []
        if query.search:
            pattern = like_pattern(query.search)
            where.append("(u.first_name LIKE %s OR u.last_name LIKE %s OR u.email LIKE %s)")
            params.extend([pattern, pattern, pattern])
        if role_id is not None:
            where.append("u.role_id=%s")
            params.append(role_id)
        if is_active is not None:
            where.append("u.is_active=%s")
            params.append(1 if is_active else 0)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM users u {where_sql}", tuple(params))
            total = count(cur)
            cur.execute(
                f"{_SELECT} {where_sql} ORDER BY u.created_at DESC, u.user_id DESC LIMIT %s OFFSET %s",
                tuple(params + [query.limit, query.offset]),
            )
            items = [_row_to_user(r) for r in fetchall(cur)]
        return Page(items=items, total=total, query=query)

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        role_id: int,
        password_hash: Optional[str],
        auth_provider: AuthProvider = AuthProvider.LOCAL,
        auth_provider_id: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(first_name, last_name, email, phone, password_hash, role_id,
                                  is_active, auth_provider, auth_provider_id)
                VALUES(%s,%s,%s,%s,%s,%s,1,%s,%s)
                """,
                (
                    first_name,
                    last_name,
                    email,
                    phone,
                    password_hash,
                    role_id,
                    auth_provider.value,
                    auth_provider_id,
                ),
            )
            return int(cur.lastrowid)

    def update(self, user_id: int, **fields) -> bool:
        changes = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if not changes:
            return True
        assignments = ", ".join(f"{k}=%s" for k in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s",
                tuple(changes.values()) + (user_id,),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, user_id))
            return cur.rowcount > 0

    def touch_last_login(self, user_id: int, when: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET last_login=%s WHERE user_id=%s", (when, user_id))

    def count_active_by_role(self, role_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users WHERE role_id=%s AND is_active=1", (role_id,))
            return count(cur)

    def count_all(self, *, is_active: Optional[bool] = None) -> int:
        sql = "SELECT COUNT(*) AS total FROM users"
        params: tuple = ()
        if is_active is not None:
            sql += " WHERE is_active=%s"
            params = (1 if is_active else 0,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return count(cur)
