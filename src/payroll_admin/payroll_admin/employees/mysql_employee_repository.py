from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..common.pagination import Page, PageQuery, like_pattern
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone, to_decimal
from .model import Employee, UserSummary
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.user_id, e.hourly_wage, e.is_active, e.created_at, e.updated_at,
           u.first_name, u.last_name, u.email, u.phone
    FROM employees e
    JOIN users u ON u.user_id = e.user_id
"""


def _row_to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        user_id=int(row["user_id"]),
        hourly_wage=to_decimal(row["hourly_wage"]),
        is_active=bool(row.get("is_active", True)),
        user=UserSummary(
            user_id=int(row["user_id"]),
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            phone=row.get("phone"),
        ),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE e.employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_user(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE e.user_id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_page(self, query: PageQuery, *, active_only: bool = True) -> Page[Employee]:
        where: list[str] = []
        params: list = []
        if active_only:
            where.append("e.is_active=1")
        if query.search:
            pattern = like_pattern(query.search)
            where.append("(u.first_name LIKE %s OR u.last_name LIKE %s OR u.email LIKE %s)")
            params.extend([pattern, pattern, pattern])
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS total FROM employees e JOIN users u ON u.user_id = e.user_id {where_sql}",
                tuple(params),
            )
            total = count(cur)
            cur.execute(
                f"{_SELECT} {where_sql} ORDER BY e.created_at DESC, e.employee_id DESC LIMIT %s OFFSET %s",
                tuple(params + [query.limit, query.offset]),
            )
            items = [_row_to_employee(r) for r in fetchall(cur)]
        return Page(items=items, total=total, query=query)

    def create(self, *, user_id: int, hourly_wage: Decimal) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO employees(user_id, hourly_wage, is_active) VALUES(%s,%s,1)",
                (user_id, hourly_wage),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, *, hourly_wage: Optional[Decimal] = None, is_active: Optional[bool] = None) -> bool:
        changes: dict = {}
        if hourly_wage is not None:
            changes["hourly_wage"] = hourly_wage
        if is_active is not None:
            changes["is_active"] = 1 if is_active else 0
        if not changes:
            return True
        assignments = ", ".join(f"{k}=%s" for k in changes)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                tuple(changes.values()) + (employee_id,),
            )
            return cur.rowcount > 0

    def list_available_users(self) -> Sequence[UserSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.first_name, u.last_name, u.email, u.phone
                FROM users u
                LEFT JOIN employees e ON e.user_id = u.user_id AND e.is_active = 1
                WHERE u.is_active = 1 AND e.employee_id IS NULL
                ORDER BY u.first_name, u.last_name
                """
            )
            return [
                UserSummary(
                    user_id=int(r["user_id"]),
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                    email=r["email"],
                    phone=r.get("phone"),
                )
                for r in fetchall(cur)
            ]

    def count_all(self, *, is_active: Optional[bool] = None) -> int:
        sql = "SELECT COUNT(*) AS total FROM employees"
        params: tuple = ()
        if is_active is not None:
            sql += " WHERE is_active=%s"
            params = (1 if is_active else 0,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return count(cur)
