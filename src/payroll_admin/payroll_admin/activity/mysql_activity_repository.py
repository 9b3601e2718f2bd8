from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.pagination import Page, PageQuery, like_pattern
from ..core.enums import ActivityStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone
from .model import ActivityEntry, NewActivity
from .repository import ActivityRepository

_COLUMNS = (
    "activity_id, user_id, user_name, user_email, action, resource, resource_id, details, "
    "ip_address, user_agent, status, created_at"
)


def _row_to_entry(row: dict) -> ActivityEntry:
    return ActivityEntry(
        activity_id=int(row["activity_id"]),
        user_id=int(row["user_id"]),
        user_name=row["user_name"],
        user_email=row["user_email"],
        action=row["action"],
        resource=row["resource"],
        details=row.get("details") or "",
        status=ActivityStatus(row.get("status") or ActivityStatus.SUCCESS.value),
        resource_id=row.get("resource_id"),
        ip_address=row.get("ip_address"),
        user_agent=row.get("user_agent"),
        created_at=row.get("created_at"),
    )


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, entry: NewActivity, *, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_log(user_id, user_name, user_email, action, resource, resource_id,
                                         details, ip_address, user_agent, status, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.user_id,
                    entry.user_name,
                    entry.user_email,
                    entry.action,
                    entry.resource,
                    entry.resource_id,
                    entry.details,
                    entry.ip_address,
                    (entry.user_agent or "")[:255] or None,
                    entry.status.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, activity_id: int) -> Optional[ActivityEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM activity_log WHERE activity_id=%s", (activity_id,))
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def list_page(self, query: PageQuery, *, user_id: Optional[int] = None) -> Page[ActivityEntry]:
        where: list[str] = []
        params: list = []
        if query.search:
            pattern = like_pattern(query.search)
            where.append(
                "(user_name LIKE %s OR user_email LIKE %s OR action LIKE %s OR resource LIKE %s OR details LIKE %s)"
            )
            params.extend([pattern] * 5)
        if user_id is not None:
            where.append("user_id=%s")
            params.append(user_id)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM activity_log {where_sql}", tuple(params))
            total = count(cur)
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM activity_log
                {where_sql}
                ORDER BY created_at DESC, activity_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params + [query.limit, query.offset]),
            )
            items = [_row_to_entry(r) for r in fetchall(cur)]
        return Page(items=items, total=total, query=query)

    def list_recent(self, limit: int) -> Sequence[ActivityEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM activity_log ORDER BY created_at DESC, activity_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def delete_by_id(self, activity_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM activity_log WHERE activity_id=%s", (activity_id,))
            return cur.rowcount > 0

    def count_all(self, *, since: Optional[datetime] = None) -> int:
        sql = "SELECT COUNT(*) AS total FROM activity_log"
        params: tuple = ()
        if since is not None:
            sql += " WHERE created_at >= %s"
            params = (since,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return count(cur)
