from __future__ import annotations

import json
from datetime import date
from typing import Optional

from ..common.pagination import Page, PageQuery, like_pattern
from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import count, db_cursor, fetchall, fetchone, load_json_list, to_decimal
from .model import (
    Consumption,
    PayrollBreakdown,
    PayrollDraft,
    PayrollFilter,
    PayrollInputs,
    PayrollRecord,
    PayrollSummary,
)
from .repository import PayrollRepository

_SELECT = """
    SELECT p.*, u.first_name, u.last_name, u.email
    FROM payroll_records p
    JOIN employees e ON e.employee_id = p.employee_id
    JOIN users u ON u.user_id = e.user_id
"""

_WRITE_COLUMNS = (
    "employee_id",
    "work_date",
    "start_time",
    "end_time",
    "worked_hours",
    "worked_minutes",
    "hourly_wage",
    "gross_pay",
    "consumptions",
    "total_consumptions",
    "cash_advance",
    "debt_owed",
    "imbalance",
    "total_deductions",
    "net_pay",
    "status",
    "processed_by",
    "notes",
)


def _row_to_record(row: dict) -> PayrollRecord:
    consumptions = tuple(
        Consumption(amount=to_decimal(c.get("amount")), description=str(c.get("description") or ""))
        for c in load_json_list(row.get("consumptions"))
    )
    return PayrollRecord(
        payroll_id=int(row["payroll_id"]),
        employee_id=int(row["employee_id"]),
        work_date=row["work_date"],
        inputs=PayrollInputs(
            start_time=row["start_time"],
            end_time=row["end_time"],
            hourly_wage=to_decimal(row["hourly_wage"]),
            consumptions=consumptions,
            cash_advance=to_decimal(row["cash_advance"]),
            debt_owed=to_decimal(row["debt_owed"]),
            imbalance=to_decimal(row["imbalance"]),
        ),
        breakdown=PayrollBreakdown(
            worked_hours=int(row["worked_hours"]),
            worked_minutes=int(row["worked_minutes"]),
            gross_pay=to_decimal(row["gross_pay"]),
            total_consumptions=to_decimal(row["total_consumptions"]),
            total_deductions=to_decimal(row["total_deductions"]),
            net_pay=to_decimal(row["net_pay"]),
        ),
        status=PayrollStatus(row["status"]),
        processed_by=row.get("processed_by"),
        notes=row.get("notes"),
        employee_name=f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip() or None,
        employee_email=row.get("email"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _draft_values(draft: PayrollDraft) -> tuple:
    i, b = draft.inputs, draft.breakdown
    consumptions = json.dumps([{"amount": str(c.amount), "description": c.description} for c in i.consumptions])
    return (
        draft.employee_id,
        draft.work_date,
        i.start_time,
        i.end_time,
        b.worked_hours,
        b.worked_minutes,
        i.hourly_wage,
        b.gross_pay,
        consumptions,
        b.total_consumptions,
        i.cash_advance,
        i.debt_owed,
        i.imbalance,
        b.total_deductions,
        b.net_pay,
        draft.status.value,
        draft.processed_by,
        draft.notes,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE p.payroll_id=%s", (payroll_id,))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def list_page(self, query: PageQuery, flt: PayrollFilter) -> Page[PayrollRecord]:
        where: list[str] = []
        params: list = []
        if flt.employee_id is not None:
            where.append("p.employee_id=%s")
            params.append(flt.employee_id)
        if flt.status is not None:
            where.append("p.status=%s")
            params.append(flt.status.value)
        if flt.date_from is not None:
            where.append("p.work_date >= %s")
            params.append(flt.date_from)
        if flt.date_to is not None:
            where.append("p.work_date <= %s")
            params.append(flt.date_to)
        if query.search:
            pattern = like_pattern(query.search)
            where.append("(u.first_name LIKE %s OR u.last_name LIKE %s OR u.email LIKE %s OR p.notes LIKE %s)")
            params.extend([pattern] * 4)
        where_sql = f"WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total
                FROM payroll_records p
                JOIN employees e ON e.employee_id = p.employee_id
                JOIN users u ON u.user_id = e.user_id
                {where_sql}
                """,
                tuple(params),
            )
            total = count(cur)
            cur.execute(
                f"{_SELECT} {where_sql} ORDER BY p.work_date DESC, p.payroll_id DESC LIMIT %s OFFSET %s",
                tuple(params + [query.limit, query.offset]),
            )
            items = [_row_to_record(r) for r in fetchall(cur)]
        return Page(items=items, total=total, query=query)

    def create(self, draft: PayrollDraft) -> int:
        placeholders = ",".join(["%s"] * len(_WRITE_COLUMNS))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO payroll_records({', '.join(_WRITE_COLUMNS)}) VALUES({placeholders})",
                _draft_values(draft),
            )
            return int(cur.lastrowid)

    def replace(self, payroll_id: int, draft: PayrollDraft) -> bool:
        assignments = ", ".join(f"{c}=%s" for c in _WRITE_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll_records SET {assignments} WHERE payroll_id=%s",
                _draft_values(draft) + (payroll_id,),
            )
            return cur.rowcount > 0

    def delete_by_id(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE payroll_id=%s", (payroll_id,))
            return cur.rowcount > 0

    def summarize(self, *, employee_id: Optional[int], month_start: date) -> PayrollSummary:
        where_sql = "WHERE employee_id=%s" if employee_id is not None else ""
        params: tuple = (employee_id,) if employee_id is not None else ()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT COUNT(*) AS total_records,
                       COALESCE(SUM(status='PENDING'), 0) AS pending,
                       COALESCE(SUM(status='PROCESSED'), 0) AS processed,
                       COALESCE(SUM(status='PAID'), 0) AS paid,
                       COALESCE(SUM(work_date >= %s), 0) AS this_month,
                       COALESCE(SUM(CASE WHEN status='PAID' AND work_date >= %s THEN net_pay ELSE 0 END), 0)
                           AS paid_this_month
                FROM payroll_records
                {where_sql}
                """,
                (month_start, month_start) + params,
            )
            row = fetchone(cur) or {}
        return PayrollSummary(
            total_records=int(row.get("total_records") or 0),
            pending=int(row.get("pending") or 0),
            processed=int(row.get("processed") or 0),
            paid=int(row.get("paid") or 0),
            this_month=int(row.get("this_month") or 0),
            paid_this_month=to_decimal(row.get("paid_this_month")),
        )
