from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class Consumption:
    """Something the employee consumed on shift; deducted from pay."""

    amount: Decimal
    description: str


@dataclass(frozen=True)
class PayrollInputs:
    """Everything the calculator needs; derived fields are never stored as input."""

    start_time: str
    end_time: str
    hourly_wage: Decimal
    consumptions: tuple[Consumption, ...] = ()
    cash_advance: Decimal = ZERO
    debt_owed: Decimal = ZERO
    imbalance: Decimal = ZERO


@dataclass(frozen=True)
class PayrollBreakdown:
    worked_hours: int
    worked_minutes: int
    gross_pay: Decimal
    total_consumptions: Decimal
    total_deductions: Decimal
    net_pay: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    employee_id: int
    work_date: date
    inputs: PayrollInputs
    breakdown: PayrollBreakdown
    status: PayrollStatus = PayrollStatus.PENDING
    processed_by: Optional[int] = None
    notes: Optional[str] = None
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollDraft:
    """A fully computed record ready to be written."""

    employee_id: int
    work_date: date
    inputs: PayrollInputs
    breakdown: PayrollBreakdown
    status: PayrollStatus
    processed_by: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class PayrollFilter:
    employee_id: Optional[int] = None
    status: Optional[PayrollStatus] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


@dataclass(frozen=True)
class PayrollSummary:
    total_records: int = 0
    pending: int = 0
    processed: int = 0
    paid: int = 0
    this_month: int = 0
    paid_this_month: Decimal = field(default=ZERO)


def record_view(record: PayrollRecord) -> dict:
    """Flat JSON shape of a record: inputs and derived fields side by side."""
    i, b = record.inputs, record.breakdown
    return {
        "payroll_id": record.payroll_id,
        "employee_id": record.employee_id,
        "employee_name": record.employee_name,
        "employee_email": record.employee_email,
        "work_date": record.work_date,
        "start_time": i.start_time,
        "end_time": i.end_time,
        "worked_hours": b.worked_hours,
        "worked_minutes": b.worked_minutes,
        "hourly_wage": i.hourly_wage,
        "gross_pay": b.gross_pay,
        "consumptions": [{"amount": c.amount, "description": c.description} for c in i.consumptions],
        "total_consumptions": b.total_consumptions,
        "cash_advance": i.cash_advance,
        "debt_owed": i.debt_owed,
        "imbalance": i.imbalance,
        "total_deductions": b.total_deductions,
        "net_pay": b.net_pay,
        "status": record.status,
        "processed_by": record.processed_by,
        "notes": record.notes,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }
