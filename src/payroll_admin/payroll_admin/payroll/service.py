from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import month_start, now_local
from ..common.pagination import Page, PageQuery
from ..common.validators import FieldErrors, optional_max_length, require_amount, require_int, require_iso_date
from ..core.constants import MANAGE_PAYROLL
from ..core.enums import PayrollStatus
from ..core.exceptions import (
    AuthorizationError,
    EmployeeInactive,
    EmployeeNotFound,
    FieldValidationError,
    NotFoundError,
    PayrollLocked,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..security.resolver import AuthContext
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator, parse_hhmm
from .model import ZERO, Consumption, PayrollDraft, PayrollFilter, PayrollInputs, PayrollRecord, PayrollSummary
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_AMOUNT_FIELDS = ("cash_advance", "debt_owed", "imbalance")


def parse_status(value: Any, field: str = "status") -> PayrollStatus:
    try:
        return PayrollStatus(str(value or "").strip().upper())
    except ValueError:
        raise FieldValidationError(field, "status must be PENDING, PROCESSED or PAID")


def parse_consumptions(value: Any) -> tuple[Consumption, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise FieldValidationError("consumptions", "consumptions must be a list")
    items: list[Consumption] = []
    for idx, raw in enumerate(value):
        if not isinstance(raw, Mapping):
            raise FieldValidationError(f"consumptions[{idx}]", "Each consumption needs an amount and a description")
        amount = require_amount(raw.get("amount"), f"consumptions[{idx}].amount")
        description = str(raw.get("description") or "").strip()
        if not (1 <= len(description) <= 200):
            raise FieldValidationError(
                f"consumptions[{idx}].description",
                "Consumption description is required and cannot exceed 200 characters",
            )
        items.append(Consumption(amount=amount, description=description))
    return tuple(items)


def _check_time(value: Any, field: str) -> str:
    parse_hhmm(value, field)
    return value


class PayrollService:
    """Use case: create, recompute and browse payroll records.

    Callers holding MANAGE_PAYROLL see every employee; everyone else is
    confined to the records of their own active employee profile.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable = now_local,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    # access

    def _own_employee(self, viewer: AuthContext) -> Optional[Employee]:
        employee = self._employees.get_by_user(viewer.user_id)
        if employee and employee.is_active:
            return employee
        return None

    def _scope(self, viewer: AuthContext) -> Optional[int]:
        """None for managers, otherwise the viewer's own employee id."""
        if viewer.has(MANAGE_PAYROLL):
            return None
        own = self._own_employee(viewer)
        if not own:
            raise AuthorizationError("You do not have access to payroll records")
        return own.employee_id

    def _load(self, viewer: AuthContext, payroll_id: int) -> PayrollRecord:
        scope = self._scope(viewer)
        record = self._payrolls.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        if scope is not None and record.employee_id != scope:
            raise AuthorizationError("You do not have access to this payroll record")
        return record

    # queries

    def list_records(
        self,
        viewer: AuthContext,
        query: PageQuery,
        *,
        status: Any = None,
        employee_id: Any = None,
        date_from: Any = None,
        date_to: Any = None,
    ) -> Page[PayrollRecord]:
        scope = self._scope(viewer)
        errors = FieldErrors()
        flt_status = errors.check(parse_status, status) if status else None
        flt_employee = errors.check(require_int, employee_id, "employee_id") if employee_id else None
        flt_from = errors.check(require_iso_date, date_from, "date_from") if date_from else None
        flt_to = errors.check(require_iso_date, date_to, "date_to") if date_to else None
        errors.raise_if_any()

        flt = PayrollFilter(
            employee_id=scope if scope is not None else flt_employee,
            status=flt_status,
            date_from=flt_from,
            date_to=flt_to,
        )
        return self._payrolls.list_page(query, flt)

    def get_record(self, viewer: AuthContext, payroll_id: int) -> PayrollRecord:
        return self._load(viewer, payroll_id)

    def my_employee(self, viewer: AuthContext) -> Employee:
        own = self._own_employee(viewer)
        if not own:
            raise EmployeeNotFound("No active employee profile for this user")
        return own

    def summary(self, viewer: AuthContext) -> PayrollSummary:
        scope = self._scope(viewer)
        today: date = self._clock().date()
        return self._payrolls.summarize(employee_id=scope, month_start=month_start(today))

    # commands

    def compute(self, inputs: PayrollInputs):
        return self._calculator.calculate(inputs)

    def create_record(self, viewer: AuthContext, payload: Mapping[str, Any]) -> PayrollRecord:
        scope = self._scope(viewer)

        errors = FieldErrors()
        employee_id = errors.check(require_int, payload.get("employee_id"), "employee_id")
        work_date = errors.check(require_iso_date, payload.get("work_date"), "work_date")
        start_time = errors.check(_check_time, payload.get("start_time"), "start_time")
        end_time = errors.check(_check_time, payload.get("end_time"), "end_time")
        consumptions = errors.check(parse_consumptions, payload.get("consumptions"))
        amounts = {f: errors.check(require_amount, payload.get(f), f, default=ZERO) for f in _AMOUNT_FIELDS}
        notes = errors.check(optional_max_length, payload.get("notes"), "notes", 500)
        errors.raise_if_any()

        if scope is not None and employee_id != scope:
            raise AuthorizationError("You can only create payroll records for yourself")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise EmployeeNotFound()
        if not employee.is_active:
            raise EmployeeInactive()

        inputs = PayrollInputs(
            start_time=start_time,
            end_time=end_time,
            hourly_wage=employee.hourly_wage,
            consumptions=consumptions or (),
            **amounts,
        )
        draft = PayrollDraft(
            employee_id=employee.employee_id,
            work_date=work_date,
            inputs=inputs,
            breakdown=self.compute(inputs),
            status=PayrollStatus.PENDING,
            processed_by=viewer.user_id,
            notes=notes,
        )
        payroll_id = self._payrolls.create(draft)
        logger.info("Payroll %s created for employee %s by user %s", payroll_id, employee.employee_id, viewer.user_id)
        return self._payrolls.get_by_id(payroll_id)

    def update_record(self, viewer: AuthContext, payroll_id: int, payload: Mapping[str, Any]) -> PayrollRecord:
        current = self._load(viewer, payroll_id)
        if current.status == PayrollStatus.PAID:
            raise PayrollLocked()

        errors = FieldErrors()
        input_changes: dict = {}
        if "start_time" in payload:
            input_changes["start_time"] = errors.check(_check_time, payload["start_time"], "start_time")
        if "end_time" in payload:
            input_changes["end_time"] = errors.check(_check_time, payload["end_time"], "end_time")
        if "consumptions" in payload:
            input_changes["consumptions"] = errors.check(parse_consumptions, payload["consumptions"])
        for f in _AMOUNT_FIELDS:
            if f in payload:
                input_changes[f] = errors.check(require_amount, payload[f], f)
        if "hourly_wage" in payload:
            if not viewer.has(MANAGE_PAYROLL):
                raise AuthorizationError("Only payroll managers can change the hourly wage of a record")
            input_changes["hourly_wage"] = errors.check(require_amount, payload["hourly_wage"], "hourly_wage")
        work_date = current.work_date
        if "work_date" in payload:
            work_date = errors.check(require_iso_date, payload["work_date"], "work_date")
        status = current.status
        if "status" in payload:
            status = errors.check(parse_status, payload["status"])
        notes = current.notes
        if "notes" in payload:
            notes = errors.check(optional_max_length, payload["notes"], "notes", 500)
        errors.raise_if_any()

        inputs = replace(current.inputs, **input_changes)

        # Derived fields are always recomputed from the merged inputs as a whole.
        draft = PayrollDraft(
            employee_id=current.employee_id,
            work_date=work_date,
            inputs=inputs,
            breakdown=self.compute(inputs),
            status=status,
            processed_by=viewer.user_id,
            notes=notes,
        )
        self._payrolls.replace(current.payroll_id, draft)
        return self._payrolls.get_by_id(current.payroll_id)

    def delete_record(self, viewer: AuthContext, payroll_id: int) -> None:
        current = self._load(viewer, payroll_id)
        if current.status != PayrollStatus.PENDING:
            raise ValidationError("Only PENDING payroll records can be deleted")
        if not self._payrolls.delete_by_id(current.payroll_id):
            raise ValidationError("Failed to delete payroll record")
