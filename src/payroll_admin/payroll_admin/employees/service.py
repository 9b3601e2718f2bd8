from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Mapping, Sequence

from ..common.pagination import Page, PageQuery
from ..common.validators import FieldErrors, require_amount, require_int
from ..core.constants import DEFAULT_HOURLY_WAGE
from ..core.exceptions import EmployeeNotFound, ValidationError
from ..users.repository import UserRepository
from .model import Employee, UserSummary
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage employee payroll profiles."""

    def __init__(self, employees: EmployeeRepository, users: UserRepository):
        self._employees = employees
        self._users = users

    def list_employees(self, query: PageQuery) -> Page[Employee]:
        return self._employees.list_page(query, active_only=True)

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise EmployeeNotFound()
        return employee

    def get_for_user(self, user_id: int) -> Employee:
        employee = self._employees.get_by_user(int(user_id))
        if not employee or not employee.is_active:
            raise EmployeeNotFound("No active employee profile for this user")
        return employee

    def create_employee(self, *, user_id: Any, hourly_wage: Any = None) -> Employee:
        errors = FieldErrors()
        uid = errors.check(require_int, user_id, "user_id")
        wage = errors.check(require_amount, hourly_wage, "hourly_wage", default=Decimal(DEFAULT_HOURLY_WAGE))
        errors.raise_if_any()

        if not self._users.get_by_id(uid):
            raise ValidationError("User not found")

        existing = self._employees.get_by_user(uid)
        if existing and existing.is_active:
            raise ValidationError("An employee already exists for this user")
        if existing:
            # One profile per user: a deactivated profile is revived, not duplicated.
            self._employees.update(existing.employee_id, hourly_wage=wage, is_active=True)
            logger.info("Reactivated employee %s for user %s", existing.employee_id, uid)
            return self.get_employee(existing.employee_id)

        employee_id = self._employees.create(user_id=uid, hourly_wage=wage)
        return self.get_employee(employee_id)

    def update_employee(self, employee_id: int, changes: Mapping[str, Any]) -> Employee:
        current = self.get_employee(employee_id)
        if "hourly_wage" in changes:
            wage = require_amount(changes["hourly_wage"], "hourly_wage")
            self._employees.update(current.employee_id, hourly_wage=wage)
        return self.get_employee(current.employee_id)

    def deactivate_employee(self, employee_id: int) -> Employee:
        current = self.get_employee(employee_id)
        self._employees.update(current.employee_id, is_active=False)
        return self.get_employee(current.employee_id)

    def available_users(self) -> Sequence[UserSummary]:
        return self._employees.list_available_users()
