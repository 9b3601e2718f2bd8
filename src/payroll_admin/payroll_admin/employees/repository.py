from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageQuery
from .model import Employee, UserSummary


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_page(self, query: PageQuery, *, active_only: bool = True) -> Page[Employee]:
        raise NotImplementedError

    def create(self, *, user_id: int, hourly_wage: Decimal) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, *, hourly_wage: Optional[Decimal] = None, is_active: Optional[bool] = None) -> bool:
        raise NotImplementedError

    def list_available_users(self) -> Sequence[UserSummary]:
        """Active users without an active employee profile."""

        raise NotImplementedError

    def count_all(self, *, is_active: Optional[bool] = None) -> int:
        raise NotImplementedError
