from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ..common.pagination import Page, PageQuery
from .model import PayrollDraft, PayrollFilter, PayrollRecord, PayrollSummary


class PayrollRepository(Protocol):
    """Repository interface for PayrollRecord."""

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_page(self, query: PageQuery, flt: PayrollFilter) -> Page[PayrollRecord]:
        raise NotImplementedError

    def create(self, draft: PayrollDraft) -> int:
        raise NotImplementedError

    def replace(self, payroll_id: int, draft: PayrollDraft) -> bool:
        """Overwrite inputs and derived fields together."""

        raise NotImplementedError

    def delete_by_id(self, payroll_id: int) -> bool:
        raise NotImplementedError

    def summarize(self, *, employee_id: Optional[int], month_start: date) -> PayrollSummary:
        raise NotImplementedError
