from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PayrollBreakdown, PayrollInputs


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_minutes(self, start_time: str, end_time: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def calculate(self, inputs: PayrollInputs) -> PayrollBreakdown:
        raise NotImplementedError
