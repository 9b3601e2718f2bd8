from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

from ...core.constants import MINUTES_PER_DAY
from ...core.exceptions import InvalidTimeFormat, NegativeAmount
from ..model import PayrollBreakdown, PayrollInputs
from .base import PayrollCalculator

TIME_RE = re.compile(r"([0-1]?[0-9]|2[0-3]):[0-5][0-9]")
CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_hhmm(value: object, field: str) -> int:
    """'HH:MM' (24h) -> minutes since midnight."""
    if not isinstance(value, str) or not TIME_RE.fullmatch(value):
        raise InvalidTimeFormat(field, value)
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: a shift ending before it starts crosses midnight.

    gross = worked time * hourly wage
    deductions = consumptions + cash advance + imbalance
    net = gross - deductions + debt owed to the employee (may be negative)
    """

    def worked_minutes(self, start_time: str, end_time: str) -> int:
        start = parse_hhmm(start_time, "start_time")
        end = parse_hhmm(end_time, "end_time")
        if end < start:
            end += MINUTES_PER_DAY
        return end - start

    def calculate(self, inputs: PayrollInputs) -> PayrollBreakdown:
        self._check_amounts(inputs)
        total = self.worked_minutes(inputs.start_time, inputs.end_time)

        gross = money(Decimal(total) * inputs.hourly_wage / Decimal(60))
        total_consumptions = money(sum((c.amount for c in inputs.consumptions), Decimal("0")))
        total_deductions = money(total_consumptions + inputs.cash_advance + inputs.imbalance)
        net = money(gross - total_deductions + inputs.debt_owed)

        return PayrollBreakdown(
            worked_hours=total // 60,
            worked_minutes=total % 60,
            gross_pay=gross,
            total_consumptions=total_consumptions,
            total_deductions=total_deductions,
            net_pay=net,
        )

    @staticmethod
    def _check_amounts(inputs: PayrollInputs) -> None:
        for field in ("hourly_wage", "cash_advance", "debt_owed", "imbalance"):
            if getattr(inputs, field) < 0:
                raise NegativeAmount(field)
        for idx, c in enumerate(inputs.consumptions):
            if c.amount < 0:
                raise NegativeAmount(f"consumptions[{idx}].amount")
