from decimal import Decimal

import pytest

from src.payroll_admin.payroll_admin.core.exceptions import InvalidTimeFormat, NegativeAmount
from src.payroll_admin.payroll_admin.payroll.calculator.standard_calculator import StandardPayrollCalculator, parse_hhmm
from src.payroll_admin.payroll_admin.payroll.model import Consumption, PayrollInputs


def _inputs(**overrides) -> PayrollInputs:
    base = dict(start_time="08:00", end_time="12:15", hourly_wage=Decimal("13000"))
    base.update(overrides)
    return PayrollInputs(**base)


def test_gross_pay_is_minutes_times_wage_over_sixty():
    result = StandardPayrollCalculator().calculate(_inputs())

    assert (result.worked_hours, result.worked_minutes) == (4, 15)
    assert result.gross_pay == Decimal("55250.00")
    assert result.net_pay == Decimal("55250.00")


def test_default_wage_full_shift():
    inputs = _inputs(
        start_time="09:00",
        end_time="17:30",
        hourly_wage=Decimal("6500"),
        consumptions=(Consumption(Decimal("1000"), "Lunch"),),
        cash_advance=Decimal("500"),
    )

    result = StandardPayrollCalculator().calculate(inputs)

    assert (result.worked_hours, result.worked_minutes) == (8, 30)
    assert result.gross_pay == Decimal("55250.00")
    assert result.total_deductions == Decimal("1500.00")
    assert result.net_pay == Decimal("53750.00")


def test_shift_ending_before_start_crosses_midnight():
    calc = StandardPayrollCalculator()

    assert calc.worked_minutes("22:00", "02:00") == 4 * 60
    assert calc.worked_minutes("09:30", "09:30") == 0


def test_deductions_and_debt():
    inputs = _inputs(
        consumptions=(Consumption(Decimal("500"), "Coffee"), Consumption(Decimal("250.50"), "Snack")),
        cash_advance=Decimal("500"),
        imbalance=Decimal("249.50"),
        debt_owed=Decimal("1000"),
    )

    result = StandardPayrollCalculator().calculate(inputs)

    assert result.total_consumptions == Decimal("750.50")
    assert result.total_deductions == Decimal("1500.00")
    assert result.net_pay == Decimal("54750.00")


def test_net_pay_may_go_negative():
    result = StandardPayrollCalculator().calculate(
        _inputs(start_time="08:00", end_time="09:00", hourly_wage=Decimal("1000"), cash_advance=Decimal("5000"))
    )

    assert result.net_pay == Decimal("-4000.00")


def test_money_rounds_half_up_to_cents():
    # 1 minute at 100.10/h = 1.668333...
    result = StandardPayrollCalculator().calculate(_inputs(start_time="10:00", end_time="10:01", hourly_wage=Decimal("100.10")))

    assert result.gross_pay == Decimal("1.67")


def test_same_inputs_give_the_same_breakdown():
    calc = StandardPayrollCalculator()
    inputs = _inputs(consumptions=(Consumption(Decimal("10"), "Water"),))

    assert calc.calculate(inputs) == calc.calculate(inputs)


@pytest.mark.parametrize("value", ["24:00", "8.00", "12:60", "", None, "noon", "09:00\n", " 09:00"])
def test_bad_time_is_rejected(value):
    with pytest.raises(InvalidTimeFormat) as exc:
        parse_hhmm(value, "start_time")

    assert exc.value.code == "INVALID_TIME_FORMAT"
    assert exc.value.field == "start_time"


def test_negative_consumption_names_the_item():
    inputs = _inputs(consumptions=(Consumption(Decimal("1"), "ok"), Consumption(Decimal("-1"), "refund")))

    with pytest.raises(NegativeAmount) as exc:
        StandardPayrollCalculator().calculate(inputs)

    assert exc.value.code == "NEGATIVE_AMOUNT"
    assert exc.value.field == "consumptions[1].amount"
