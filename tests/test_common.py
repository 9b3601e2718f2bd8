from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.payroll_admin.payroll_admin.common.pagination import Page, PageQuery, like_pattern, parse_page_query
from src.payroll_admin.payroll_admin.common.validators import (
    FieldErrors,
    require_amount,
    require_email,
    require_iso_date,
    require_phone,
    require_strong_password,
)
from src.payroll_admin.payroll_admin.core.exceptions import FieldValidationError, NegativeAmount, ValidationError


def test_page_query_defaults_and_clamping():
    assert parse_page_query({}) == PageQuery(page=1, limit=10, search="")
    assert parse_page_query({"page": "0", "limit": "1000", "search": "  ann "}) == PageQuery(page=1, limit=100, search="ann")
    assert parse_page_query({"page": "abc", "limit": "-3"}) == PageQuery(page=1, limit=10, search="")


def test_pagination_metadata():
    page = Page(items=[1, 2], total=25, query=PageQuery(page=2, limit=10))

    assert page.pagination() == {
        "current_page": 2,
        "total_pages": 3,
        "total_items": 25,
        "items_per_page": 10,
        "has_next": True,
        "has_prev": True,
    }
    assert Page(items=[], total=0).pagination()["total_pages"] == 0


def test_like_pattern_escapes_wildcards():
    assert like_pattern("50%_off") == "%50\\%\\_off%"


def test_amounts():
    assert require_amount("12.50", "x") == Decimal("12.50")
    assert require_amount(None, "x", default=Decimal("0")) == Decimal("0")
    with pytest.raises(NegativeAmount):
        require_amount(-1, "x")
    with pytest.raises(FieldValidationError):
        require_amount("ten", "x")
    with pytest.raises(FieldValidationError):
        require_amount(True, "x")


def test_contact_fields():
    assert require_email(" A.B@Example.COM ") == "a.b@example.com"
    assert require_phone("+84 (912) 345-678") == "+84 (912) 345-678"
    with pytest.raises(FieldValidationError):
        require_phone("12345")


@pytest.mark.parametrize("password", ["Ab1", "abcdef1", "ABCDEF1", "Abcdefg"])
def test_weak_passwords(password):
    with pytest.raises(FieldValidationError):
        require_strong_password(password)


def test_field_errors_collects_then_raises():
    errors = FieldErrors()
    errors.check(require_email, "bad")
    errors.check(require_phone, "bad")

    with pytest.raises(ValidationError) as exc:
        errors.raise_if_any()

    assert type(exc.value) is ValidationError
    assert [e["field"] for e in exc.value.errors] == ["email", "phone"]


def test_iso_date_must_be_the_whole_value():
    assert require_iso_date(" 2025-03-10 ", "work_date") == date(2025, 3, 10)
    for bad in ("2025-03-10garbage", "2025-03-10T08:00:00", "10/03/2025", ""):
        with pytest.raises(FieldValidationError):
            require_iso_date(bad, "work_date")


def test_amounts_are_rounded_half_up_to_cents():
    assert require_amount("0.005", "x") == Decimal("0.01")
    assert require_amount("0.004", "x") == Decimal("0.00")
    assert require_amount(13000, "x") == Decimal("13000.00")
