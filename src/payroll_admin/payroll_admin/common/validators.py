from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from ..core.exceptions import FieldValidationError, NegativeAmount, ValidationError

EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]{10,}$")
CENT = Decimal("0.01")


class FieldErrors:
    """Collects field-level errors so a request reports all of them at once."""

    def __init__(self):
        self._errors: list[dict] = []
        self._raised: list[FieldValidationError] = []

    def add(self, field: str, message: str) -> None:
        self._errors.append({"field": field, "message": message})

    def check(self, fn, *args, **kwargs):
        """Run a ``require_*`` validator, recording its error instead of raising."""
        try:
            return fn(*args, **kwargs)
        except FieldValidationError as e:
            self._raised.append(e)
            self._errors.extend(e.errors)
            return None

    def __bool__(self) -> bool:
        return bool(self._errors)

    def raise_if_any(self, message: str = "Invalid input data") -> None:
        # A lone typed error keeps its own code (e.g. INVALID_TIME_FORMAT).
        if len(self._raised) == 1 and len(self._errors) == 1:
            raise self._raised[0]
        if self._errors:
            raise ValidationError(message, errors=self._errors)


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise FieldValidationError(field_name, f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise FieldValidationError(field_name, f"{field_name} must be at least {min_len} characters")
    return value


def require_length(value: Any, field_name: str, min_len: int, max_len: int) -> str:
    v = str(value or "").strip()
    if not (min_len <= len(v) <= max_len):
        raise FieldValidationError(field_name, f"{field_name} must be between {min_len} and {max_len} characters")
    return v


def optional_max_length(value: Any, field_name: str, max_len: int) -> Optional[str]:
    if value is None:
        return None
    v = str(value).strip()
    if len(v) > max_len:
        raise FieldValidationError(field_name, f"{field_name} cannot exceed {max_len} characters")
    return v or None


def require_email(value: Any, field_name: str = "email") -> str:
    v = str(value or "").strip().lower()
    if not EMAIL_RE.match(v):
        raise FieldValidationError(field_name, "Please provide a valid email address")
    return v


def require_phone(value: Any, field_name: str = "phone") -> str:
    v = str(value or "").strip()
    if not PHONE_RE.match(v):
        raise FieldValidationError(field_name, "Please provide a valid phone number")
    return v


def require_int(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise FieldValidationError(field_name, f"{field_name} must be an integer id")


def require_amount(value: Any, field_name: str, *, default: Optional[Decimal] = None) -> Decimal:
    """Parse a non-negative monetary amount."""
    if value is None or value == "":
        if default is not None:
            return default
        raise FieldValidationError(field_name, f"{field_name} is required")
    if isinstance(value, bool):
        raise FieldValidationError(field_name, f"{field_name} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise FieldValidationError(field_name, f"{field_name} must be a number")
    if not amount.is_finite():
        raise FieldValidationError(field_name, f"{field_name} must be a number")
    if amount < 0:
        raise NegativeAmount(field_name)
    # Money columns are DECIMAL(.., 2).
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def require_iso_date(value: Any, field_name: str) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    v = str(value or "").strip()
    try:
        return date.fromisoformat(v)
    except ValueError:
        raise FieldValidationError(field_name, f"{field_name} must be an ISO date (YYYY-MM-DD)")


def require_strong_password(value: Any, field_name: str = "password") -> str:
    v = str(value or "")
    require_min_length(v, field_name, 6)
    if not re.search(r"[a-z]", v):
        raise FieldValidationError(field_name, "Password must contain at least one lowercase letter")
    if not re.search(r"[A-Z]", v):
        raise FieldValidationError(field_name, "Password must contain at least one uppercase letter")
    if not re.search(r"\d", v):
        raise FieldValidationError(field_name, "Password must contain at least one number")
    return v
