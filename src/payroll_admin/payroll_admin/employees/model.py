from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class UserSummary:
    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class Employee:
    """A user's payroll profile. One per user; deactivated instead of deleted."""

    employee_id: int
    user_id: int
    hourly_wage: Decimal
    is_active: bool = True
    user: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        if not self.user:
            return f"Employee #{self.employee_id}"
        return f"{self.user.first_name} {self.user.last_name}".strip()
