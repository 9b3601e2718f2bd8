from __future__ import annotations

from enum import Enum


class PermissionAction(str, Enum):
    """Kinds of action a permission can grant on its module."""

    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    MANAGE = "MANAGE"


class AuthProvider(str, Enum):
    LOCAL = "local"
    EXTERNAL = "external"


class PayrollStatus(str, Enum):
    """Lifecycle of a payroll record. PAID records are immutable."""

    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    PAID = "PAID"


class ActivityStatus(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
