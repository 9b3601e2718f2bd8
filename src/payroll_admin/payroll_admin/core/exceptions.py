from __future__ import annotations

from typing import Iterable, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries the HTTP status and the machine-readable code the
    API layer renders into the response envelope.
    """

    status_code = 400
    code = "DOMAIN_ERROR"
    default_message = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def extra(self) -> dict:
        """Additional envelope fields for diagnostics."""
        return {}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"
    default_message = "Invalid input data"

    def __init__(self, message: Optional[str] = None, errors: Optional[Iterable[dict]] = None):
        super().__init__(message)
        self.errors = list(errors or [])

    def extra(self) -> dict:
        return {"errors": self.errors} if self.errors else {}


class FieldValidationError(ValidationError):
    """A validation failure attached to a single input field."""

    def __init__(self, field: str, message: str):
        super().__init__(message, errors=[{"field": field, "message": message}])
        self.field = field


class InvalidTimeFormat(FieldValidationError):
    code = "INVALID_TIME_FORMAT"

    def __init__(self, field: str, value: object = None):
        super().__init__(field, f"Invalid time {value!r} for {field} (expected HH:MM, 24-hour)")


class NegativeAmount(FieldValidationError):
    code = "NEGATIVE_AMOUNT"

    def __init__(self, field: str):
        super().__init__(field, f"{field} must be a non-negative number")


class EmployeeInactive(ValidationError):
    code = "EMPLOYEE_INACTIVE"
    default_message = "Employee is inactive and cannot be billed"


class PayrollLocked(ValidationError):
    code = "PAYROLL_LOCKED"
    default_message = "Paid payroll records cannot be modified"


class ReferentialIntegrityError(DomainError):
    """Raised when deleting or deactivating something still in use."""

    code = "RESOURCE_IN_USE"

    def __init__(self, message: str, blocking_count: int):
        super().__init__(message)
        self.blocking_count = int(blocking_count)

    def extra(self) -> dict:
        return {"blocking_count": self.blocking_count}


class NotFoundError(DomainError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class EmployeeNotFound(NotFoundError):
    code = "EMPLOYEE_NOT_FOUND"
    default_message = "Employee not found"


class AuthenticationError(DomainError):
    """Raised when a caller cannot be authenticated."""

    status_code = 401
    code = "AUTHENTICATION_REQUIRED"
    default_message = "Authentication required"


class NoCredential(AuthenticationError):
    code = "NO_TOKEN"
    default_message = "Access denied. No token provided."


class MalformedCredential(AuthenticationError):
    code = "INVALID_TOKEN_FORMAT"
    default_message = "Access denied. Invalid token format."


class CredentialExpired(AuthenticationError):
    code = "TOKEN_EXPIRED"
    default_message = "Token expired. Please login again."


class InvalidCredential(AuthenticationError):
    code = "INVALID_TOKEN"
    default_message = "Invalid token. Please login again."


class IdentityNotFound(AuthenticationError):
    code = "USER_NOT_FOUND"
    default_message = "User not found. Please login again."


class IdentityDeactivated(AuthenticationError):
    code = "USER_DEACTIVATED"
    default_message = "User account is deactivated."


class InvalidLogin(AuthenticationError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
    code = "FORBIDDEN"
    default_message = "You do not have access to this resource"


class PermissionDenied(AuthorizationError):
    code = "INSUFFICIENT_PERMISSIONS"

    def __init__(self, required: str, granted: Iterable[str]):
        super().__init__(f"Permission '{required}' required to access this resource.")
        self.required = required
        self.granted = sorted(granted)

    def extra(self) -> dict:
        return {"required_permission": self.required, "user_permissions": self.granted}


class RoleMismatch(AuthorizationError):
    code = "INSUFFICIENT_ROLE"

    def __init__(self, required: str, actual: Optional[str]):
        super().__init__(f"Role '{required}' required to access this resource.")
        self.required = required
        self.actual = actual or "UNKNOWN"

    def extra(self) -> dict:
        return {"required_role": self.required, "user_role": self.actual}
