from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import now_local
from ..common.pagination import Page, PageQuery
from ..common.validators import (
    FieldErrors,
    require_email,
    require_int,
    require_length,
    require_min_length,
    require_phone,
    require_strong_password,
)
from ..core.constants import DEFAULT_ROLE_NAME, READ_USERS
from ..core.enums import AuthProvider
from ..core.exceptions import InvalidLogin, NotFoundError, ReferentialIntegrityError, ValidationError
from ..employees.repository import EmployeeRepository
from ..permissions.repository import PermissionRepository
from ..roles.repository import RoleRepository
from ..security.passwords import hash_password, verify_password
from ..security.resolver import AuthContext, AuthorizationResolver
from ..security.tokens import TokenCodec
from .model import User, public_view
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    token: str
    context: AuthContext

    def as_payload(self, expires_in: int) -> dict:
        return {"token": self.token, "expires_in": expires_in, "user": session_view(self.context)}


def session_view(ctx: AuthContext) -> dict:
    """What the frontend keeps about the signed-in user."""
    view = public_view(ctx.user)
    view["role_name"] = ctx.role_name
    view["permissions"] = sorted(ctx.permissions)
    return view


def _profile_fields(changes: Mapping[str, Any], errors: FieldErrors) -> dict:
    fields: dict = {}
    if "first_name" in changes:
        fields["first_name"] = errors.check(require_length, changes["first_name"], "first_name", 2, 50)
    if "last_name" in changes:
        fields["last_name"] = errors.check(require_length, changes["last_name"], "last_name", 2, 50)
    if "email" in changes:
        fields["email"] = errors.check(require_email, changes["email"])
    if "phone" in changes:
        fields["phone"] = errors.check(require_phone, changes["phone"])
    return fields


class AuthService:
    """Use case: sign in, self-register and reissue tokens."""

    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        permissions: PermissionRepository,
        resolver: AuthorizationResolver,
        codec: TokenCodec,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._roles = roles
        self._permissions = permissions
        self._resolver = resolver
        self._codec = codec
        self._clock = clock

    @property
    def expires_in(self) -> int:
        return self._codec.expires_in_seconds

    def known_identity(self, email: Any) -> Optional[User]:
        """Lookup used to attribute failed sign-ins; never raises on bad input."""
        email_v = str(email or "").strip().lower()
        return self._users.get_by_email(email_v) if email_v else None

    def login(self, email: Any, password: Any) -> AuthResult:
        errors = FieldErrors()
        email_v = errors.check(require_email, email)
        errors.check(require_min_length, str(password or ""), "password", 1)
        errors.raise_if_any()

        user = self._users.get_by_email(email_v)
        # One message for every failure so callers cannot probe for accounts.
        if not user or not user.is_active:
            raise InvalidLogin()
        if not verify_password(
            auth_provider=user.auth_provider,
            password_hash=user.password_hash,
            candidate=str(password),
        ):
            raise InvalidLogin()

        self._users.touch_last_login(user.user_id, self._clock())
        ctx = self._resolver.context_for(self._users.get_by_id(user.user_id) or user)
        logger.info("User %s signed in", user.user_id)
        return AuthResult(token=self._codec.issue(ctx.user), context=ctx)

    def _default_role_id(self) -> int:
        role = self._roles.get_by_name(DEFAULT_ROLE_NAME)
        if role:
            return role.role_id
        read_users = self._permissions.get_by_name(READ_USERS)
        logger.info("Creating default role %s", DEFAULT_ROLE_NAME)
        return self._roles.create(
            name=DEFAULT_ROLE_NAME,
            description="Basic system user",
            permission_ids=[read_users.permission_id] if read_users else [],
        )

    def register(self, payload: Mapping[str, Any]) -> AuthResult:
        errors = FieldErrors()
        first_name = errors.check(require_length, payload.get("first_name"), "first_name", 2, 50)
        last_name = errors.check(require_length, payload.get("last_name"), "last_name", 2, 50)
        email = errors.check(require_email, payload.get("email"))
        phone = errors.check(require_phone, payload.get("phone"))
        password = errors.check(require_strong_password, payload.get("password"))
        errors.raise_if_any()

        if self._users.get_by_email(email):
            raise ValidationError("A user with this email already exists")

        user_id = self._users.create(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            role_id=self._default_role_id(),
            password_hash=hash_password(password),
            auth_provider=AuthProvider.LOCAL,
        )
        user = self._users.get_by_id(user_id)
        ctx = self._resolver.context_for(user)
        logger.info("User %s registered", user_id)
        return AuthResult(token=self._codec.issue(user), context=ctx)

    def refresh(self, ctx: AuthContext) -> AuthResult:
        return AuthResult(token=self._codec.issue(ctx.user), context=ctx)


class UserService:
    """Use case: manage users (admin) and one's own profile."""

    def __init__(self, users: UserRepository, roles: RoleRepository, employees: EmployeeRepository):
        self._users = users
        self._roles = roles
        self._employees = employees

    def list_users(
        self,
        query: PageQuery,
        *,
        role_id: Any = None,
        is_active: Optional[bool] = None,
    ) -> Page[User]:
        role_filter = require_int(role_id, "role_id") if role_id not in (None, "") else None
        return self._users.list_page(query, role_id=role_filter, is_active=is_active)

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _check_role(self, role_id: int) -> None:
        if not self._roles.get_by_id(role_id):
            raise ValidationError("Role not found")

    def _check_email_free(self, email: str, *, except_user_id: Optional[int] = None) -> None:
        existing = self._users.get_by_email(email)
        if existing and existing.user_id != except_user_id:
            raise ValidationError("A user with this email already exists")

    def create_user(self, payload: Mapping[str, Any]) -> User:
        errors = FieldErrors()
        first_name = errors.check(require_length, payload.get("first_name"), "first_name", 2, 50)
        last_name = errors.check(require_length, payload.get("last_name"), "last_name", 2, 50)
        email = errors.check(require_email, payload.get("email"))
        phone = errors.check(require_phone, payload.get("phone"))
        role_id = errors.check(require_int, payload.get("role_id"), "role_id")
        password = errors.check(require_min_length, str(payload.get("password") or ""), "password", 6)
        errors.raise_if_any()

        self._check_email_free(email)
        self._check_role(role_id)

        user_id = self._users.create(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            role_id=role_id,
            password_hash=hash_password(password),
        )
        return self.get_user(user_id)

    def update_user(self, user_id: int, changes: Mapping[str, Any]) -> User:
        current = self.get_user(user_id)

        errors = FieldErrors()
        fields = _profile_fields(changes, errors)
        if "role_id" in changes:
            fields["role_id"] = errors.check(require_int, changes["role_id"], "role_id")
        if changes.get("password"):
            password = errors.check(require_min_length, str(changes["password"]), "password", 6)
            if password:
                fields["password_hash"] = hash_password(password)
        errors.raise_if_any()

        if "email" in fields:
            self._check_email_free(fields["email"], except_user_id=current.user_id)
        if "role_id" in fields:
            self._check_role(fields["role_id"])

        self._users.update(current.user_id, **fields)
        return self.get_user(current.user_id)

    def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> User:
        """Self-service edit; role and active flag are not reachable from here."""
        current = self.get_user(user_id)

        errors = FieldErrors()
        fields = _profile_fields(changes, errors)
        errors.raise_if_any()

        if "email" in fields:
            self._check_email_free(fields["email"], except_user_id=current.user_id)

        self._users.update(current.user_id, **fields)
        return self.get_user(current.user_id)

    def delete_user(self, *, actor_id: int, user_id: int) -> None:
        current = self.get_user(user_id)
        if current.user_id == actor_id:
            raise ValidationError("You cannot delete your own account")
        if self._employees.get_by_user(current.user_id):
            raise ReferentialIntegrityError(
                "Cannot delete user. 1 employee profile references this user.",
                blocking_count=1,
            )
        if not self._users.delete_by_id(current.user_id):
            raise ValidationError("Failed to delete user")

    def activate_user(self, user_id: int) -> User:
        current = self.get_user(user_id)
        self._users.set_active(current.user_id, is_active=True)
        return self.get_user(current.user_id)

    def deactivate_user(self, *, actor_id: int, user_id: int) -> User:
        current = self.get_user(user_id)
        if current.user_id == actor_id:
            raise ValidationError("You cannot deactivate your own account")
        self._users.set_active(current.user_id, is_active=False)
        return self.get_user(current.user_id)
