from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..core.exceptions import (
    IdentityDeactivated,
    IdentityNotFound,
    MalformedCredential,
    NoCredential,
    PermissionDenied,
    RoleMismatch,
)
from ..permissions.repository import PermissionRepository
from ..roles.model import Role
from ..roles.repository import RoleRepository
from ..users.model import User
from ..users.repository import UserRepository
from .tokens import TokenCodec

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller, as resolved for one request."""

    user: User
    role_name: Optional[str]
    permissions: frozenset[str] = field(default_factory=frozenset)

    @property
    def user_id(self) -> int:
        return self.user.user_id

    def has(self, permission_name: str) -> bool:
        return permission_name in self.permissions


def extract_bearer(header: Optional[str]) -> str:
    if header is None or header == "":
        raise NoCredential()
    if not header.startswith(BEARER_PREFIX):
        raise MalformedCredential()
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise MalformedCredential()
    return token


class AuthorizationResolver:
    """Bearer credential -> claims -> identity -> role -> permission names.

    Every step reads the store, so a deactivated user or a changed role takes
    effect on the very next request.
    """

    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        permissions: PermissionRepository,
        codec: TokenCodec,
    ):
        self._users = users
        self._roles = roles
        self._permissions = permissions
        self._codec = codec

    def permissions_for(self, role: Optional[Role]) -> frozenset[str]:
        if role is None or not role.permission_ids:
            return frozenset()
        return frozenset(p.name for p in self._permissions.get_many(role.permission_ids))

    def context_for(self, user: User) -> AuthContext:
        role = self._roles.get_by_id(user.role_id)
        if role is None:
            logger.warning("User %s references missing role %s", user.user_id, user.role_id)
        return AuthContext(
            user=user,
            role_name=role.name if role else None,
            permissions=self.permissions_for(role),
        )

    def resolve(self, authorization_header: Optional[str]) -> AuthContext:
        token = extract_bearer(authorization_header)
        claims = self._codec.decode(token)

        user = self._users.get_by_id(claims.user_id)
        if not user:
            raise IdentityNotFound()
        if not user.is_active:
            raise IdentityDeactivated()
        return self.context_for(user)

    @staticmethod
    def require_permission(ctx: AuthContext, permission_name: str) -> None:
        if not ctx.has(permission_name):
            raise PermissionDenied(permission_name, ctx.permissions)

    def require_role(self, ctx: AuthContext, role_name: str) -> None:
        # Re-read from the store; the context may predate a role change.
        user = self._users.get_by_id(ctx.user_id)
        if not user:
            raise IdentityNotFound()
        role = self._roles.get_by_id(user.role_id)
        actual = role.name if role else None
        if actual != role_name:
            raise RoleMismatch(role_name, actual)
