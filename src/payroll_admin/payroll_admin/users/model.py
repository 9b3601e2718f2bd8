from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuthProvider


@dataclass(frozen=True)
class User:
    """Domain entity: an identity that can sign in.

    Plain data object; ``password_hash`` never leaves the service layer
    (see ``public_view``).
    """

    user_id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    role_id: int
    password_hash: Optional[str] = None
    is_active: bool = True
    auth_provider: AuthProvider = AuthProvider.LOCAL
    auth_provider_id: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    role_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def public_view(user: User) -> dict:
    return {
        "user_id": user.user_id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "full_name": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "role_id": user.role_id,
        "role_name": user.role_name,
        "is_active": user.is_active,
        "auth_provider": user.auth_provider,
        "last_login": user.last_login,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
