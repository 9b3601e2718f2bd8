from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from ..common.pagination import Page, PageQuery
from ..core.enums import AuthProvider
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_page(
        self,
        query: PageQuery,
        *,
        role_id: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Page[User]:
        raise NotImplementedError

    def create(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        role_id: int,
        password_hash: Optional[str],
        auth_provider: AuthProvider = AuthProvider.LOCAL,
        auth_provider_id: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, user_id: int, **fields) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def touch_last_login(self, user_id: int, when: datetime) -> None:
        raise NotImplementedError

    def count_active_by_role(self, role_id: int) -> int:
        raise NotImplementedError

    def count_all(self, *, is_active: Optional[bool] = None) -> int:
        raise NotImplementedError
