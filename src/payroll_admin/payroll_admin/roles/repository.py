from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageQuery
from .model import Role


class RoleRepository(Protocol):
    """Repository interface for Role and its permission set."""

    def get_by_id(self, role_id: int) -> Optional[Role]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Role]:
        raise NotImplementedError

    def list_page(self, query: PageQuery, *, is_active: Optional[bool] = None) -> Page[Role]:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str], permission_ids: Sequence[int]) -> int:
        raise NotImplementedError

    def update(self, role_id: int, **fields) -> bool:
        raise NotImplementedError

    def set_permissions(self, role_id: int, permission_ids: Sequence[int]) -> None:
        """Replace the role's permission set."""

        raise NotImplementedError

    def delete_by_id(self, role_id: int) -> bool:
        raise NotImplementedError

    def set_active(self, role_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def count_all(self, *, is_active: Optional[bool] = None) -> int:
        raise NotImplementedError
