from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageQuery
from ..core.enums import PermissionAction
from .model import Permission


class PermissionRepository(Protocol):
    """Repository interface for Permission.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, permission_id: int) -> Optional[Permission]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Permission]:
        raise NotImplementedError

    def get_many(self, permission_ids: Sequence[int]) -> Sequence[Permission]:
        raise NotImplementedError

    def list_page(
        self,
        query: PageQuery,
        *,
        module: Optional[str] = None,
        action: Optional[PermissionAction] = None,
    ) -> Page[Permission]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        description: Optional[str],
        module: str,
        action: PermissionAction,
    ) -> int:
        raise NotImplementedError

    def update(self, permission_id: int, **fields) -> bool:
        raise NotImplementedError

    def delete_by_id(self, permission_id: int) -> bool:
        raise NotImplementedError

    def set_active(self, permission_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def count_roles_using(self, permission_id: int, *, active_only: bool) -> int:
        """Number of roles whose permission set contains this permission."""

        raise NotImplementedError

    def list_modules(self) -> Sequence[str]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
