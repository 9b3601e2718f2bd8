from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..common.pagination import Page, PageQuery
from .model import ActivityEntry, NewActivity


class ActivityRepository(Protocol):
    """Repository interface for the activity log (append and read; purge by id)."""

    def add(self, entry: NewActivity, *, created_at: datetime) -> int:
        raise NotImplementedError

    def get_by_id(self, activity_id: int) -> Optional[ActivityEntry]:
        raise NotImplementedError

    def list_page(self, query: PageQuery, *, user_id: Optional[int] = None) -> Page[ActivityEntry]:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[ActivityEntry]:
        raise NotImplementedError

    def delete_by_id(self, activity_id: int) -> bool:
        raise NotImplementedError

    def count_all(self, *, since: Optional[datetime] = None) -> int:
        raise NotImplementedError
