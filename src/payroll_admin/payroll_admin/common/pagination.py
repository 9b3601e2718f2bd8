from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class PageQuery:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str = ""

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    query: PageQuery = field(default_factory=PageQuery)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.query.limit) if self.total else 0

    def pagination(self) -> dict:
        return {
            "current_page": self.query.page,
            "total_pages": self.total_pages,
            "total_items": self.total,
            "items_per_page": self.query.limit,
            "has_next": self.query.page < self.total_pages,
            "has_prev": self.query.page > 1,
        }


def to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def parse_page_query(args: Mapping[str, Any]) -> PageQuery:
    """Build a PageQuery from request args; junk values fall back to defaults."""
    page = max(to_int(args.get("page"), 1), 1)
    limit = to_int(args.get("limit"), DEFAULT_PAGE_SIZE)
    if limit < 1:
        limit = DEFAULT_PAGE_SIZE
    limit = min(limit, MAX_PAGE_SIZE)
    search = str(args.get("search") or "").strip()
    return PageQuery(page=page, limit=limit, search=search)


def like_pattern(search: str) -> str:
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
