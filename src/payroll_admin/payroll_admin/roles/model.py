from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Role:
    """A named bundle of permissions assigned to users."""

    role_id: int
    name: str
    description: Optional[str] = None
    permission_ids: tuple[int, ...] = ()
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
