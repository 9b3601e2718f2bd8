from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PermissionAction


@dataclass(frozen=True)
class Permission:
    """An atomic named capability, scoped to a module and an action kind."""

    permission_id: int
    name: str
    module: str
    action: PermissionAction
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
