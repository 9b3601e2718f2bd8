from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ActivityStatus


@dataclass(frozen=True)
class ActivityEntry:
    """One append-only audit record of something a user did."""

    activity_id: int
    user_id: int
    user_name: str
    user_email: str
    action: str
    resource: str
    details: str
    status: ActivityStatus = ActivityStatus.SUCCESS
    resource_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class NewActivity:
    user_id: int
    user_name: str
    user_email: str
    action: str
    resource: str
    details: str
    status: ActivityStatus = ActivityStatus.SUCCESS
    resource_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
