from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.pagination import Page, PageQuery
from ..common.validators import FieldErrors, require_email, require_int, require_length, require_non_empty
from ..core.constants import DEFAULT_RECENT_ACTIVITY, MAX_PAGE_SIZE
from ..core.enums import ActivityStatus
from ..core.exceptions import FieldValidationError, NotFoundError
from ..users.model import User
from .model import ActivityEntry, NewActivity
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


def _parse_status(value: Any) -> ActivityStatus:
    if value is None or value == "":
        return ActivityStatus.SUCCESS
    try:
        return ActivityStatus(str(value).strip().lower())
    except ValueError:
        raise FieldValidationError("status", "status must be success, warning or error")


class ActivityService:
    """Use case: record and browse the activity audit log."""

    def __init__(self, activities: ActivityRepository, *, clock: Callable[[], datetime] = now_local):
        self._activities = activities
        self._clock = clock

    def record(self, entry: NewActivity) -> int:
        return self._activities.add(entry, created_at=self._clock())

    def record_safely(self, entry: NewActivity) -> Optional[int]:
        """Best-effort write; an audit failure must never fail the caller."""
        try:
            return self.record(entry)
        except Exception:
            logger.exception("Failed to record activity %s on %s", entry.action, entry.resource)
            return None

    def record_for(
        self,
        actor: User,
        *,
        action: str,
        resource: str,
        details: str,
        status: ActivityStatus = ActivityStatus.SUCCESS,
        resource_id: Optional[object] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[int]:
        return self.record_safely(
            NewActivity(
                user_id=actor.user_id,
                user_name=actor.full_name,
                user_email=actor.email,
                action=action,
                resource=resource,
                details=details,
                status=status,
                resource_id=str(resource_id) if resource_id is not None else None,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )

    def create_entry(self, payload: Mapping[str, Any]) -> ActivityEntry:
        """Administrative insert of an arbitrary entry."""
        errors = FieldErrors()
        user_id = errors.check(require_int, payload.get("user_id"), "user_id")
        user_name = errors.check(require_non_empty, payload.get("user_name"), "user_name")
        user_email = errors.check(require_email, payload.get("user_email"), "user_email")
        action = errors.check(require_length, payload.get("action"), "action", 1, 40)
        resource = errors.check(require_length, payload.get("resource"), "resource", 1, 40)
        status = errors.check(_parse_status, payload.get("status"))
        errors.raise_if_any()

        resource_id = payload.get("resource_id")
        activity_id = self.record(
            NewActivity(
                user_id=user_id,
                user_name=user_name,
                user_email=user_email,
                action=action.upper(),
                resource=resource.upper(),
                details=str(payload.get("details") or f"{action.upper()} on {resource.upper()}"),
                status=status,
                resource_id=str(resource_id) if resource_id not in (None, "") else None,
                ip_address=payload.get("ip_address"),
                user_agent=payload.get("user_agent"),
            )
        )
        return self.get_entry(activity_id)

    def list_entries(self, query: PageQuery) -> Page[ActivityEntry]:
        return self._activities.list_page(query)

    def list_for_user(self, user_id: int, query: PageQuery) -> Page[ActivityEntry]:
        return self._activities.list_page(query, user_id=int(user_id))

    def get_entry(self, activity_id: int) -> ActivityEntry:
        entry = self._activities.get_by_id(int(activity_id))
        if not entry:
            raise NotFoundError("Activity not found")
        return entry

    def purge(self, activity_id: int) -> None:
        entry = self.get_entry(activity_id)
        self._activities.delete_by_id(entry.activity_id)
        logger.info("Purged activity %s", entry.activity_id)

    def recent(self, limit: int = DEFAULT_RECENT_ACTIVITY) -> Sequence[ActivityEntry]:
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        return self._activities.list_recent(limit)

    def count_all(self) -> int:
        return self._activities.count_all()

    def count_last_day(self) -> int:
        return self._activities.count_all(since=self._clock() - timedelta(hours=24))
