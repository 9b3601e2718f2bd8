from __future__ import annotations

from typing import Sequence

from ..activity.model import ActivityEntry
from ..activity.service import ActivityService
from ..core.constants import DEFAULT_RECENT_ACTIVITY
from ..employees.repository import EmployeeRepository
from ..permissions.repository import PermissionRepository
from ..roles.repository import RoleRepository
from ..users.repository import UserRepository


class DashboardService:
    """Read-only counters for the admin landing page."""

    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        permissions: PermissionRepository,
        employees: EmployeeRepository,
        activity: ActivityService,
    ):
        self._users = users
        self._roles = roles
        self._permissions = permissions
        self._employees = employees
        self._activity = activity

    def stats(self) -> dict:
        total_users = self._users.count_all()
        active_users = self._users.count_all(is_active=True)
        return {
            "users": {"total": total_users, "active": active_users, "inactive": total_users - active_users},
            "roles": {"total": self._roles.count_all()},
            "permissions": {"total": self._permissions.count_all()},
            "employees": {"active": self._employees.count_all(is_active=True)},
            "activities": {"total": self._activity.count_all(), "recent": self._activity.count_last_day()},
        }

    def recent_activities(self, limit: int = DEFAULT_RECENT_ACTIVITY) -> Sequence[ActivityEntry]:
        return self._activity.recent(limit)
