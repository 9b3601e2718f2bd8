from __future__ import annotations

from typing import Optional

from flask import after_this_request, request

from ..core.enums import ActivityStatus
from ..security.guards import current_auth
from ..users.model import User
from .service import ActivityService


def emit_activity(
    activities: ActivityService,
    *,
    action: str,
    resource: str,
    details: str,
    resource_id: Optional[object] = None,
    status: ActivityStatus = ActivityStatus.SUCCESS,
    actor: Optional[User] = None,
) -> None:
    """Schedule an audit entry for the current request.

    Handlers call this once they know the operation succeeded. The write runs
    when the response is closed, so it never delays or fails the response.
    """
    actor = actor or current_auth().user
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr or "unknown").split(",")[0].strip()
    user_agent = request.headers.get("User-Agent", "unknown")

    @after_this_request
    def _schedule(response):
        response.call_on_close(
            lambda: activities.record_for(
                actor,
                action=action,
                resource=resource,
                details=details,
                status=status,
                resource_id=resource_id,
                ip_address=ip_address,
                user_agent=user_agent,
            )
        )
        return response
