from __future__ import annotations

from flask import Flask, request

from ..common.pagination import to_int
from ..common.responses import ok
from ..container import Container
from ..core.constants import DEFAULT_RECENT_ACTIVITY


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"]
    guards = container.guards
    service = container.dashboard_service

    @app.route(f"{prefix}/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    @guards.permission_required("READ_DASHBOARD")
    def stats():
        return ok(service.stats())

    @app.route(f"{prefix}/dashboard/recent-activities", methods=["GET"], endpoint="dashboard_recent")
    @guards.permission_required("READ_AUDIT")
    def recent_activities():
        limit = to_int(request.args.get("limit"), DEFAULT_RECENT_ACTIVITY)
        return ok(list(service.recent_activities(limit)))
