from __future__ import annotations

from flask import Flask, request

from ..common.pagination import parse_page_query
from ..common.responses import json_body, ok, ok_page
from ..container import Container


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"]
    guards = container.guards
    service = container.activity_service

    @app.route(f"{prefix}/activity", methods=["GET"], endpoint="activity_list")
    @guards.permission_required("READ_ACTIVITY")
    def list_activity():
        return ok_page(service.list_entries(parse_page_query(request.args)))

    @app.route(f"{prefix}/activity/user/<int:user_id>", methods=["GET"], endpoint="activity_for_user")
    @guards.permission_required("READ_ACTIVITY")
    def list_for_user(user_id: int):
        return ok_page(service.list_for_user(user_id, parse_page_query(request.args)))

    @app.route(f"{prefix}/activity/<int:activity_id>", methods=["GET"], endpoint="activity_get")
    @guards.permission_required("READ_ACTIVITY")
    def get_activity(activity_id: int):
        return ok(service.get_entry(activity_id))

    @app.route(f"{prefix}/activity", methods=["POST"], endpoint="activity_create")
    @guards.permission_required("MANAGE_ALL")
    def create_activity():
        return ok(service.create_entry(json_body()), message="Activity recorded", status=201)

    @app.route(f"{prefix}/activity/<int:activity_id>", methods=["DELETE"], endpoint="activity_delete")
    @guards.permission_required("MANAGE_ALL")
    def delete_activity(activity_id: int):
        service.purge(activity_id)
        return ok(message="Activity deleted")
