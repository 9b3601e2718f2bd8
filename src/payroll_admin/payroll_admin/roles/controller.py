from __future__ import annotations

from flask import Flask, request

from ..activity.hooks import emit_activity
from ..common.pagination import parse_page_query
from ..common.responses import json_body, ok, ok_page, parse_bool_arg
from ..container import Container
from ..core.enums import ActivityStatus


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"]
    guards = container.guards
    service = container.role_service
    activity = container.activity_service

    @app.route(f"{prefix}/roles", methods=["GET"], endpoint="roles_list")
    @guards.permission_required("READ_ROLES")
    def list_roles():
        page = service.list_roles(parse_page_query(request.args), is_active=parse_bool_arg(request.args.get("is_active")))
        return ok_page(page)

    @app.route(f"{prefix}/roles/<int:role_id>", methods=["GET"], endpoint="roles_get")
    @guards.permission_required("READ_ROLES")
    def get_role(role_id: int):
        return ok(service.describe(service.get_role(role_id)))

    @app.route(f"{prefix}/roles", methods=["POST"], endpoint="roles_create")
    @guards.permission_required("CREATE_ROLES")
    def create_role():
        body = json_body()
        role = service.create_role(
            name=body.get("name"),
            description=body.get("description"),
            permission_ids=body.get("permission_ids"),
        )
        emit_activity(
            activity,
            action="CREATE",
            resource="ROLE",
            resource_id=role.role_id,
            details=f"CREATE on ROLE: {role.name}",
        )
        return ok(service.describe(role), message="Role created", status=201)

    @app.route(f"{prefix}/roles/<int:role_id>", methods=["PUT"], endpoint="roles_update")
    @guards.permission_required("UPDATE_ROLES")
    def update_role(role_id: int):
        role = service.update_role(role_id, json_body())
        emit_activity(
            activity,
            action="UPDATE",
            resource="ROLE",
            resource_id=role_id,
            details=f"UPDATE on ROLE with ID: {role_id}",
        )
        return ok(service.describe(role), message="Role updated")

    @app.route(f"{prefix}/roles/<int:role_id>", methods=["DELETE"], endpoint="roles_delete")
    @guards.permission_required("DELETE_ROLES")
    def delete_role(role_id: int):
        service.delete_role(role_id)
        emit_activity(
            activity,
            action="DELETE",
            resource="ROLE",
            resource_id=role_id,
            details=f"DELETE on ROLE with ID: {role_id}",
            status=ActivityStatus.WARNING,
        )
        return ok(message="Role deleted")

    @app.route(f"{prefix}/roles/<int:role_id>/activate", methods=["PATCH"], endpoint="roles_activate")
    @guards.permission_required("UPDATE_ROLES")
    def activate_role(role_id: int):
        role = service.activate_role(role_id)
        emit_activity(
            activity,
            action="ACTIVATE",
            resource="ROLE",
            resource_id=role_id,
            details=f"ACTIVATE on ROLE with ID: {role_id}",
        )
        return ok(service.describe(role), message="Role activated")

    @app.route(f"{prefix}/roles/<int:role_id>/deactivate", methods=["PATCH"], endpoint="roles_deactivate")
    @guards.permission_required("UPDATE_ROLES")
    def deactivate_role(role_id: int):
        role = service.deactivate_role(role_id)
        emit_activity(
            activity,
            action="DEACTIVATE",
            resource="ROLE",
            resource_id=role_id,
            details=f"DEACTIVATE on ROLE with ID: {role_id}",
        )
        return ok(service.describe(role), message="Role deactivated")
