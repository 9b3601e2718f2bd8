from __future__ import annotations

from flask import Flask, request

from ..activity.hooks import emit_activity
from ..common.pagination import parse_page_query
from ..common.responses import json_body, ok, ok_page
from ..container import Container
from ..core.enums import ActivityStatus


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"]
    guards = container.guards
    service = container.permission_service
    activity = container.activity_service

    @app.route(f"{prefix}/permissions", methods=["GET"], endpoint="permissions_list")
    @guards.permission_required("READ_PERMISSIONS")
    def list_permissions():
        page = service.list_permissions(
            parse_page_query(request.args),
            module=request.args.get("module"),
            action=request.args.get("action"),
        )
        return ok_page(page)

    @app.route(f"{prefix}/permissions/modules/list", methods=["GET"], endpoint="permissions_modules")
    @guards.permission_required("READ_PERMISSIONS")
    def list_modules():
        return ok(list(service.list_modules()))

    @app.route(f"{prefix}/permissions/actions/list", methods=["GET"], endpoint="permissions_actions")
    @guards.permission_required("READ_PERMISSIONS")
    def list_actions():
        return ok(service.list_actions())

    @app.route(f"{prefix}/permissions/<int:permission_id>", methods=["GET"], endpoint="permissions_get")
    @guards.permission_required("READ_PERMISSIONS")
    def get_permission(permission_id: int):
        return ok(service.get_permission(permission_id))

    @app.route(f"{prefix}/permissions", methods=["POST"], endpoint="permissions_create")
    @guards.permission_required("CREATE_PERMISSIONS")
    def create_permission():
        body = json_body()
        permission = service.create_permission(
            name=body.get("name"),
            description=body.get("description"),
            module=body.get("module"),
            action=body.get("action"),
        )
        emit_activity(
            activity,
            action="CREATE",
            resource="PERMISSION",
            resource_id=permission.permission_id,
            details=f"CREATE on PERMISSION: {permission.name}",
        )
        return ok(permission, message="Permission created", status=201)

    @app.route(f"{prefix}/permissions/<int:permission_id>", methods=["PUT"], endpoint="permissions_update")
    @guards.permission_required("UPDATE_PERMISSIONS")
    def update_permission(permission_id: int):
        permission = service.update_permission(permission_id, json_body())
        emit_activity(
            activity,
            action="UPDATE",
            resource="PERMISSION",
            resource_id=permission_id,
            details=f"UPDATE on PERMISSION with ID: {permission_id}",
        )
        return ok(permission, message="Permission updated")

    @app.route(f"{prefix}/permissions/<int:permission_id>", methods=["DELETE"], endpoint="permissions_delete")
    @guards.permission_required("DELETE_PERMISSIONS")
    def delete_permission(permission_id: int):
        service.delete_permission(permission_id)
        emit_activity(
            activity,
            action="DELETE",
            resource="PERMISSION",
            resource_id=permission_id,
            details=f"DELETE on PERMISSION with ID: {permission_id}",
            status=ActivityStatus.WARNING,
        )
        return ok(message="Permission deleted")

    @app.route(f"{prefix}/permissions/<int:permission_id>/activate", methods=["PATCH"], endpoint="permissions_activate")
    @guards.permission_required("UPDATE_PERMISSIONS")
    def activate_permission(permission_id: int):
        permission = service.activate_permission(permission_id)
        emit_activity(
            activity,
            action="ACTIVATE",
            resource="PERMISSION",
            resource_id=permission_id,
            details=f"ACTIVATE on PERMISSION with ID: {permission_id}",
        )
        return ok(permission, message="Permission activated")

    @app.route(f"{prefix}/permissions/<int:permission_id>/deactivate", methods=["PATCH"], endpoint="permissions_deactivate")
    @guards.permission_required("UPDATE_PERMISSIONS")
    def deactivate_permission(permission_id: int):
        permission = service.deactivate_permission(permission_id)
        emit_activity(
            activity,
            action="DEACTIVATE",
            resource="PERMISSION",
            resource_id=permission_id,
            details=f"DEACTIVATE on PERMISSION with ID: {permission_id}",
        )
        return ok(permission, message="Permission deactivated")
