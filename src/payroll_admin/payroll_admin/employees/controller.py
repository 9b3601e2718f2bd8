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
    service = container.employee_service
    activity = container.activity_service

    @app.route(f"{prefix}/employees", methods=["GET"], endpoint="employees_list")
    @guards.permission_required("READ_USERS")
    def list_employees():
        return ok_page(service.list_employees(parse_page_query(request.args)))

    @app.route(f"{prefix}/employees/users/available", methods=["GET"], endpoint="employees_available_users")
    @guards.permission_required("READ_USERS")
    def available_users():
        return ok(list(service.available_users()))

    @app.route(f"{prefix}/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @guards.permission_required("READ_USERS")
    def get_employee(employee_id: int):
        return ok(service.get_employee(employee_id))

    @app.route(f"{prefix}/employees", methods=["POST"], endpoint="employees_create")
    @guards.permission_required("CREATE_USERS")
    def create_employee():
        body = json_body()
        employee = service.create_employee(user_id=body.get("user_id"), hourly_wage=body.get("hourly_wage"))
        emit_activity(
            activity,
            action="CREATE",
            resource="EMPLOYEE",
            resource_id=employee.employee_id,
            details=f"CREATE on EMPLOYEE: {employee.display_name}",
        )
        return ok(employee, message="Employee created", status=201)

    @app.route(f"{prefix}/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @guards.permission_required("UPDATE_USERS")
    def update_employee(employee_id: int):
        employee = service.update_employee(employee_id, json_body())
        emit_activity(
            activity,
            action="UPDATE",
            resource="EMPLOYEE",
            resource_id=employee_id,
            details=f"UPDATE on EMPLOYEE with ID: {employee_id}",
        )
        return ok(employee, message="Employee updated")

    @app.route(f"{prefix}/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @guards.permission_required("DELETE_USERS")
    def deactivate_employee(employee_id: int):
        employee = service.deactivate_employee(employee_id)
        emit_activity(
            activity,
            action="DELETE",
            resource="EMPLOYEE",
            resource_id=employee_id,
            details=f"DELETE on EMPLOYEE with ID: {employee_id}",
            status=ActivityStatus.WARNING,
        )
        return ok(employee, message="Employee deactivated")
