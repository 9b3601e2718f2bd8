from __future__ import annotations

from flask import Flask, request

from ..activity.hooks import emit_activity
from ..common.pagination import parse_page_query
from ..common.responses import json_body, ok, ok_page
from ..container import Container
from ..core.enums import ActivityStatus
from ..security.guards import current_auth
from .model import record_view


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"]
    guards = container.guards
    service = container.payroll_service
    activity = container.activity_service

    @app.route(f"{prefix}/payroll", methods=["GET"], endpoint="payroll_list")
    @guards.permission_required("READ_PAYROLL")
    def list_payroll():
        page = service.list_records(
            current_auth(),
            parse_page_query(request.args),
            status=request.args.get("status"),
            employee_id=request.args.get("employee_id"),
            date_from=request.args.get("date_from"),
            date_to=request.args.get("date_to"),
        )
        return ok_page(page, serialize=record_view)

    @app.route(f"{prefix}/payroll/my-employee", methods=["GET"], endpoint="payroll_my_employee")
    @guards.permission_required("READ_PAYROLL")
    def my_employee():
        return ok(service.my_employee(current_auth()))

    @app.route(f"{prefix}/payroll/stats/summary", methods=["GET"], endpoint="payroll_summary")
    @guards.permission_required("READ_PAYROLL")
    def summary():
        return ok(service.summary(current_auth()))

    @app.route(f"{prefix}/payroll/<int:payroll_id>", methods=["GET"], endpoint="payroll_get")
    @guards.permission_required("READ_PAYROLL")
    def get_payroll(payroll_id: int):
        return ok(record_view(service.get_record(current_auth(), payroll_id)))

    @app.route(f"{prefix}/payroll", methods=["POST"], endpoint="payroll_create")
    @guards.permission_required("CREATE_PAYROLL")
    def create_payroll():
        record = service.create_record(current_auth(), json_body())
        emit_activity(
            activity,
            action="CREATE",
            resource="PAYROLL",
            resource_id=record.payroll_id,
            details=f"CREATE on PAYROLL for employee {record.employee_id} ({record.work_date.isoformat()})",
        )
        return ok(record_view(record), message="Payroll record created", status=201)

    @app.route(f"{prefix}/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    @guards.permission_required("UPDATE_PAYROLL")
    def update_payroll(payroll_id: int):
        record = service.update_record(current_auth(), payroll_id, json_body())
        emit_activity(
            activity,
            action="UPDATE",
            resource="PAYROLL",
            resource_id=payroll_id,
            details=f"UPDATE on PAYROLL with ID: {payroll_id}",
        )
        return ok(record_view(record), message="Payroll record updated")

    @app.route(f"{prefix}/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="payroll_delete")
    @guards.permission_required("DELETE_PAYROLL")
    def delete_payroll(payroll_id: int):
        service.delete_record(current_auth(), payroll_id)
        emit_activity(
            activity,
            action="DELETE",
            resource="PAYROLL",
            resource_id=payroll_id,
            details=f"DELETE on PAYROLL with ID: {payroll_id}",
            status=ActivityStatus.WARNING,
        )
        return ok(message="Payroll record deleted")
