from __future__ import annotations

from flask import Flask, request

from ..activity.hooks import emit_activity
from ..common.pagination import parse_page_query
from ..common.responses import json_body, ok, ok_page, parse_bool_arg
from ..container import Container
from ..core.enums import ActivityStatus
from ..core.exceptions import InvalidLogin
from ..security.guards import current_auth
from .model import public_view
from .service import session_view


def register(app: Flask, container: Container) -> None:
    prefix = app.config["API_PREFIX"]
    guards = container.guards
    auth_service = container.auth_service
    user_service = container.user_service
    activity = container.activity_service

    # auth

    @app.route(f"{prefix}/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        try:
            result = auth_service.login(body.get("email"), body.get("password"))
        except InvalidLogin:
            known = auth_service.known_identity(body.get("email"))
            if known:
                emit_activity(
                    activity,
                    action="FAILED_LOGIN",
                    resource="AUTH",
                    details="Failed sign-in attempt: wrong credentials",
                    status=ActivityStatus.ERROR,
                    actor=known,
                )
            raise

        emit_activity(
            activity,
            action="LOGIN",
            resource="AUTH",
            details="User signed in",
            actor=result.context.user,
        )
        return ok(result.as_payload(auth_service.expires_in), message="Signed in")

    @app.route(f"{prefix}/auth/register", methods=["POST"], endpoint="auth_register")
    def register_user():
        result = auth_service.register(json_body())
        emit_activity(
            activity,
            action="REGISTER",
            resource="AUTH",
            details="New user registered",
            actor=result.context.user,
        )
        return ok(result.as_payload(auth_service.expires_in), message="User registered", status=201)

    @app.route(f"{prefix}/auth/verify", methods=["GET"], endpoint="auth_verify")
    @guards.login_required
    def verify():
        return ok({"user": session_view(current_auth())})

    @app.route(f"{prefix}/auth/refresh", methods=["POST"], endpoint="auth_refresh")
    @guards.login_required
    def refresh():
        result = auth_service.refresh(current_auth())
        return ok(result.as_payload(auth_service.expires_in), message="Token refreshed")

    @app.route(f"{prefix}/auth/logout", methods=["POST"], endpoint="auth_logout")
    @guards.login_required
    def logout():
        # Tokens are stateless; the client discards its copy.
        emit_activity(activity, action="LOGOUT", resource="AUTH", details="User signed out")
        return ok(message="Signed out")

    # users

    @app.route(f"{prefix}/users", methods=["GET"], endpoint="users_list")
    @guards.permission_required("READ_USERS")
    def list_users():
        page = user_service.list_users(
            parse_page_query(request.args),
            role_id=request.args.get("role_id"),
            is_active=parse_bool_arg(request.args.get("is_active")),
        )
        return ok_page(page, serialize=public_view)

    @app.route(f"{prefix}/users/profile", methods=["PUT"], endpoint="users_profile")
    @guards.login_required
    def update_profile():
        user = user_service.update_profile(current_auth().user_id, json_body())
        emit_activity(
            activity,
            action="UPDATE",
            resource="PROFILE",
            resource_id=user.user_id,
            details="Profile updated",
        )
        return ok(public_view(user), message="Profile updated")

    @app.route(f"{prefix}/users/<int:user_id>", methods=["GET"], endpoint="users_get")
    @guards.permission_required("READ_USERS")
    def get_user(user_id: int):
        return ok(public_view(user_service.get_user(user_id)))

    @app.route(f"{prefix}/users", methods=["POST"], endpoint="users_create")
    @guards.permission_required("CREATE_USERS")
    def create_user():
        user = user_service.create_user(json_body())
        emit_activity(
            activity,
            action="CREATE",
            resource="USER",
            resource_id=user.user_id,
            details=f"CREATE on USER: {user.full_name}",
        )
        return ok(public_view(user), message="User created", status=201)

    @app.route(f"{prefix}/users/<int:user_id>", methods=["PUT"], endpoint="users_update")
    @guards.permission_required("UPDATE_USERS")
    def update_user(user_id: int):
        user = user_service.update_user(user_id, json_body())
        emit_activity(
            activity,
            action="UPDATE",
            resource="USER",
            resource_id=user_id,
            details=f"UPDATE on USER with ID: {user_id}",
        )
        return ok(public_view(user), message="User updated")

    @app.route(f"{prefix}/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    @guards.permission_required("DELETE_USERS")
    def delete_user(user_id: int):
        user_service.delete_user(actor_id=current_auth().user_id, user_id=user_id)
        emit_activity(
            activity,
            action="DELETE",
            resource="USER",
            resource_id=user_id,
            details=f"DELETE on USER with ID: {user_id}",
            status=ActivityStatus.WARNING,
        )
        return ok(message="User deleted")

    @app.route(f"{prefix}/users/<int:user_id>/activate", methods=["PATCH"], endpoint="users_activate")
    @guards.permission_required("UPDATE_USERS")
    def activate_user(user_id: int):
        user = user_service.activate_user(user_id)
        emit_activity(
            activity,
            action="ACTIVATE",
            resource="USER",
            resource_id=user_id,
            details=f"ACTIVATE on USER with ID: {user_id}",
        )
        return ok(public_view(user), message="User activated")

    @app.route(f"{prefix}/users/<int:user_id>/deactivate", methods=["PATCH"], endpoint="users_deactivate")
    @guards.permission_required("UPDATE_USERS")
    def deactivate_user(user_id: int):
        user = user_service.deactivate_user(actor_id=current_auth().user_id, user_id=user_id)
        emit_activity(
            activity,
            action="DEACTIVATE",
            resource="USER",
            resource_id=user_id,
            details=f"DEACTIVATE on USER with ID: {user_id}",
        )
        return ok(public_view(user), message="User deactivated")
