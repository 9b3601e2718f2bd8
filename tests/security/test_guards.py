from __future__ import annotations

from flask import jsonify

from src.payroll_admin.payroll_admin.security.guards import current_auth


def test_no_token(client):
    res = client.get("/api/roles")

    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Access denied. No token provided.", "code": "NO_TOKEN"}


def test_wrong_scheme(client):
    res = client.get("/api/roles", headers={"Authorization": "Basic abc"})

    assert res.status_code == 401
    assert res.get_json()["code"] == "INVALID_TOKEN_FORMAT"


def test_invalid_token(client):
    res = client.get("/api/roles", headers={"Authorization": "Bearer nope"})

    assert res.status_code == 401
    assert res.get_json()["code"] == "INVALID_TOKEN"


def test_missing_permission_is_403_with_details(client, store, auth_header):
    user = store.add_user("basic@example.com", store.roles.get_by_name("USER").role_id)

    res = client.get("/api/roles", headers=auth_header(user))

    body = res.get_json()
    assert res.status_code == 403
    assert body["code"] == "INSUFFICIENT_PERMISSIONS"
    assert body["required_permission"] == "READ_ROLES"
    assert body["user_permissions"] == ["READ_USERS"]


def test_granted_permission_passes(client, admin, auth_header):
    res = client.get("/api/roles", headers=auth_header(admin))

    assert res.status_code == 200
    assert res.get_json()["data"]["pagination"]["total_items"] == 2


def test_deactivated_user_is_locked_out_immediately(client, store, admin, auth_header):
    header = auth_header(admin)
    store.users.set_active(admin.user_id, is_active=False)

    res = client.get("/api/roles", headers=header)

    assert res.status_code == 401
    assert res.get_json()["code"] == "USER_DEACTIVATED"


def test_role_gate(app, container, store, admin, auth_header):
    @app.route("/api/_admin-only", endpoint="admin_only")
    @container.guards.role_required("ADMIN")
    def admin_only():
        return jsonify({"user_id": current_auth().user_id})

    basic = store.add_user("basic@example.com", store.roles.get_by_name("USER").role_id)
    client = app.test_client()

    assert client.get("/api/_admin-only", headers=auth_header(admin)).get_json() == {"user_id": admin.user_id}

    res = client.get("/api/_admin-only", headers=auth_header(basic))
    assert res.status_code == 403
    assert res.get_json()["code"] == "INSUFFICIENT_ROLE"
    assert res.get_json()["user_role"] == "USER"
