from __future__ import annotations


def _actions(store, user_id: int) -> list[str]:
    return [a.action for a in store.activity.items.values() if a.user_id == user_id]


def test_health_without_database(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.get_json()["data"] == {"status": "ok", "database": "not_configured"}


def test_unknown_route_uses_the_envelope(client):
    res = client.get("/api/nothing-here")

    assert res.status_code == 404
    body = res.get_json()
    assert body["success"] is False
    assert body["code"] == "NOT_FOUND"


def test_login_is_audited_after_the_response(client, store, admin):
    res = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "Secret123"})

    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "admin@example.com"

    res.close()
    assert "LOGIN" in _actions(store, admin.user_id)


def test_failed_login_for_known_email_is_audited(client, store, admin):
    res = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "nope"})

    assert res.status_code == 401
    assert res.get_json()["code"] == "INVALID_CREDENTIALS"
    res.close()
    failed = [a for a in store.activity.items.values() if a.action == "FAILED_LOGIN"]
    assert failed and failed[0].user_id == admin.user_id
    assert failed[0].status.value == "error"


def test_failed_login_for_unknown_email_is_not_audited(client, store):
    res = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})

    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid email or password"
    res.close()
    assert store.activity.items == {}


def test_register_then_verify(client):
    res = client.post(
        "/api/auth/register",
        json={
            "first_name": "Hoa",
            "last_name": "Pham",
            "email": "hoa@example.com",
            "phone": "+84 977 000 111",
            "password": "Secret123",
        },
    )
    assert res.status_code == 201
    token = res.get_json()["data"]["token"]

    res = client.get("/api/auth/verify", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 200
    assert res.get_json()["data"]["user"]["permissions"] == ["READ_USERS"]


def test_validation_errors_list_fields(client):
    res = client.post("/api/auth/register", json={"email": "bad"})

    body = res.get_json()
    assert res.status_code == 400
    assert body["code"] == "VALIDATION_ERROR"
    assert {"first_name", "last_name", "email", "phone", "password"} <= {e["field"] for e in body["errors"]}


def test_non_object_body_is_rejected(client, admin, auth_header):
    res = client.post("/api/roles", json=["not", "an", "object"], headers=auth_header(admin))

    assert res.status_code == 400


def test_role_delete_guard_over_http(client, store, admin, auth_header):
    admin_role = store.roles.get_by_name("ADMIN")

    res = client.delete(f"/api/roles/{admin_role.role_id}", headers=auth_header(admin))

    body = res.get_json()
    assert res.status_code == 400
    assert body["code"] == "RESOURCE_IN_USE"
    assert body["blocking_count"] == 1
    assert "1 active user(s)" in body["message"]


def test_payroll_round_trip(client, store, admin, auth_header):
    employee = store.add_employee(admin, hourly_wage="13000")
    headers = auth_header(admin)

    res = client.post(
        "/api/payroll",
        json={
            "employee_id": employee.employee_id,
            "work_date": "2025-04-02",
            "start_time": "22:00",
            "end_time": "02:00",
            "consumptions": [{"amount": 1000, "description": "Dinner"}],
            "imbalance": 500,
        },
        headers=headers,
    )
    assert res.status_code == 201
    created = res.get_json()["data"]
    assert (created["worked_hours"], created["worked_minutes"]) == (4, 0)
    assert created["gross_pay"] == 52000.0
    assert created["total_deductions"] == 1500.0
    assert created["net_pay"] == 50500.0
    assert created["status"] == "PENDING"
    res.close()
    assert "CREATE" in _actions(store, admin.user_id)

    res = client.put(f"/api/payroll/{created['payroll_id']}", json={"status": "PAID"}, headers=headers)
    assert res.get_json()["data"]["status"] == "PAID"

    res = client.put(f"/api/payroll/{created['payroll_id']}", json={"notes": "too late"}, headers=headers)
    assert res.status_code == 400
    assert res.get_json()["code"] == "PAYROLL_LOCKED"

    res = client.get("/api/payroll?status=PAID", headers=headers)
    assert res.get_json()["data"]["pagination"]["total_items"] == 1


def test_bad_time_keeps_specific_code(client, store, admin, auth_header):
    employee = store.add_employee(admin)

    res = client.post(
        "/api/payroll",
        json={"employee_id": employee.employee_id, "work_date": "2025-04-02", "start_time": "7pm", "end_time": "23:00"},
        headers=auth_header(admin),
    )

    assert res.status_code == 400
    assert res.get_json()["code"] == "INVALID_TIME_FORMAT"
    assert res.get_json()["errors"][0]["field"] == "start_time"


def test_dashboard_stats(client, store, admin, auth_header):
    store.add_user("idle@example.com", store.roles.get_by_name("USER").role_id, is_active=False)

    res = client.get("/api/dashboard/stats", headers=auth_header(admin))

    data = res.get_json()["data"]
    assert data["users"] == {"total": 2, "active": 1, "inactive": 1}
    assert data["roles"] == {"total": 2}
    assert data["employees"] == {"active": 0}


def test_audit_endpoints(client, store, admin, auth_header):
    headers = auth_header(admin)
    res = client.post("/api/auth/logout", headers=headers)
    res.close()

    res = client.get("/api/dashboard/recent-activities?limit=5", headers=headers)

    assert [a["action"] for a in res.get_json()["data"]][:1] == ["LOGOUT"]
    res = client.get(f"/api/activity/user/{admin.user_id}", headers=headers)
    assert res.get_json()["data"]["pagination"]["total_items"] >= 1
