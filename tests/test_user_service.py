from __future__ import annotations

from decimal import Decimal

import pytest

from src.payroll_admin.payroll_admin.common.pagination import PageQuery
from src.payroll_admin.payroll_admin.core.exceptions import (
    EmployeeNotFound,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)
from src.payroll_admin.payroll_admin.security.passwords import verify_password

from tests.fakes import Store, make_container


@pytest.fixture
def store():
    s = Store()
    s.seed_roles()
    return s


@pytest.fixture
def container(store):
    return make_container(store)


def _new_user(role_id: int, **overrides) -> dict:
    body = {
        "first_name": "Minh",
        "last_name": "Le",
        "email": "minh@example.com",
        "phone": "+84 933 111 222",
        "role_id": role_id,
        "password": "secret",
    }
    body.update(overrides)
    return body


def test_admin_creates_user_with_hashed_password(store, container):
    role_id = store.roles.get_by_name("USER").role_id

    user = container.user_service.create_user(_new_user(role_id))

    assert user.role_name == "USER"
    assert user.password_hash != "secret"
    assert verify_password(auth_provider=user.auth_provider, password_hash=user.password_hash, candidate="secret")


def test_create_user_reports_every_bad_field(store, container):
    with pytest.raises(ValidationError) as exc:
        container.user_service.create_user(_new_user(None, email="nope", password="123"))

    assert {e["field"] for e in exc.value.errors} == {"email", "role_id", "password"}


def test_create_user_with_unknown_role(container):
    with pytest.raises(ValidationError):
        container.user_service.create_user(_new_user(777))


def test_update_profile_cannot_change_role(store, container):
    user = store.add_user("me@example.com", store.roles.get_by_name("USER").role_id)

    updated = container.user_service.update_profile(
        user.user_id, {"first_name": "Renamed", "role_id": store.roles.get_by_name("ADMIN").role_id}
    )

    assert updated.first_name == "Renamed"
    assert updated.role_name == "USER"


def test_email_must_stay_unique(store, container):
    role_id = store.roles.get_by_name("USER").role_id
    store.add_user("taken@example.com", role_id)
    user = store.add_user("me@example.com", role_id)

    with pytest.raises(ValidationError):
        container.user_service.update_user(user.user_id, {"email": "taken@example.com"})


def test_cannot_delete_or_deactivate_yourself(store, container):
    me = store.add_user("me@example.com", store.roles.get_by_name("ADMIN").role_id)

    with pytest.raises(ValidationError):
        container.user_service.delete_user(actor_id=me.user_id, user_id=me.user_id)
    with pytest.raises(ValidationError):
        container.user_service.deactivate_user(actor_id=me.user_id, user_id=me.user_id)


def test_user_with_employee_profile_cannot_be_deleted(store, container):
    admin = store.add_user("admin@example.com", store.roles.get_by_name("ADMIN").role_id)
    worker = store.add_user("worker@example.com", store.roles.get_by_name("USER").role_id)
    store.add_employee(worker)

    with pytest.raises(ReferentialIntegrityError):
        container.user_service.delete_user(actor_id=admin.user_id, user_id=worker.user_id)


def test_list_users_filters(store, container):
    role_id = store.roles.get_by_name("USER").role_id
    store.add_user("on@example.com", role_id)
    store.add_user("off@example.com", role_id, is_active=False)

    page = container.user_service.list_users(PageQuery(), role_id=str(role_id), is_active=False)

    assert [u.email for u in page.items] == ["off@example.com"]
    with pytest.raises(NotFoundError):
        container.user_service.get_user(999)


def test_employee_profile_lifecycle(store, container):
    worker = store.add_user("worker@example.com", store.roles.get_by_name("USER").role_id)
    employees = container.employee_service

    created = employees.create_employee(user_id=worker.user_id)
    assert created.hourly_wage == Decimal("6500")
    assert [u.user_id for u in employees.available_users()] == []

    with pytest.raises(ValidationError):
        employees.create_employee(user_id=worker.user_id)

    employees.deactivate_employee(created.employee_id)
    with pytest.raises(EmployeeNotFound):
        employees.get_for_user(worker.user_id)

    revived = employees.create_employee(user_id=worker.user_id, hourly_wage="8000")
    assert revived.employee_id == created.employee_id
    assert revived.is_active is True
    assert revived.hourly_wage == Decimal("8000")


def test_employee_for_unknown_user(container):
    with pytest.raises(ValidationError):
        container.employee_service.create_employee(user_id=404)
    with pytest.raises(EmployeeNotFound) as exc:
        container.employee_service.get_employee(404)
    assert exc.value.status_code == 404
