from __future__ import annotations

import pytest

from src.payroll_admin.payroll_admin.common.pagination import PageQuery
from src.payroll_admin.payroll_admin.core.enums import PermissionAction
from src.payroll_admin.payroll_admin.core.exceptions import ReferentialIntegrityError, ValidationError

from tests.fakes import Store, make_container


@pytest.fixture
def store():
    s = Store()
    s.seed_permissions()
    return s


@pytest.fixture
def permissions(store):
    return make_container(store).permission_service


def test_create_and_filter(permissions):
    created = permissions.create_permission(name="EXPORT_PAYROLL", description=None, module="PAYROLL", action="read")

    assert created.action == PermissionAction.READ
    page = permissions.list_permissions(PageQuery(search="export"), module="PAYROLL")
    assert [p.name for p in page.items] == ["EXPORT_PAYROLL"]


def test_bad_action_is_a_field_error(permissions):
    with pytest.raises(ValidationError) as exc:
        permissions.create_permission(name="X_THING", description=None, module="MISC", action="FLY")
    assert exc.value.errors == [{"field": "action", "message": "Invalid action"}]


def test_duplicate_name_rejected(permissions):
    with pytest.raises(ValidationError):
        permissions.create_permission(name="READ_USERS", description=None, module="USERS", action="READ")


def test_delete_blocked_by_any_role(store, permissions):
    role_id = store.role_with("ARCHIVE", "READ_PAYROLL")
    store.roles.set_active(role_id, is_active=False)
    read_payroll = store.permissions.get_by_name("READ_PAYROLL")

    with pytest.raises(ReferentialIntegrityError) as exc:
        permissions.delete_permission(read_payroll.permission_id)
    assert exc.value.blocking_count == 1

    # Only active roles block deactivation.
    assert permissions.deactivate_permission(read_payroll.permission_id).is_active is False


def test_deactivate_blocked_by_active_role(store, permissions):
    store.role_with("CLERK", "READ_PAYROLL")
    store.role_with("CLERK2", "READ_PAYROLL")
    read_payroll = store.permissions.get_by_name("READ_PAYROLL")

    with pytest.raises(ReferentialIntegrityError) as exc:
        permissions.deactivate_permission(read_payroll.permission_id)
    assert exc.value.blocking_count == 2


def test_unused_permission_can_be_deleted(store, permissions):
    created = permissions.create_permission(name="TMP_PERM", description="t", module="MISC", action="MANAGE")

    permissions.delete_permission(created.permission_id)

    assert store.permissions.get_by_name("TMP_PERM") is None


def test_modules_and_actions(permissions):
    assert "PAYROLL" in permissions.list_modules()
    assert permissions.list_actions() == ["CREATE", "READ", "UPDATE", "DELETE", "MANAGE"]
