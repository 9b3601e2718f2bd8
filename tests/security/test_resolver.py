from __future__ import annotations

import pytest

from src.payroll_admin.payroll_admin.core.exceptions import (
    IdentityDeactivated,
    IdentityNotFound,
    MalformedCredential,
    NoCredential,
    PermissionDenied,
    RoleMismatch,
)
from src.payroll_admin.payroll_admin.security.resolver import extract_bearer

from tests.fakes import Store, make_container


@pytest.fixture
def world():
    store = Store()
    store.seed_roles()
    container = make_container(store)
    return store, container


@pytest.mark.parametrize("header", [None, ""])
def test_missing_header(header):
    with pytest.raises(NoCredential) as exc:
        extract_bearer(header)
    assert exc.value.code == "NO_TOKEN"


@pytest.mark.parametrize("header", ["Token abc", "bearer abc", "Bearer ", "Bearer    "])
def test_malformed_header(header):
    with pytest.raises(MalformedCredential) as exc:
        extract_bearer(header)
    assert exc.value.code == "INVALID_TOKEN_FORMAT"


def test_resolves_permissions_of_the_role(world):
    store, container = world
    role_id = store.role_with("CLERK", "READ_PAYROLL", "CREATE_PAYROLL")
    user = store.add_user("clerk@example.com", role_id)

    ctx = container.resolver.resolve(f"Bearer {container.codec.issue(user)}")

    assert ctx.user_id == user.user_id
    assert ctx.role_name == "CLERK"
    assert ctx.permissions == frozenset({"READ_PAYROLL", "CREATE_PAYROLL"})
    assert ctx.has("READ_PAYROLL")
    assert not ctx.has("DELETE_PAYROLL")


def test_permissions_are_deduplicated(world):
    store, container = world
    ids = store.seed_permissions()
    role_id = store.roles.create(name="DUP", description=None, permission_ids=[ids["READ_USERS"], ids["READ_USERS"]])
    user = store.add_user("dup@example.com", role_id)

    assert container.resolver.context_for(user).permissions == frozenset({"READ_USERS"})


def test_deleted_or_deactivated_user_is_rejected(world):
    store, container = world
    role = store.roles.get_by_name("USER")
    gone = store.add_user("gone@example.com", role.role_id)
    idle = store.add_user("idle@example.com", role.role_id)
    gone_token = container.codec.issue(gone)
    idle_token = container.codec.issue(idle)
    store.users.delete_by_id(gone.user_id)
    store.users.set_active(idle.user_id, is_active=False)

    with pytest.raises(IdentityNotFound):
        container.resolver.resolve(f"Bearer {gone_token}")
    with pytest.raises(IdentityDeactivated) as exc:
        container.resolver.resolve(f"Bearer {idle_token}")
    assert exc.value.status_code == 401


def test_role_change_applies_to_existing_token(world):
    store, container = world
    user = store.add_user("promo@example.com", store.roles.get_by_name("USER").role_id)
    header = f"Bearer {container.codec.issue(user)}"
    assert not container.resolver.resolve(header).has("MANAGE_ALL")

    store.users.update(user.user_id, role_id=store.roles.get_by_name("ADMIN").role_id)

    assert container.resolver.resolve(header).has("MANAGE_ALL")


def test_user_with_missing_role_has_no_permissions(world):
    store, container = world
    user = store.add_user("orphan@example.com", 999)

    ctx = container.resolver.context_for(user)

    assert ctx.role_name is None
    assert ctx.permissions == frozenset()


def test_permission_denied_reports_required_and_granted(world):
    store, container = world
    user = store.add_user("basic@example.com", store.roles.get_by_name("USER").role_id)
    ctx = container.resolver.context_for(user)

    with pytest.raises(PermissionDenied) as exc:
        container.resolver.require_permission(ctx, "DELETE_ROLES")

    assert exc.value.status_code == 403
    assert exc.value.extra() == {"required_permission": "DELETE_ROLES", "user_permissions": ["READ_USERS"]}


def test_role_gate_reads_the_current_role(world):
    store, container = world
    user = store.add_user("admin2@example.com", store.roles.get_by_name("ADMIN").role_id)
    ctx = container.resolver.context_for(user)
    container.resolver.require_role(ctx, "ADMIN")

    store.users.update(user.user_id, role_id=store.roles.get_by_name("USER").role_id)

    with pytest.raises(RoleMismatch) as exc:
        container.resolver.require_role(ctx, "ADMIN")
    assert exc.value.extra() == {"required_role": "ADMIN", "user_role": "USER"}
