from __future__ import annotations

from datetime import datetime

import pytest

from src.payroll_admin.payroll_admin.core.enums import AuthProvider
from src.payroll_admin.payroll_admin.core.exceptions import InvalidLogin, ValidationError
from src.payroll_admin.payroll_admin.security.passwords import hash_password, verify_password

from tests.fakes import Store, make_container


@pytest.fixture
def store():
    s = Store()
    s.seed_roles()
    return s


@pytest.fixture
def auth(store):
    return make_container(store).auth_service


def _register_payload(**overrides) -> dict:
    body = {
        "first_name": "Linh",
        "last_name": "Tran",
        "email": "Linh@Example.com",
        "phone": "+84 912 345 678",
        "password": "Secret123",
    }
    body.update(overrides)
    return body


def test_login_returns_token_and_permissions(store, auth):
    user = store.add_user("ops@example.com", store.roles.get_by_name("ADMIN").role_id, password="Secret123")

    result = auth.login("OPS@example.com ", "Secret123")
    payload = result.as_payload(auth.expires_in)

    assert payload["expires_in"] == 24 * 3600
    assert payload["user"]["user_id"] == user.user_id
    assert "password_hash" not in payload["user"]
    assert "MANAGE_ALL" in payload["user"]["permissions"]
    assert isinstance(store.users.get_by_id(user.user_id).last_login, datetime)


@pytest.mark.parametrize(
    "email,password",
    [("ops@example.com", "wrong"), ("nobody@example.com", "Secret123"), ("idle@example.com", "Secret123")],
)
def test_login_failures_look_the_same(store, auth, email, password):
    role_id = store.roles.get_by_name("USER").role_id
    store.add_user("ops@example.com", role_id)
    store.add_user("idle@example.com", role_id, is_active=False)

    with pytest.raises(InvalidLogin) as exc:
        auth.login(email, password)

    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid email or password"


def test_external_identity_cannot_use_password(store, auth):
    user = store.add_user("sso@example.com", store.roles.get_by_name("USER").role_id)
    store.users.update(user.user_id, auth_provider=AuthProvider.EXTERNAL)

    with pytest.raises(InvalidLogin):
        auth.login("sso@example.com", "Secret123")


def test_register_assigns_default_role(store, auth):
    result = auth.register(_register_payload())

    assert result.context.role_name == "USER"
    assert result.context.permissions == frozenset({"READ_USERS"})
    assert store.users.get_by_email("linh@example.com") is not None


def test_register_creates_default_role_when_missing():
    store = Store()
    store.seed_permissions()
    auth = make_container(store).auth_service

    result = auth.register(_register_payload())

    assert store.roles.get_by_name("USER") is not None
    assert result.context.has("READ_USERS")


def test_register_requires_strong_password(auth):
    with pytest.raises(ValidationError) as exc:
        auth.register(_register_payload(password="alllowercase1"))
    assert exc.value.errors[0]["field"] == "password"


def test_register_rejects_duplicate_email(store, auth):
    store.add_user("linh@example.com", store.roles.get_by_name("USER").role_id)

    with pytest.raises(ValidationError):
        auth.register(_register_payload())


def test_known_identity_is_lenient(store, auth):
    store.add_user("ops@example.com", store.roles.get_by_name("USER").role_id)

    assert auth.known_identity(" OPS@example.com").email == "ops@example.com"
    assert auth.known_identity(None) is None


def test_verify_password_rejects_placeholder_hash():
    assert verify_password(auth_provider=AuthProvider.LOCAL, password_hash=hash_password("x1Y"), candidate="x1Y")
    assert not verify_password(auth_provider=AuthProvider.LOCAL, password_hash="not-a-hash", candidate="x1Y")
    assert not verify_password(auth_provider=AuthProvider.LOCAL, password_hash=None, candidate="x1Y")
