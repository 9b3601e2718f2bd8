from __future__ import annotations

import pytest

from src.payroll_admin.payroll_admin.main import create_app

from tests.fakes import Store, make_container


@pytest.fixture
def store() -> Store:
    s = Store()
    s.seed_roles()
    return s


@pytest.fixture
def container(store):
    return make_container(store)


@pytest.fixture
def app(container):
    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(store):
    role = store.roles.get_by_name("ADMIN")
    return store.add_user("admin@example.com", role.role_id, first_name="System", last_name="Admin")


@pytest.fixture
def auth_header(container):
    def _header(user) -> dict:
        return {"Authorization": f"Bearer {container.codec.issue(user)}"}

    return _header
