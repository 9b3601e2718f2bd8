from __future__ import annotations

import logging
from datetime import datetime, timedelta

import pytest

from src.payroll_admin.payroll_admin.activity.model import NewActivity
from src.payroll_admin.payroll_admin.activity.service import ActivityService
from src.payroll_admin.payroll_admin.common.pagination import PageQuery
from src.payroll_admin.payroll_admin.core.enums import ActivityStatus
from src.payroll_admin.payroll_admin.core.exceptions import NotFoundError, ValidationError
from src.payroll_admin.payroll_admin.users.model import User

from tests.fakes import BrokenActivity, InMemoryActivity

NOW = datetime(2025, 5, 1, 12, 0)
ACTOR = User(user_id=1, first_name="Root", last_name="Admin", email="root@example.com", phone="+84 900 000 000", role_id=1)


def _entry(**overrides) -> NewActivity:
    base = dict(user_id=1, user_name="Root Admin", user_email="root@example.com", action="LOGIN", resource="AUTH", details="ok")
    base.update(overrides)
    return NewActivity(**base)


def test_record_for_snapshots_the_actor():
    repo = InMemoryActivity()
    service = ActivityService(repo, clock=lambda: NOW)

    activity_id = service.record_for(ACTOR, action="DELETE", resource="ROLE", details="gone", resource_id=5, status=ActivityStatus.WARNING)

    entry = repo.get_by_id(activity_id)
    assert (entry.user_name, entry.user_email) == ("Root Admin", "root@example.com")
    assert entry.resource_id == "5"
    assert entry.status == ActivityStatus.WARNING
    assert entry.created_at == NOW


def test_audit_failure_is_swallowed_and_logged(caplog):
    service = ActivityService(BrokenActivity(), clock=lambda: NOW)

    with caplog.at_level(logging.ERROR):
        assert service.record_safely(_entry()) is None

    assert "Failed to record activity LOGIN on AUTH" in caplog.text


def test_plain_record_still_raises():
    service = ActivityService(BrokenActivity(), clock=lambda: NOW)

    with pytest.raises(RuntimeError):
        service.record(_entry())


def test_browse_and_purge():
    repo = InMemoryActivity()
    service = ActivityService(repo, clock=lambda: NOW)
    first = service.record(_entry(user_id=1))
    service.record(_entry(user_id=2, action="LOGOUT"))

    assert service.list_entries(PageQuery()).total == 2
    assert [e.action for e in service.list_for_user(2, PageQuery()).items] == ["LOGOUT"]
    assert [e.action for e in service.recent(500)] == ["LOGOUT", "LOGIN"]

    service.purge(first)
    with pytest.raises(NotFoundError):
        service.get_entry(first)


def test_count_last_day():
    repo = InMemoryActivity()
    repo.add(_entry(), created_at=NOW - timedelta(days=3))
    repo.add(_entry(), created_at=NOW - timedelta(hours=1))
    service = ActivityService(repo, clock=lambda: NOW)

    assert (service.count_all(), service.count_last_day()) == (2, 1)


def test_create_entry_normalizes_and_validates():
    service = ActivityService(InMemoryActivity(), clock=lambda: NOW)

    entry = service.create_entry(
        {"user_id": "3", "user_name": "Ops", "user_email": "ops@example.com", "action": "export", "resource": "payroll"}
    )
    assert (entry.action, entry.resource, entry.details) == ("EXPORT", "PAYROLL", "EXPORT on PAYROLL")
    assert entry.status == ActivityStatus.SUCCESS

    with pytest.raises(ValidationError):
        service.create_entry({"user_id": 3, "action": "x", "resource": "y", "status": "meh"})
