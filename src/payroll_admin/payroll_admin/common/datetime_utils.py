from __future__ import annotations

from datetime import date, datetime, timezone


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def month_start(today: date) -> date:
    return today.replace(day=1)
