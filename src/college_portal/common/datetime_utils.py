from __future__ import annotations

from datetime import date, datetime
from typing import Any


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def as_date(value: Any) -> date:
    """Coerce a stored date (date, datetime or ISO string) into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value).strip()[:10])


def today_iso(now: datetime | None = None) -> str:
    return (now or now_local()).date().isoformat()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
