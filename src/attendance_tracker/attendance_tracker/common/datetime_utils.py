from __future__ import annotations

from datetime import date, datetime, time

import pytz


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock(value: str | time) -> time:
    """Parse an HH:MM (or HH:MM:SS) setting into a time of day."""
    if isinstance(value, time):
        return value
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value.strip(), fmt).time()


def now_utc() -> datetime:
    """Current instant, timezone-aware.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(pytz.UTC)
