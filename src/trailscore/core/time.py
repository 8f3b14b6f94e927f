"""
Time parsing and timezone alignment.

The engine compares `now` with hike start times, and those come from different
sources (CLI flags, JSON history files, API payloads). Mixing naive and aware
datetimes raises `TypeError`, so every comparison goes through `align_tz`.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo


def ensure_tz(dt: datetime, timezone: str) -> datetime:
    """Ensure `dt` has tzinfo; attach `timezone` if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=ZoneInfo(timezone))
    return dt


def align_tz(dt: datetime, reference: datetime) -> datetime:
    """Make `dt` comparable with `reference` (same awareness).

    A naive `dt` borrows the reference tzinfo; an aware `dt` compared with a naive
    reference keeps its own wall clock and drops tzinfo.
    """
    if (dt.tzinfo is None) == (reference.tzinfo is None):
        return dt
    if dt.tzinfo is None:
        return dt.replace(tzinfo=reference.tzinfo)
    return dt.replace(tzinfo=None)


def parse_datetime(value: str, timezone: str) -> datetime:
    """Parse ISO-8601 datetime string and ensure tzinfo is present.

    Notes:
    - Accepts a trailing `Z` (UTC) and converts it to `+00:00` for `fromisoformat`.
    - If the parsed value is naive, the provided `timezone` is attached.
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    return ensure_tz(dt, timezone)


def now_in(timezone: str) -> datetime:
    """Current wall-clock time in `timezone` (app layer only; the engine never calls this)."""
    return datetime.now(ZoneInfo(timezone))
