"""Time helpers; all stored timestamps are UTC."""

from __future__ import annotations

from datetime import datetime, timezone

from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps from older records as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def months_before(now: datetime, months: int) -> datetime:
    """Return the same wall-clock instant ``months`` calendar months earlier.

    Days past the end of the target month are clamped (31 May -> 28/29 Feb).
    """
    return ensure_utc(now) - relativedelta(months=months)
