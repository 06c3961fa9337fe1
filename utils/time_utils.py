"""Time conversion utilities for orbit propagation.

Provides conversions between Python datetime and Julian Date, and
helpers for building the date range of the NEO feed request.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from utils.constants import JD_UNIX_EPOCH, NEO_FEED_MAX_DAYS, SECONDS_PER_DAY

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def datetime_to_jd(dt: datetime) -> float:
    """Convert a datetime (UTC if naive) to a Julian Date."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    seconds = (dt - _UNIX_EPOCH).total_seconds()
    return JD_UNIX_EPOCH + seconds / SECONDS_PER_DAY


def jd_to_datetime(jd: float) -> datetime:
    """Convert a Julian Date back to a timezone-aware UTC datetime."""
    return _UNIX_EPOCH + timedelta(days=jd - JD_UNIX_EPOCH)


def feed_date_range(start: date, days: int = NEO_FEED_MAX_DAYS) -> tuple[date, date]:
    """Return the (start, end) dates of a NEO feed request.

    ``end`` lies ``days`` after ``start``. The feed includes both ends, so
    the response covers ``days + 1`` calendar dates. The endpoint rejects
    spans longer than NEO_FEED_MAX_DAYS.
    """
    if days < 1 or days > NEO_FEED_MAX_DAYS:
        raise ValueError(
            f"Feed range must be 1..{NEO_FEED_MAX_DAYS} days, got {days}"
        )
    return start, start + timedelta(days=days)


def validate_feed_range(start: date, end: date) -> None:
    """Raise ValueError if (start, end) is not a valid feed window."""
    if end < start:
        raise ValueError(f"Feed end {end} is before start {start}")
    span = (end - start).days
    if span > NEO_FEED_MAX_DAYS:
        raise ValueError(
            f"Feed range of {span} days exceeds the {NEO_FEED_MAX_DAYS}-day limit"
        )
