"""Conversions between UTC instants and the continuous Julian day timeline."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta
from typing import Optional

__all__ = [
    "J1970",
    "J2000",
    "DAY_MS",
    "to_julian",
    "from_julian",
    "to_days",
    "from_days",
    "hours_later",
    "utc_midnight",
]

DAY_MS = 1000 * 60 * 60 * 24
J1970 = 2440588.0  # Julian day of 1970-01-01T12:00Z minus half a day.
J2000 = 2451545.0  # Julian day of the J2000.0 epoch.

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return instant.astimezone(UTC)


def to_julian(instant: datetime) -> float:
    """Return the Julian day number of *instant*."""

    elapsed = _as_utc(instant) - _EPOCH
    return elapsed / _MILLISECOND / DAY_MS - 0.5 + J1970


def from_julian(j: float) -> Optional[datetime]:
    """Return the UTC instant for Julian day *j*.

    Non-finite input (the result of a degenerate formula upstream) and values
    beyond the range of :class:`datetime` yield ``None``.
    """

    if not math.isfinite(j):
        return None
    ms = round((j + 0.5 - J1970) * DAY_MS)
    try:
        return _EPOCH + timedelta(milliseconds=ms)
    except OverflowError:
        return None


def to_days(instant: datetime) -> float:
    """Days elapsed since J2000.0."""

    return to_julian(instant) - J2000


def from_days(d: float) -> Optional[datetime]:
    return from_julian(d + J2000)


def hours_later(instant: datetime, hours: float) -> datetime:
    return instant + timedelta(milliseconds=round(hours * 60 * 60 * 1000))


def utc_midnight(day: date | datetime) -> datetime:
    """Start of the UTC calendar day containing *day*.

    Aware datetimes are first converted to UTC; plain dates are taken as UTC
    dates.
    """

    if isinstance(day, datetime):
        day = _as_utc(day).date()
    return datetime(day.year, day.month, day.day, tzinfo=UTC)
