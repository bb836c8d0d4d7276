"""Day-by-day sun/moon tables and time-of-day classification."""

from __future__ import annotations

import json
import logging
from datetime import UTC, date, datetime, timedelta
from typing import List

from . import lunar, solar
from .models import (
    DayAlmanac,
    DaylightPeriod,
    DaylightPeriodResult,
    GeoCoordinate,
    MoonSnapshot,
)
from .timebasis import utc_midnight

__all__ = ["build_almanac", "current_moon", "daylight_period"]

LOGGER = logging.getLogger(__name__)

# Upper altitude bound (degrees) of each period, in ascending order.
_PERIOD_BOUNDS = (
    (-12.0, DaylightPeriod.night),
    (-6.0, DaylightPeriod.nautical_twilight),
    (-0.833, DaylightPeriod.civil_twilight),
    (6.0, DaylightPeriod.golden_hour),
)


def build_almanac(
    start: date | datetime, days: int, coordinate: GeoCoordinate
) -> List[DayAlmanac]:
    """Sun and moon times for *days* consecutive UTC dates beginning at *start*.

    Each date carries the solar cycle centred on its 12:00 UTC.
    """

    if days < 1:
        raise ValueError("days must be at least 1")

    first = utc_midnight(start).date()
    table: List[DayAlmanac] = []
    for offset in range(days):
        day = first + timedelta(days=offset)
        table.append(
            DayAlmanac(
                day=day,
                sun=solar.times(day, coordinate),
                moon=lunar.times(day, coordinate),
            )
        )

    LOGGER.info(
        json.dumps(
            {
                "event": "almanac_built",
                "start": first.isoformat(),
                "days": days,
                "lat": coordinate.latitude,
                "lon": coordinate.longitude,
            }
        )
    )
    return table


def current_moon(instant: datetime, coordinate: GeoCoordinate) -> MoonSnapshot:
    """Phase and sky position of the moon for a display refreshed on a timer.

    ``visible`` uses the same horizon as :func:`lunar.times`, so it turns true
    at moonrise and false at moonset.
    """

    position = lunar.position(instant, coordinate)
    return MoonSnapshot(
        illumination=lunar.illumination(instant),
        position=position,
        visible=position.altitude > lunar.MOON_APPARENT_RADIUS,
    )


def daylight_period(
    instant: datetime, coordinate: GeoCoordinate
) -> DaylightPeriodResult:
    """Classify *instant* into night, twilight, golden hour or daylight.

    The period follows the sun's altitude directly, so it remains defined
    during polar day and polar night when crossing times are absent.
    """

    altitude = solar.position(instant, coordinate).altitude_degrees
    period = DaylightPeriod.daylight
    for upper, candidate in _PERIOD_BOUNDS:
        if altitude < upper:
            period = candidate
            break

    # The UTC date whose transit is local noon for this observer.
    local_day = (
        instant.astimezone(UTC) + timedelta(hours=coordinate.longitude / 15.0)
    ).date()
    noon = solar.times(local_day, coordinate).solar_noon
    is_morning = noon is not None and instant < noon
    return DaylightPeriodResult(period=period, is_morning=is_morning)
