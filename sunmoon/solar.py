"""Sun position and the times of sunrise, sunset, twilight and golden hour."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Optional, Tuple

import numpy as np

from .models import GeoCoordinate, HorizontalPosition, SolarTimes
from .spherical import (
    RAD,
    altitude,
    azimuth,
    declination,
    ecliptic_longitude,
    sidereal_time,
    solar_mean_anomaly,
    sun_coords,
)
from .timebasis import J2000, from_julian, to_days, utc_midnight

__all__ = ["SolarAngle", "SOLAR_ANGLES", "position", "times"]

LOGGER = logging.getLogger(__name__)

J0 = 0.0009  # Julian day fraction offset of mean solar transit.


@dataclass(frozen=True)
class SolarAngle:
    """Solar altitude threshold and the result fields it populates."""

    angle: float  # Degrees; negative below the horizon.
    rise: str
    set: str


SOLAR_ANGLES: Tuple[SolarAngle, ...] = (
    SolarAngle(-0.833, "sunrise", "sunset"),
    SolarAngle(-0.3, "sunrise_end", "sunset_start"),
    SolarAngle(-6.0, "dawn", "dusk"),
    SolarAngle(-12.0, "nautical_dawn", "nautical_dusk"),
    SolarAngle(-18.0, "night_end", "night"),
    SolarAngle(6.0, "golden_hour_end", "golden_hour"),
)


def position(instant: datetime, coordinate: GeoCoordinate) -> HorizontalPosition:
    """Return the sun's azimuth and altitude for *coordinate* at *instant*."""

    lw = RAD * -coordinate.longitude
    phi = RAD * coordinate.latitude
    d = to_days(instant)

    with np.errstate(all="ignore"):
        c = sun_coords(d)
        H = sidereal_time(d, lw) - c.ra
        return HorizontalPosition(
            azimuth=float(azimuth(H, phi, c.dec)),
            altitude=float(altitude(H, phi, c.dec)),
        )


def _julian_cycle(d: float, lw: float) -> float:
    # Half rounds up.
    return float(math.floor(d - J0 - lw / (2 * math.pi) + 0.5))


def _approx_transit(Ht: float, lw: float, n: float) -> float:
    return J0 + (Ht + lw) / (2 * math.pi) + n


def _solar_transit_j(ds: float, M: float, L: float) -> float:
    return J2000 + ds + 0.0053 * math.sin(M) - 0.0069 * math.sin(2 * L)


def _hour_angle(h: float, phi: float, dec: float) -> Optional[float]:
    """Hour angle at which the sun reaches altitude *h*.

    Returns ``None`` when the sun never reaches *h*, i.e. when the cosine had
    to be clamped into ``[-1, 1]``.
    """

    cos_h = (math.sin(h) - math.sin(phi) * math.sin(dec)) / (
        math.cos(phi) * math.cos(dec)
    )
    clamped = float(np.clip(cos_h, -1.0, 1.0))
    if clamped != cos_h:
        return None
    return math.acos(clamped)


def _horizon_dip_degrees(height_m: float) -> float:
    """Depression of the visible horizon for an observer *height_m* above it."""

    if height_m <= 0:
        return 0.0
    return -2.076 * math.sqrt(height_m) / 60.0


def times(day: date | datetime, coordinate: GeoCoordinate) -> SolarTimes:
    """Compute solar noon, nadir and the threshold crossings on the UTC date of *day*.

    The solar cycle is taken at 12:00 UTC of that date, so every instant of
    the date yields the same events. The transit falls on the date except
    within a few degrees of the antimeridian, where the equation of time can
    push it minutes past midnight. Thresholds the sun does not reach that
    day are left as ``None``.
    """

    lw = RAD * -coordinate.longitude
    phi = RAD * coordinate.latitude
    dh = _horizon_dip_degrees(coordinate.height_m)

    d = to_days(utc_midnight(day) + timedelta(hours=12))
    n = _julian_cycle(d, lw)
    ds = _approx_transit(0.0, lw, n)

    M = float(solar_mean_anomaly(ds))
    L = float(ecliptic_longitude(M))
    dec = float(declination(L, 0.0))

    jnoon = _solar_transit_j(ds, M, L)

    results: Dict[str, Optional[datetime]] = {
        "solar_noon": from_julian(jnoon),
        "nadir": from_julian(jnoon - 0.5),
    }

    for threshold in SOLAR_ANGLES:
        h0 = (threshold.angle + dh) * RAD
        w = _hour_angle(h0, phi, dec)
        if w is None:
            LOGGER.debug(
                json.dumps(
                    {
                        "event": "solar_crossing_absent",
                        "angle": threshold.angle,
                        "lat": coordinate.latitude,
                        "transit_jd": jnoon,
                    }
                )
            )
            results[threshold.rise] = None
            results[threshold.set] = None
            continue

        jset = _solar_transit_j(_approx_transit(w, lw, n), M, L)
        jrise = jnoon - (jset - jnoon)
        results[threshold.rise] = from_julian(jrise)
        results[threshold.set] = from_julian(jset)

    return SolarTimes(**results)
