"""Moon position, illumination and rise/set times.

Orbital elements follow the low-precision series at
http://aa.quae.nl/en/reken/hemelpositie.html. Rise and set are located by
sampling the moon's altitude hourly across the UTC day and fitting a
parabola through each consecutive two-hour window.
"""

from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime
from typing import Optional, Tuple

import numpy as np

from .models import GeoCoordinate, LunarIllumination, LunarPosition, LunarTimes
from .spherical import (
    RAD,
    ArrayLike,
    EquatorialCoords,
    altitude,
    azimuth,
    declination,
    right_ascension,
    sidereal_time,
    sun_coords,
)
from .timebasis import hours_later, to_days, utc_midnight

__all__ = ["MOON_APPARENT_RADIUS", "moon_coords", "position", "illumination", "times"]

LOGGER = logging.getLogger(__name__)

MOON_APPARENT_RADIUS = 0.133 * RAD
SUN_DISTANCE_KM = 149598000.0
WINDOW_HOURS = 2
WINDOW_COUNT = 12


def _moon_elements(d: ArrayLike) -> Tuple[ArrayLike, ArrayLike, ArrayLike]:
    L = RAD * (218.316 + 13.176396 * d)  # Ecliptic longitude.
    M = RAD * (134.963 + 13.064993 * d)  # Mean anomaly.
    F = RAD * (93.272 + 13.229350 * d)  # Mean distance (argument of latitude).

    l = L + RAD * 6.289 * np.sin(M)
    b = RAD * 5.128 * np.sin(F)
    dist = 385001 - 20905 * np.cos(M)
    return right_ascension(l, b), declination(l, b), dist


def moon_coords(d: float) -> EquatorialCoords:
    """Equatorial coordinates and distance of the moon *d* days after J2000.0."""

    ra, dec, dist = _moon_elements(d)
    return EquatorialCoords(ra=float(ra), dec=float(dec), dist=float(dist))


def _refraction(h: ArrayLike) -> ArrayLike:
    # Saemundsson's formula; below the horizon the correction is held at its
    # horizon value so it stays finite.
    h = np.maximum(h, 0.0)
    return RAD * 0.017 / np.tan(h + RAD * 10.26 / (h + RAD * 5.10))


def _apparent_altitudes(d: ArrayLike, lw: float, phi: float) -> ArrayLike:
    ra, dec, _ = _moon_elements(d)
    H = sidereal_time(d, lw) - ra
    h = altitude(H, phi, dec)
    return h + _refraction(h)


def position(instant: datetime, coordinate: GeoCoordinate) -> LunarPosition:
    """Return the moon's azimuth, refracted altitude, distance and parallactic angle."""

    lw = RAD * -coordinate.longitude
    phi = RAD * coordinate.latitude
    d = to_days(instant)

    with np.errstate(all="ignore"):
        c = moon_coords(d)
        H = sidereal_time(d, lw) - c.ra
        h = altitude(H, phi, c.dec)
        h = h + _refraction(h)
        pa = np.arctan2(
            np.sin(H), np.tan(phi) * np.cos(c.dec) - np.sin(c.dec) * np.cos(H)
        )
        return LunarPosition(
            azimuth=float(azimuth(H, phi, c.dec)),
            altitude=float(h),
            distance=c.dist,
            parallactic_angle=float(pa),
        )


def illumination(instant: datetime) -> LunarIllumination:
    """Return the illuminated fraction, phase and bright-limb angle of the moon."""

    d = to_days(instant)
    s = sun_coords(d)
    m = moon_coords(d)

    cos_elongation = math.sin(s.dec) * math.sin(m.dec) + math.cos(s.dec) * math.cos(
        m.dec
    ) * math.cos(s.ra - m.ra)
    phi = math.acos(float(np.clip(cos_elongation, -1.0, 1.0)))

    inc = math.atan2(
        SUN_DISTANCE_KM * math.sin(phi), m.dist - SUN_DISTANCE_KM * math.cos(phi)
    )
    angle = math.atan2(
        math.cos(s.dec) * math.sin(s.ra - m.ra),
        math.sin(s.dec) * math.cos(m.dec)
        - math.cos(s.dec) * math.sin(m.dec) * math.cos(s.ra - m.ra),
    )
    sign = -1.0 if angle < 0 else 1.0

    return LunarIllumination(
        fraction=(1 + math.cos(inc)) / 2,
        phase=(0.5 + 0.5 * inc * sign / math.pi) % 1.0,
        angle=angle,
    )


def _window_roots(
    h0: float, h1: float, h2: float
) -> Tuple[int, float, float, float]:
    """Fit a parabola through three samples at x = -1, 0, 1.

    Returns the number of roots inside ``[-1, 1]``, the roots and the
    parabola's vertex value.
    """

    a = (h0 + h2) / 2 - h1
    b = (h2 - h0) / 2
    if a == 0:
        return 0, math.nan, math.nan, math.nan

    xe = -b / (2 * a)
    ye = (a * xe + b) * xe + h1
    disc = b * b - 4 * a * h1
    roots = 0
    x1 = x2 = 0.0

    if disc >= 0:
        dx = math.sqrt(disc) / (abs(a) * 2)
        x1 = xe - dx
        x2 = xe + dx
        if abs(x1) <= 1:
            roots += 1
        if abs(x2) <= 1:
            roots += 1
        if x1 < -1:
            x1 = x2

    return roots, x1, x2, ye


def times(day: date | datetime, coordinate: GeoCoordinate) -> LunarTimes:
    """Find moonrise and moonset during the UTC day containing *day*.

    The search samples every hour and solves each two-hour window
    separately, so a rise and set less than two hours apart can be missed.
    Below the horizon the refraction term is held at its horizon value, so
    events near the -5.1 degree pole of the unclamped formula can shift by
    tens of minutes or disappear compared with applying it as is.
    """

    t = utc_midnight(day)
    lw = RAD * -coordinate.longitude
    phi = RAD * coordinate.latitude

    d0 = to_days(t)
    sample_days = d0 + np.arange(WINDOW_HOURS * WINDOW_COUNT + 1) / 24.0
    with np.errstate(all="ignore"):
        samples = _apparent_altitudes(sample_days, lw, phi) - MOON_APPARENT_RADIUS

    rise: Optional[datetime] = None
    set_: Optional[datetime] = None
    h0 = float(samples[0])

    for i in range(1, WINDOW_HOURS * WINDOW_COUNT, WINDOW_HOURS):
        h1 = float(samples[i])
        h2 = float(samples[i + 1])
        roots, x1, x2, ye = _window_roots(h0, h1, h2)

        if roots == 1:
            if h0 < 0:
                rise = hours_later(t, i + x1)
            else:
                set_ = hours_later(t, i + x1)
        elif roots == 2:
            rise = hours_later(t, i + (x2 if ye < 0 else x1))
            set_ = hours_later(t, i + (x1 if ye < 0 else x2))

        if rise is not None and set_ is not None:
            break

        h0 = h2

    crossed = rise is not None or set_ is not None
    if not crossed:
        LOGGER.debug(
            json.dumps(
                {
                    "event": "moon_no_crossing",
                    "date": t.date().isoformat(),
                    "lat": coordinate.latitude,
                    "always_up": h0 > 0,
                }
            )
        )

    return LunarTimes(
        rise=rise,
        set=set_,
        always_up=not crossed and h0 > 0,
        always_down=not crossed and not h0 > 0,
    )
