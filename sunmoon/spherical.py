"""Spherical astronomy primitives shared by the solar and lunar ephemerides.

All functions accept scalars or :mod:`numpy` arrays. Callers evaluate them
under :func:`numpy.errstate` so that out-of-domain arguments become NaN
instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np

__all__ = [
    "RAD",
    "OBLIQUITY",
    "ArrayLike",
    "EquatorialCoords",
    "right_ascension",
    "declination",
    "azimuth",
    "altitude",
    "sidereal_time",
    "solar_mean_anomaly",
    "ecliptic_longitude",
    "sun_coords",
]

RAD = math.pi / 180.0
OBLIQUITY = RAD * 23.4397  # Mean obliquity of the ecliptic, no precession.
PERIHELION = RAD * 102.9372  # Longitude of Earth's perihelion.


ArrayLike = Union[float, np.ndarray]


@dataclass(frozen=True)
class EquatorialCoords:
    """Right ascension and declination in radians, plus distance in km when known."""

    ra: float
    dec: float
    dist: float = math.nan


def right_ascension(l: ArrayLike, b: ArrayLike) -> ArrayLike:
    return np.arctan2(
        np.sin(l) * math.cos(OBLIQUITY) - np.tan(b) * math.sin(OBLIQUITY), np.cos(l)
    )


def declination(l: ArrayLike, b: ArrayLike) -> ArrayLike:
    return np.arcsin(
        np.sin(b) * math.cos(OBLIQUITY) + np.cos(b) * math.sin(OBLIQUITY) * np.sin(l)
    )


def azimuth(H: ArrayLike, phi: ArrayLike, dec: ArrayLike) -> ArrayLike:
    """Azimuth measured from south, positive westward."""

    return np.arctan2(np.sin(H), np.cos(H) * np.sin(phi) - np.tan(dec) * np.cos(phi))


def altitude(H: ArrayLike, phi: ArrayLike, dec: ArrayLike) -> ArrayLike:
    return np.arcsin(
        np.sin(phi) * np.sin(dec) + np.cos(phi) * np.cos(dec) * np.cos(H)
    )


def sidereal_time(d: ArrayLike, lw: float) -> ArrayLike:
    return RAD * (280.16 + 360.9856235 * d) - lw


def solar_mean_anomaly(d: ArrayLike) -> ArrayLike:
    return RAD * (357.5291 + 0.98560028 * d)


def ecliptic_longitude(M: ArrayLike) -> ArrayLike:
    # Equation of center.
    C = RAD * (1.9148 * np.sin(M) + 0.02 * np.sin(2 * M) + 0.0003 * np.sin(3 * M))
    return M + C + PERIHELION + math.pi


def sun_coords(d: float) -> EquatorialCoords:
    """Equatorial coordinates of the sun *d* days after J2000.0."""

    M = solar_mean_anomaly(d)
    L = ecliptic_longitude(M)
    return EquatorialCoords(
        ra=float(right_ascension(L, 0.0)),
        dec=float(declination(L, 0.0)),
    )
