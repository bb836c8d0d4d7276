"""Pydantic models for engine inputs and results."""

from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "GeoCoordinate",
    "HorizontalPosition",
    "SolarTimes",
    "LunarPosition",
    "LunarIllumination",
    "LunarTimes",
    "MoonSnapshot",
    "DaylightPeriod",
    "DaylightPeriodResult",
    "DayAlmanac",
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


def _north_based_degrees(azimuth_rad: float) -> float:
    return (math.degrees(azimuth_rad) + 180.0) % 360.0


class GeoCoordinate(_Frozen):
    """Observer location on the WGS84 surface."""

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    longitude: float = Field(
        ..., ge=-180.0, le=180.0, description="Longitude in degrees (east-positive)"
    )
    height_m: float = Field(
        0.0, ge=0.0, description="Observer height above the horizon plane in meters"
    )


class HorizontalPosition(_Frozen):
    """Topocentric position of the sun."""

    azimuth: float = Field(
        ..., description="Azimuth in radians, measured from south, positive westward"
    )
    altitude: float = Field(..., description="Altitude above the horizon in radians")

    @property
    def azimuth_degrees(self) -> float:
        """Azimuth in degrees from north, clockwise, in ``[0, 360)``."""
        return _north_based_degrees(self.azimuth)

    @property
    def altitude_degrees(self) -> float:
        return math.degrees(self.altitude)


class SolarTimes(_Frozen):
    """Solar events for one solar day. Absent crossings are ``None``."""

    solar_noon: Optional[datetime] = None
    nadir: Optional[datetime] = None
    sunrise: Optional[datetime] = Field(None, description="Sun at -0.833 deg, rising")
    sunset: Optional[datetime] = Field(None, description="Sun at -0.833 deg, setting")
    sunrise_end: Optional[datetime] = Field(None, description="Sun at -0.3 deg, rising")
    sunset_start: Optional[datetime] = Field(None, description="Sun at -0.3 deg, setting")
    dawn: Optional[datetime] = Field(None, description="Civil dawn, sun at -6 deg")
    dusk: Optional[datetime] = Field(None, description="Civil dusk, sun at -6 deg")
    nautical_dawn: Optional[datetime] = Field(None, description="Sun at -12 deg, rising")
    nautical_dusk: Optional[datetime] = Field(None, description="Sun at -12 deg, setting")
    night_end: Optional[datetime] = Field(
        None, description="Astronomical dawn, sun at -18 deg"
    )
    night: Optional[datetime] = Field(None, description="Astronomical dusk, sun at -18 deg")
    golden_hour_end: Optional[datetime] = Field(
        None, description="Morning golden hour ends, sun at +6 deg"
    )
    golden_hour: Optional[datetime] = Field(
        None, description="Evening golden hour starts, sun at +6 deg"
    )


class LunarPosition(_Frozen):
    """Topocentric position of the moon."""

    azimuth: float = Field(..., description="Azimuth in radians, measured from south")
    altitude: float = Field(
        ..., description="Refraction-corrected altitude in radians"
    )
    distance: float = Field(..., description="Geocentric distance in kilometers")
    parallactic_angle: float = Field(..., description="Parallactic angle in radians")

    @property
    def azimuth_degrees(self) -> float:
        return _north_based_degrees(self.azimuth)

    @property
    def altitude_degrees(self) -> float:
        return math.degrees(self.altitude)


_PHASE_NAMES = (
    (0.0625, "New Moon"),
    (0.1875, "Waxing Crescent"),
    (0.3125, "First Quarter"),
    (0.4375, "Waxing Gibbous"),
    (0.5625, "Full Moon"),
    (0.6875, "Waning Gibbous"),
    (0.8125, "Last Quarter"),
    (0.9375, "Waning Crescent"),
)


class LunarIllumination(_Frozen):
    fraction: float = Field(..., ge=0.0, le=1.0, description="Illuminated fraction")
    phase: float = Field(
        ..., ge=0.0, lt=1.0, description="Phase: 0 new, 0.25 first quarter, 0.5 full"
    )
    angle: float = Field(
        ..., description="Midpoint angle of the illuminated limb in radians"
    )

    @property
    def phase_name(self) -> str:
        for upper, name in _PHASE_NAMES:
            if self.phase < upper:
                return name
        return "New Moon"


class LunarTimes(_Frozen):
    """Moonrise and moonset for one UTC day."""

    rise: Optional[datetime] = None
    set: Optional[datetime] = None
    always_up: bool = False
    always_down: bool = False

    @model_validator(mode="after")
    def _check_exclusive(self) -> "LunarTimes":
        crossed = self.rise is not None or self.set is not None
        if sum((crossed, self.always_up, self.always_down)) != 1:
            raise ValueError(
                "exactly one of rise/set, always_up or always_down must hold"
            )
        return self


class MoonSnapshot(_Frozen):
    """Moon phase and sky position at one instant."""

    illumination: LunarIllumination
    position: LunarPosition
    visible: bool


class DaylightPeriod(str, Enum):
    """Time-of-day bands delimited by the solar altitude thresholds."""

    night = "night"
    nautical_twilight = "nautical_twilight"
    civil_twilight = "civil_twilight"
    golden_hour = "golden_hour"
    daylight = "daylight"


class DaylightPeriodResult(_Frozen):
    period: DaylightPeriod
    is_morning: bool = Field(..., description="True before the day's solar noon")


class DayAlmanac(_Frozen):
    """Sun and moon events for a single UTC date."""

    day: date
    sun: SolarTimes
    moon: LunarTimes
