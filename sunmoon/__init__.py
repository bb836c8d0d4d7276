"""Solar and lunar position and event-time engine."""

from . import almanac, lunar, solar, timebasis
from .models import (
    DayAlmanac,
    DaylightPeriod,
    DaylightPeriodResult,
    GeoCoordinate,
    HorizontalPosition,
    LunarIllumination,
    LunarPosition,
    LunarTimes,
    MoonSnapshot,
    SolarTimes,
)
from .solar import SOLAR_ANGLES

__all__ = [
    "almanac",
    "lunar",
    "solar",
    "timebasis",
    "SOLAR_ANGLES",
    "DayAlmanac",
    "DaylightPeriod",
    "DaylightPeriodResult",
    "GeoCoordinate",
    "HorizontalPosition",
    "LunarIllumination",
    "LunarPosition",
    "LunarTimes",
    "MoonSnapshot",
    "SolarTimes",
]
