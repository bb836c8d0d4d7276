from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from sunmoon.models import GeoCoordinate


@pytest.fixture
def london() -> GeoCoordinate:
    return GeoCoordinate(latitude=51.5074, longitude=-0.1278)


@pytest.fixture
def svalbard() -> GeoCoordinate:
    return GeoCoordinate(latitude=78.2232, longitude=15.6469)


@pytest.fixture
def beijing() -> GeoCoordinate:
    return GeoCoordinate(latitude=39.9042, longitude=116.4074, height_m=43.5)
