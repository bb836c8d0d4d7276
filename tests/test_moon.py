from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import numpy as np
import pytest
from pydantic import ValidationError

from sunmoon import lunar, solar
from sunmoon.lunar import MOON_APPARENT_RADIUS, _window_roots
from sunmoon.models import GeoCoordinate, LunarTimes


def test_moon_position(london: GeoCoordinate):
    position = lunar.position(datetime(2024, 6, 21, 20, 0, tzinfo=UTC), london)
    assert -90 <= position.altitude_degrees <= 90
    assert 0 <= position.azimuth_degrees < 360
    assert 356_000 <= position.distance <= 407_000
    assert -3.15 <= position.parallactic_angle <= 3.15


def test_moon_position_is_idempotent(london: GeoCoordinate):
    moment = datetime(2024, 2, 9, 22, 59, 1, tzinfo=UTC)
    assert lunar.position(moment, london) == lunar.position(moment, london)


def test_illumination_ranges():
    moment = datetime(2024, 1, 1, tzinfo=UTC)
    for _ in range(120):
        result = lunar.illumination(moment)
        assert 0.0 <= result.fraction <= 1.0
        assert 0.0 <= result.phase < 1.0
        moment += timedelta(hours=13, minutes=7)


def test_full_moon():
    # Full moon 2024-06-22 01:08 UTC.
    result = lunar.illumination(datetime(2024, 6, 22, 1, 8, tzinfo=UTC))
    assert result.fraction > 0.98
    assert result.phase == pytest.approx(0.5, abs=0.03)
    assert result.phase_name == "Full Moon"


def test_new_moon():
    # New moon 2024-06-06 12:38 UTC.
    result = lunar.illumination(datetime(2024, 6, 6, 12, 38, tzinfo=UTC))
    assert result.fraction < 0.02
    assert result.phase_name == "New Moon"


def test_first_quarter_is_waxing():
    # First quarter 2024-06-14 05:18 UTC.
    result = lunar.illumination(datetime(2024, 6, 14, 5, 18, tzinfo=UTC))
    assert result.fraction == pytest.approx(0.5, abs=0.05)
    assert result.phase == pytest.approx(0.25, abs=0.03)
    assert result.phase_name == "First Quarter"


def test_last_quarter_is_waning():
    # Last quarter 2024-06-28 21:53 UTC.
    result = lunar.illumination(datetime(2024, 6, 28, 21, 53, tzinfo=UTC))
    assert result.phase == pytest.approx(0.75, abs=0.03)
    assert result.phase_name == "Last Quarter"


def test_single_root_window():
    roots, x1, _, _ = _window_roots(-1.0, 0.5, 1.0)
    assert roots == 1
    assert x1 == pytest.approx(1 - 2**0.5)


def test_double_root_window_dips_below_horizon():
    roots, x1, x2, ye = _window_roots(1.0, -1.0, 1.0)
    assert roots == 2
    assert ye < 0
    assert x1 == pytest.approx(-(0.5**0.5))
    assert x2 == pytest.approx(0.5**0.5)


def test_flat_window_has_no_roots():
    assert _window_roots(-1.0, 0.0, 1.0)[0] == 0
    assert _window_roots(0.2, 0.3, 0.5)[0] == 0


def _scanned_crossings(day: date, coordinate: GeoCoordinate):
    """Minute-resolution horizon crossings as ``(instant, rising)`` pairs."""

    start = datetime(day.year, day.month, day.day, tzinfo=UTC)
    crossings = []
    previous = lunar.position(start, coordinate).altitude - MOON_APPARENT_RADIUS
    for minute in range(1, 24 * 60 + 1):
        moment = start + timedelta(minutes=minute)
        current = lunar.position(moment, coordinate).altitude - MOON_APPARENT_RADIUS
        if (previous < 0) != (current < 0):
            crossings.append((moment, current >= 0))
        previous = current
    return crossings


def test_rise_and_set_at_horizon(london: GeoCoordinate):
    day = date(2024, 6, 21)
    result = lunar.times(day, london)
    assert result.rise is not None and result.set is not None
    start = datetime(2024, 6, 21, tzinfo=UTC)
    for event in (result.rise, result.set):
        assert start <= event <= start + timedelta(days=1)
        altitude = lunar.position(event, london).altitude
        assert altitude == pytest.approx(MOON_APPARENT_RADIUS, abs=0.005)

    # The low full moon of June 2024 set before dawn and rose soon after sunset.
    sun = solar.times(day, london)
    assert result.set < sun.sunrise
    assert abs(result.rise - sun.sunset) <= timedelta(minutes=90)


@pytest.mark.parametrize(
    "day", [date(2024, 6, 21), date(2024, 3, 10), date(2024, 9, 15), date(2025, 1, 3)]
)
def test_rise_ascends_and_set_descends(london: GeoCoordinate, day: date):
    result = lunar.times(day, london)
    step = timedelta(minutes=5)
    if result.rise is not None:
        before = lunar.position(result.rise - step, london).altitude
        after = lunar.position(result.rise + step, london).altitude
        assert before < after
    if result.set is not None:
        before = lunar.position(result.set - step, london).altitude
        after = lunar.position(result.set + step, london).altitude
        assert before > after


@pytest.mark.parametrize("day", [date(2024, 6, 21), date(2024, 3, 10), date(2024, 9, 15)])
def test_times_match_minute_scan(london: GeoCoordinate, day: date):
    result = lunar.times(day, london)
    crossings = _scanned_crossings(day, london)
    for event, rising in ((result.rise, True), (result.set, False)):
        if event is None:
            continue
        candidates = [moment for moment, up in crossings if up is rising]
        assert candidates
        assert min(abs(moment - event) for moment in candidates) <= timedelta(minutes=5)


def _quadratic_altitudes(sign: float):
    # Altitude curve symmetric about 05:00 with horizon crossings at 04:30 and 05:30.
    def fake(d, lw, phi):
        hours = np.arange(len(d), dtype=float)
        return MOON_APPARENT_RADIUS + sign * ((hours - 5.0) ** 2 - 0.25)

    return fake


def test_brief_dip_in_one_window_sets_then_rises(
    london: GeoCoordinate, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setattr(lunar, "_apparent_altitudes", _quadratic_altitudes(1.0))
    result = lunar.times(date(2024, 6, 21), london)
    assert result.set == datetime(2024, 6, 21, 4, 30, tzinfo=UTC)
    assert result.rise == datetime(2024, 6, 21, 5, 30, tzinfo=UTC)
    assert not result.always_up and not result.always_down


def test_brief_peak_in_one_window_rises_then_sets(
    london: GeoCoordinate, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setattr(lunar, "_apparent_altitudes", _quadratic_altitudes(-1.0))
    result = lunar.times(date(2024, 6, 21), london)
    assert result.rise == datetime(2024, 6, 21, 4, 30, tzinfo=UTC)
    assert result.set == datetime(2024, 6, 21, 5, 30, tzinfo=UTC)


def test_times_accepts_datetime(london: GeoCoordinate):
    by_date = lunar.times(date(2024, 3, 10), london)
    by_datetime = lunar.times(datetime(2024, 3, 10, 18, 45, tzinfo=UTC), london)
    assert by_date == by_datetime


@pytest.mark.parametrize("latitude", [-85.0, -60.0, 0.0, 51.5, 70.0, 85.0])
def test_times_flags_are_exclusive(latitude: float):
    coordinate = GeoCoordinate(latitude=latitude, longitude=10.0)
    for offset in range(0, 30):
        result = lunar.times(date(2025, 1, 1) + timedelta(days=offset), coordinate)
        crossed = result.rise is not None or result.set is not None
        assert not (result.always_up and result.always_down)
        if crossed:
            assert not result.always_up and not result.always_down
        else:
            assert result.always_up or result.always_down


def test_high_latitude_has_always_up_and_down_days():
    coordinate = GeoCoordinate(latitude=85.0, longitude=0.0)
    days = [
        lunar.times(date(2025, 1, 1) + timedelta(days=offset), coordinate)
        for offset in range(30)
    ]
    assert any(day.always_up for day in days)
    assert any(day.always_down for day in days)


def test_lunar_times_rejects_contradictions():
    with pytest.raises(ValidationError):
        LunarTimes(always_up=True, always_down=True)
    with pytest.raises(ValidationError):
        LunarTimes(rise=datetime(2024, 1, 1, tzinfo=UTC), always_up=True)
    with pytest.raises(ValidationError):
        LunarTimes()
