from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from conftest import APP_TZ, FakeClock, local
from hr_workflow.core.enums import ShiftPosition
from hr_workflow.core.exceptions import ValidationError
from hr_workflow.time_engine import TimeEngine


@pytest.fixture
def engine():
    return TimeEngine(APP_TZ, clock=FakeClock(local(2025, 12, 15, 10, 30)))


@pytest.mark.parametrize("shift_hour", [0, 7, 9, 18, 23])
def test_tolerance_boundary_is_exactly_sixty_seconds(engine, shift_hour):
    assert engine.compare_to_shift_boundary(local(2025, 12, 15, shift_hour, 0, 0), shift_hour, 1) == ShiftPosition.WITHIN_TOLERANCE
    assert engine.compare_to_shift_boundary(local(2025, 12, 15, shift_hour, 0, 59), shift_hour, 1) == ShiftPosition.WITHIN_TOLERANCE
    assert engine.compare_to_shift_boundary(local(2025, 12, 15, shift_hour, 1, 0), shift_hour, 1) == ShiftPosition.AFTER


def test_one_second_before_boundary_is_before(engine):
    assert engine.compare_to_shift_boundary(local(2025, 12, 15, 8, 59, 59), 9, 1) == ShiftPosition.BEFORE


def test_wider_tolerance_window(engine):
    assert engine.compare_to_shift_boundary(local(2025, 12, 15, 9, 4, 59), 9, 5) == ShiftPosition.WITHIN_TOLERANCE
    assert engine.compare_to_shift_boundary(local(2025, 12, 15, 9, 5, 0), 9, 5) == ShiftPosition.AFTER


def test_local_calendar_date_crosses_utc_midnight(engine):
    # 17:30 UTC on the 14th is already 00:30 on the 15th in Jakarta.
    instant = datetime(2025, 12, 14, 17, 30, tzinfo=timezone.utc)
    assert engine.local_calendar_date(instant) == date(2025, 12, 15)
    assert engine.local_minutes_since_midnight(instant) == 30


def test_naive_datetimes_are_read_as_utc(engine):
    naive = datetime(2025, 12, 15, 2, 0)
    assert engine.to_local(naive).hour == 9
    assert engine.compare_to_shift_boundary(naive, 9) == ShiftPosition.WITHIN_TOLERANCE


def test_decision_ignores_host_timezone(monkeypatch):
    import time

    if not hasattr(time, "tzset"):
        pytest.skip("tzset not available")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    try:
        engine = TimeEngine(APP_TZ)
        assert engine.compare_to_shift_boundary(local(2025, 12, 15, 9, 1, 5), 9) == ShiftPosition.AFTER
        assert engine.local_calendar_date(local(2025, 12, 15, 23, 59)) == date(2025, 12, 15)
    finally:
        monkeypatch.undo()
        time.tzset()


def test_today_and_current_year_use_the_injected_clock():
    clock = FakeClock(datetime(2025, 12, 31, 17, 30, tzinfo=timezone.utc))
    engine = TimeEngine(APP_TZ, clock=clock)
    assert engine.today() == date(2026, 1, 1)
    assert engine.current_year() == 2026
    assert engine.current_year(datetime(2025, 6, 1, tzinfo=timezone.utc)) == 2025


def test_local_instant_and_day_range(engine):
    assert engine.local_instant(date(2025, 12, 15), 19) == datetime(2025, 12, 15, 12, 0, tzinfo=timezone.utc)

    start, end = engine.local_day_range_utc(date(2025, 12, 15))
    assert start == datetime(2025, 12, 14, 17, 0, tzinfo=timezone.utc)
    assert end == datetime(2025, 12, 15, 16, 59, 59, tzinfo=timezone.utc)


def test_parse_local_date_keeps_the_calendar_day():
    assert TimeEngine.parse_local_date("2025-12-15") == date(2025, 12, 15)
    assert TimeEngine.parse_local_date(date(2025, 1, 1)) == date(2025, 1, 1)


@pytest.mark.parametrize("value", ["15/12/2025", "2025-13-01", "", datetime(2025, 12, 15, 9, 0)])
def test_parse_local_date_rejects_bad_input(value):
    with pytest.raises(ValidationError):
        TimeEngine.parse_local_date(value)


def test_unknown_timezone_fails_fast():
    with pytest.raises(ValidationError):
        TimeEngine("Mars/Olympus_Mons")
