from datetime import date
from types import SimpleNamespace

import pytest

from crewplan.scheduling.calendar import Granularity, date_range
from crewplan.scheduling.positions import map_to_position

# 2026-01-05 is a Monday
WINDOW = date_range(date(2026, 1, 5), 10)
UNIT = 30.0


def item(start: date, duration: int):
    return SimpleNamespace(start_date=start, duration_days=duration)


def test_item_inside_range():
    pos = map_to_position(item(date(2026, 1, 7), 3), WINDOW, UNIT)

    assert pos.offset == 2 * UNIT
    assert pos.length == 3 * UNIT
    assert pos.visible_units == 3


def test_item_starting_before_range_is_clipped():
    pos = map_to_position(item(date(2026, 1, 3), 5), WINDOW, UNIT)

    assert pos.offset == 0
    assert pos.length == 3 * UNIT
    assert pos.duration_units == 5


def test_item_running_past_range_end_is_clipped():
    pos = map_to_position(item(date(2026, 1, 12), 10), WINDOW, UNIT)

    assert pos.offset == 7 * UNIT
    assert pos.length == 3 * UNIT


def test_item_spanning_entire_range():
    pos = map_to_position(item(date(2026, 1, 1), 30), WINDOW, UNIT)

    assert pos.offset == 0
    assert pos.length == len(WINDOW) * UNIT


def test_item_after_range_is_invisible():
    assert map_to_position(item(date(2026, 1, 15), 2), WINDOW, UNIT) is None
    assert map_to_position(item(date(2026, 2, 1), 1), WINDOW, UNIT) is None


def test_item_ending_before_range_is_invisible():
    # Jan 1..Jan 4 ends the day before the window opens
    assert map_to_position(item(date(2026, 1, 1), 4), WINDOW, UNIT) is None
    assert map_to_position(item(date(2025, 12, 1), 3), WINDOW, UNIT) is None


def test_item_ending_on_first_day_is_visible():
    pos = map_to_position(item(date(2026, 1, 1), 5), WINDOW, UNIT)

    assert pos.offset == 0
    assert pos.length == UNIT


@pytest.mark.parametrize("duration", [0, -2, None])
def test_non_positive_duration_counts_as_one_day(duration):
    pos = map_to_position(item(date(2026, 1, 6), duration), WINDOW, UNIT)

    assert pos.length == UNIT


def test_hourly_range_converts_duration_to_hours():
    hours = date_range(date(2026, 1, 5), 72, Granularity.HOUR)

    pos = map_to_position(item(date(2026, 1, 6), 1), hours, 2.0)

    assert pos.offset == 24 * 2.0
    assert pos.length == 24 * 2.0
    assert pos.duration_units == 24


def test_hourly_range_clips_multi_day_item():
    hours = date_range(date(2026, 1, 5), 72, Granularity.HOUR)

    pos = map_to_position(item(date(2026, 1, 6), 5), hours, 1.0)

    assert pos.offset == 24
    assert pos.length == 48


def test_empty_range():
    assert map_to_position(item(date(2026, 1, 6), 1), [], UNIT) is None
