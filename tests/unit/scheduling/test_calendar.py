from datetime import date, datetime, timedelta

from crewplan.scheduling.calendar import (
    Granularity,
    count_units_between,
    date_range,
    infer_granularity,
    iter_days,
    offset_to_time_point,
    start_of_week,
    week_range,
)


def test_start_of_week_is_monday():
    # 2026-01-01 is a Thursday
    assert start_of_week(date(2026, 1, 1)) == datetime(2025, 12, 29)
    assert start_of_week(datetime(2025, 12, 29, 15, 30)) == datetime(2025, 12, 29)
    assert start_of_week(date(2026, 1, 4)) == datetime(2025, 12, 29)


def test_start_of_week_custom_first_day():
    # Sunday-based week
    assert start_of_week(date(2026, 1, 1), week_starts_on=6) == datetime(2025, 12, 28)


def test_date_range_days_normalises_to_week_start():
    points = date_range(date(2026, 1, 1), 7)

    assert len(points) == 7
    assert points[0] == datetime(2025, 12, 29)
    assert points[-1] == datetime(2026, 1, 4)
    assert all(b - a == timedelta(days=1) for a, b in zip(points, points[1:]))


def test_date_range_hours():
    points = date_range(date(2026, 1, 1), 48, Granularity.HOUR)

    assert len(points) == 48
    assert points[0] == datetime(2025, 12, 29, 0)
    assert points[25] == datetime(2025, 12, 30, 1)


def test_date_range_non_positive_units_is_empty():
    assert date_range(date(2026, 1, 1), 0) == []
    assert date_range(date(2026, 1, 1), -3, Granularity.HOUR) == []


def test_date_range_is_deterministic():
    assert date_range(date(2026, 3, 11), 14) == date_range(date(2026, 3, 11), 14)


def test_week_range():
    assert len(week_range(date(2026, 1, 1), 2)) == 14
    hours = week_range(date(2026, 1, 1), 1, Granularity.HOUR)
    assert len(hours) == 168
    assert hours[-1] == datetime(2026, 1, 4, 23)


def test_count_units_and_inverse():
    origin = datetime(2025, 12, 29)

    assert count_units_between(origin, date(2026, 1, 2)) == 4
    assert count_units_between(origin, date(2025, 12, 27)) == -2
    assert count_units_between(origin, date(2025, 12, 30), Granularity.HOUR) == 24
    assert offset_to_time_point(origin, 4) == datetime(2026, 1, 2)
    assert offset_to_time_point(origin, 5, Granularity.HOUR) == datetime(2025, 12, 29, 5)


def test_infer_granularity():
    assert infer_granularity(date_range(date(2026, 1, 1), 3)) is Granularity.DAY
    assert infer_granularity(date_range(date(2026, 1, 1), 3, Granularity.HOUR)) is Granularity.HOUR
    assert infer_granularity([datetime(2026, 1, 1)]) is Granularity.DAY


def test_iter_days_inclusive():
    days = list(iter_days(date(2026, 1, 30), 3))
    assert days == [date(2026, 1, 30), date(2026, 1, 31), date(2026, 2, 1)]
