"""
Calendar/range helpers.

Produces the addressable time points (days or hours) of a visible window and
converts between points and offsets. Everything here is pure.
"""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterator, List, Union

from crewplan.platform.config import settings

DateLike = Union[date, datetime]

HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7


class Granularity(str, Enum):
    """Size of one addressable unit."""
    DAY = "day"
    HOUR = "hour"

    @property
    def step(self) -> timedelta:
        return timedelta(days=1) if self is Granularity.DAY else timedelta(hours=1)


def as_datetime(value: DateLike) -> datetime:
    """Promote a ``date`` to midnight; leave datetimes untouched."""
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def start_of_week(value: DateLike, week_starts_on: int | None = None) -> datetime:
    """Midnight of the first day of the week containing ``value``."""
    if week_starts_on is None:
        week_starts_on = settings.WEEK_STARTS_ON
    day = as_datetime(value).date()
    back = (day.weekday() - week_starts_on) % DAYS_PER_WEEK
    return datetime.combine(day - timedelta(days=back), time.min)


def date_range(
    week_start: DateLike,
    number_of_units: int,
    granularity: Granularity = Granularity.DAY,
) -> List[datetime]:
    """
    Time points of a window starting at the week containing ``week_start``.

    Args:
        week_start: Any moment inside the first week; normalised to the
            week start before generating.
        number_of_units: How many points to produce, in ``granularity``
            units. Zero or negative yields an empty list.
        granularity: Days or hours.

    Returns:
        Ordered list of datetimes, one per unit.
    """
    if number_of_units <= 0:
        return []
    origin = start_of_week(week_start)
    step = Granularity(granularity).step
    return [origin + step * i for i in range(number_of_units)]


def week_range(
    anchor: DateLike,
    weeks: int,
    granularity: Granularity = Granularity.DAY,
) -> List[datetime]:
    """Whole weeks starting at the week containing ``anchor``."""
    per_week = DAYS_PER_WEEK if Granularity(granularity) is Granularity.DAY else DAYS_PER_WEEK * HOURS_PER_DAY
    return date_range(anchor, weeks * per_week, granularity)


def count_units_between(
    origin: DateLike,
    value: DateLike,
    granularity: Granularity = Granularity.DAY,
) -> int:
    """Signed number of units from ``origin`` to ``value``."""
    if Granularity(granularity) is Granularity.DAY:
        return (as_datetime(value).date() - as_datetime(origin).date()).days
    delta = as_datetime(value) - as_datetime(origin)
    return int(delta.total_seconds() // 3600)


def offset_to_time_point(
    origin: DateLike,
    offset: int,
    granularity: Granularity = Granularity.DAY,
) -> datetime:
    """Inverse of :func:`count_units_between`."""
    return as_datetime(origin) + Granularity(granularity).step * offset


def infer_granularity(time_range: List[datetime]) -> Granularity:
    """Granularity of a range produced by :func:`date_range`."""
    if len(time_range) >= 2 and time_range[1] - time_range[0] == timedelta(hours=1):
        return Granularity.HOUR
    return Granularity.DAY


def iter_days(start_date: date, duration_days: int) -> Iterator[date]:
    """Every calendar day of ``[start_date, start_date + duration_days - 1]``."""
    for i in range(max(0, duration_days)):
        yield start_date + timedelta(days=i)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5
