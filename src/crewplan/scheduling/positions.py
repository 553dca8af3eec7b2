"""
Map bookings onto a visible time range.

Given an item with a start date and a duration in days, compute where its bar
starts and how long it is inside the window, clipping at both edges.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from .calendar import Granularity, HOURS_PER_DAY, count_units_between, infer_granularity


@dataclass(frozen=True)
class Position:
    offset: float
    length: float
    visible_units: int
    duration_units: int


def map_to_position(
    item,
    time_range: List[datetime],
    unit_width: float,
    granularity: Optional[Granularity] = None,
) -> Optional[Position]:
    """
    Compute the clipped position of ``item`` inside ``time_range``.

    Args:
        item: Anything with ``start_date`` and ``duration_days`` (a Booking).
        time_range: Points produced by ``date_range``.
        unit_width: Width of one unit (pixels or any other measure).
        granularity: Unit of ``time_range``; inferred from its step when omitted.

    Returns:
        Position, or None if no part of the item falls inside the range.
    """
    if not time_range:
        return None

    granularity = Granularity(granularity) if granularity else infer_granularity(time_range)

    duration_days = max(1, item.duration_days or 1)
    duration_units = duration_days * (HOURS_PER_DAY if granularity is Granularity.HOUR else 1)

    start_index = count_units_between(time_range[0], item.start_date, granularity)
    end_index = start_index + duration_units
    range_length = len(time_range)

    if end_index <= 0 or start_index >= range_length:
        return None

    first_visible = max(0, start_index)
    visible_units = min(end_index, range_length) - first_visible

    return Position(
        offset=first_visible * unit_width,
        length=visible_units * unit_width,
        visible_units=visible_units,
        duration_units=duration_units,
    )
