"""
Overlap Detector

Finds team bookings whose date ranges intersect. A team cannot work two
projects on the same day, so ranges are closed on both ends: a booking that
ends on the day another one starts is a conflict.

Usage:
    detector = OverlapDetector(stores)

    # Conflicts for one team
    conflicting = await detector.detect("team_blue")

    # Conflicts for every team
    by_team = await detector.detect_all()

The pairwise scan is O(n^2) per team; a team carries tens of bookings.
"""

from collections import OrderedDict
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Tuple

from crewplan.platform.config import settings

from .base import SchedulerBase
from .models import Booking, OverlapCandidate


def ranges_overlap(start1, end1, start2, end2) -> bool:
    """Closed-interval intersection test."""
    return start1 <= end2 and start2 <= end1


def find_overlapping_pairs(bookings: Iterable[Booking]) -> List[Tuple[Booking, Booking]]:
    """Every pair of same-team bookings whose day ranges intersect."""
    items = [b for b in bookings if not b.is_unassigned]
    pairs = []
    for i, first in enumerate(items):
        for second in items[i + 1:]:
            if first.team_id != second.team_id or first.id == second.id:
                continue
            if ranges_overlap(first.start_date, first.end_date, second.start_date, second.end_date):
                pairs.append((first, second))
    return pairs


def detect_overlaps(team_id: str, bookings: Iterable[Booking]) -> List[Booking]:
    """
    Bookings of ``team_id`` that intersect at least one other booking of the team.

    Args:
        team_id: Team to check
        bookings: Bookings of any team; other teams are ignored

    Returns:
        Conflicting bookings in first-seen order, one entry per booking id
    """
    if team_id == settings.UNASSIGNED_TEAM_ID:
        return []

    team_bookings = [b for b in bookings if b.team_id == team_id]
    conflicting: "OrderedDict[str, Booking]" = OrderedDict()
    flagged = set()
    for first, second in find_overlapping_pairs(team_bookings):
        flagged.add(first.id)
        flagged.add(second.id)

    for booking in team_bookings:
        if booking.id in flagged and booking.id not in conflicting:
            conflicting[booking.id] = booking
    return list(conflicting.values())


def _at_hour(day: date, hour: int) -> datetime:
    return datetime.combine(day, time(hour=hour))


def find_candidate_overlaps(
    candidates: Iterable[OverlapCandidate],
) -> List[Tuple[OverlapCandidate, OverlapCandidate]]:
    """Hour-resolution overlap check between edited candidates of the same team."""
    items = list(candidates)
    pairs = []
    for i, first in enumerate(items):
        for second in items[i + 1:]:
            if first.team_id != second.team_id:
                continue
            if ranges_overlap(
                _at_hour(first.start_date, first.start_hour),
                _at_hour(first.end_date, first.end_hour),
                _at_hour(second.start_date, second.start_hour),
                _at_hour(second.end_date, second.end_hour),
            ):
                pairs.append((first, second))
    return pairs


class OverlapDetector(SchedulerBase):
    """
    Detects overlapping bookings per team.

    Always re-reads the booking store; nothing is cached between calls.
    """

    async def run(self) -> Dict[str, List[Booking]]:
        return await self.detect_all()

    async def detect(self, team_id: str) -> List[Booking]:
        """Conflicting bookings for one team."""
        bookings = await self.stores.bookings.list_bookings(team_id)
        conflicting = detect_overlaps(team_id, bookings)
        if conflicting:
            self.logger.info(
                "overlaps.detected",
                team_id=team_id,
                bookings=[b.id for b in conflicting],
            )
        return conflicting

    async def detect_all(self) -> Dict[str, List[Booking]]:
        """Conflicting bookings for every team that has any."""
        bookings = await self.stores.bookings.list_bookings()

        team_ids: List[str] = []
        for booking in bookings:
            if booking.team_id not in team_ids and not booking.is_unassigned:
                team_ids.append(booking.team_id)

        result: Dict[str, List[Booking]] = {}
        for team_id in team_ids:
            conflicting = detect_overlaps(team_id, bookings)
            if conflicting:
                result[team_id] = conflicting

        self.logger.info(
            "overlaps.detection_complete",
            teams_checked=len(team_ids),
            teams_with_overlaps=len(result),
        )
        return result
