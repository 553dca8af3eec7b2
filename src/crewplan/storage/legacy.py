"""
Backfill of team ids on bookings that only carry a free-text team name.
"""

from dataclasses import dataclass, field
from typing import Dict, List
import logging

from sqlalchemy.orm import Session

from crewplan.scheduling.team_matching import match_team_by_name

from .repositories import BookingRepository, TeamRepository
from .sql_stores import team_from_model

logger = logging.getLogger(__name__)


@dataclass
class BackfillReport:
    matched: Dict[str, str] = field(default_factory=dict)
    unmatched: List[str] = field(default_factory=list)


def backfill_booking_team_ids(
    session: Session,
    bookings: BookingRepository | None = None,
    teams: TeamRepository | None = None,
) -> BackfillReport:
    """
    Set ``team_id`` on bookings from their ``legacy_team_name``.

    Bookings whose name matches no team (or more than one by colour) are left
    alone and listed in the report for manual review.
    """
    bookings = bookings or BookingRepository()
    teams = teams or TeamRepository()

    known = [team_from_model(t) for t in teams.list_all(session)]
    report = BackfillReport()

    for row in bookings.list_without_team(session):
        team = match_team_by_name(row.legacy_team_name, known)
        if team is None:
            report.unmatched.append(row.id)
            continue
        row.team_id = team.id
        report.matched[row.id] = team.id

    session.flush()
    logger.info(f"Backfilled {len(report.matched)} booking(s); {len(report.unmatched)} left unmatched")
    return report
