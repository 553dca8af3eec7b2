from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select

from crewplan.storage.models import TeamBookingModel
from .base import BaseRepository

# id breaks ties between bookings starting on the same day
BOOKING_ORDER = (TeamBookingModel.start_date, TeamBookingModel.id)


class BookingRepository(BaseRepository[TeamBookingModel]):
    """Repository for project-team bookings."""

    updatable_fields = ("team_id", "start_date", "duration", "start_hour", "end_hour", "project_name")

    def create(self, session: Session, booking: TeamBookingModel) -> TeamBookingModel:
        session.add(booking)
        session.flush()
        return booking

    def get(self, session: Session, id: str) -> Optional[TeamBookingModel]:
        return session.get(TeamBookingModel, id)

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[TeamBookingModel]:
        stmt = select(TeamBookingModel).order_by(*BOOKING_ORDER).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def list_all(self, session: Session) -> List[TeamBookingModel]:
        """Every booking, unpaged."""
        return list(session.scalars(select(TeamBookingModel).order_by(*BOOKING_ORDER)).all())

    def list_for_team(self, session: Session, team_id: Optional[str]) -> List[TeamBookingModel]:
        stmt = select(TeamBookingModel)
        if team_id is None:
            stmt = stmt.where(TeamBookingModel.team_id.is_(None))
        else:
            stmt = stmt.where(TeamBookingModel.team_id == team_id)
        return list(session.scalars(stmt.order_by(*BOOKING_ORDER)).all())

    def list_without_team(self, session: Session) -> List[TeamBookingModel]:
        """Bookings that still only carry a legacy free-text team name."""
        stmt = select(TeamBookingModel).where(
            TeamBookingModel.team_id.is_(None),
            TeamBookingModel.legacy_team_name.is_not(None),
        ).order_by(*BOOKING_ORDER)
        return list(session.scalars(stmt).all())
