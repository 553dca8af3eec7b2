from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select

from crewplan.storage.models import HolidayModel
from .base import BaseRepository


class HolidayRepository(BaseRepository[HolidayModel]):
    """Repository for employee and team holidays."""

    updatable_fields = ("start_date", "end_date", "status", "reason")

    def create(self, session: Session, holiday: HolidayModel) -> HolidayModel:
        session.add(holiday)
        session.flush()
        return holiday

    def get(self, session: Session, id: str) -> Optional[HolidayModel]:
        return session.get(HolidayModel, id)

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[HolidayModel]:
        stmt = select(HolidayModel).order_by(HolidayModel.start_date).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def covers(self, session: Session, scope: str, subject_id: str, day: date) -> bool:
        """True if an approved holiday of ``subject_id`` includes ``day``."""
        stmt = select(HolidayModel.id).where(
            HolidayModel.scope == scope,
            HolidayModel.subject_id == subject_id,
            HolidayModel.status == "approved",
            HolidayModel.start_date <= day,
            HolidayModel.end_date >= day,
        ).limit(1)
        return session.scalar(stmt) is not None
