from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
import uuid

from crewplan.storage.models import DailyTeamAssignmentModel
from .base import BaseRepository


class DailyAssignmentRepository(BaseRepository[DailyTeamAssignmentModel]):
    """Repository for per-day team assignments, keyed on (employee, team, date)."""

    updatable_fields = ("is_available", "notes")

    def create(self, session: Session, assignment: DailyTeamAssignmentModel) -> DailyTeamAssignmentModel:
        session.add(assignment)
        session.flush()
        return assignment

    def get(self, session: Session, id: str) -> Optional[DailyTeamAssignmentModel]:
        return session.get(DailyTeamAssignmentModel, id)

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[DailyTeamAssignmentModel]:
        stmt = select(DailyTeamAssignmentModel).order_by(DailyTeamAssignmentModel.date).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def get_by_key(self, session: Session, employee_id: str, team_id: str, day: date) -> Optional[DailyTeamAssignmentModel]:
        stmt = select(DailyTeamAssignmentModel).where(
            DailyTeamAssignmentModel.employee_id == employee_id,
            DailyTeamAssignmentModel.team_id == team_id,
            DailyTeamAssignmentModel.date == day,
        )
        return session.scalar(stmt)

    def upsert(
        self,
        session: Session,
        employee_id: str,
        team_id: str,
        day: date,
        is_available: bool = True,
        notes: Optional[str] = None,
    ) -> DailyTeamAssignmentModel:
        """Update the row for the key in place, or insert it."""
        existing = self.get_by_key(session, employee_id, team_id, day)
        if existing:
            existing.is_available = is_available
            existing.notes = notes
            session.flush()
            return existing

        return self.create(session, DailyTeamAssignmentModel(
            id=str(uuid.uuid4()),
            employee_id=employee_id,
            team_id=team_id,
            date=day,
            is_available=is_available,
            notes=notes,
        ))

    def delete_by_key(self, session: Session, employee_id: str, team_id: str, day: date) -> bool:
        existing = self.get_by_key(session, employee_id, team_id, day)
        if not existing:
            return False
        session.delete(existing)
        session.flush()
        return True

    def list_in_range(
        self,
        session: Session,
        start_date: date,
        end_date: date,
        team_id: Optional[str] = None,
    ) -> List[DailyTeamAssignmentModel]:
        stmt = select(DailyTeamAssignmentModel).where(
            DailyTeamAssignmentModel.date >= start_date,
            DailyTeamAssignmentModel.date <= end_date,
        )
        if team_id:
            stmt = stmt.where(DailyTeamAssignmentModel.team_id == team_id)
        stmt = stmt.order_by(
            DailyTeamAssignmentModel.date,
            DailyTeamAssignmentModel.team_id,
            DailyTeamAssignmentModel.employee_id,
        )
        return list(session.scalars(stmt).all())
