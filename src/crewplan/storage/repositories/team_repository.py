from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
import logging
import uuid

from crewplan.storage.models import PlacementTeamModel, EmployeeModel, TeamMemberModel
from .base import BaseRepository

logger = logging.getLogger(__name__)


class TeamRepository(BaseRepository[PlacementTeamModel]):
    """Repository for placement teams, employees and team rosters."""

    updatable_fields = ("name", "color", "is_active")

    # --- Teams ---

    def create(self, session: Session, team: PlacementTeamModel) -> PlacementTeamModel:
        session.add(team)
        session.flush()
        return team

    def get(self, session: Session, id: str) -> Optional[PlacementTeamModel]:
        return session.get(PlacementTeamModel, id)

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[PlacementTeamModel]:
        stmt = select(PlacementTeamModel).order_by(PlacementTeamModel.name, PlacementTeamModel.id).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def list_all(self, session: Session) -> List[PlacementTeamModel]:
        """Every team, active or not, unpaged."""
        stmt = select(PlacementTeamModel).order_by(PlacementTeamModel.name, PlacementTeamModel.id)
        return list(session.scalars(stmt).all())

    def list_active(self, session: Session) -> List[PlacementTeamModel]:
        stmt = (
            select(PlacementTeamModel)
            .where(PlacementTeamModel.is_active.is_(True))
            .order_by(PlacementTeamModel.name, PlacementTeamModel.id)
        )
        return list(session.scalars(stmt).all())

    # --- Employees ---

    def create_employee(self, session: Session, employee: EmployeeModel) -> EmployeeModel:
        session.add(employee)
        session.flush()
        return employee

    def get_employee(self, session: Session, id: str) -> Optional[EmployeeModel]:
        return session.get(EmployeeModel, id)

    def list_employees(self, session: Session) -> List[EmployeeModel]:
        stmt = select(EmployeeModel).order_by(EmployeeModel.name, EmployeeModel.id)
        return list(session.scalars(stmt).all())

    # --- Members ---

    def get_member(self, session: Session, team_id: str, employee_id: str) -> Optional[TeamMemberModel]:
        stmt = select(TeamMemberModel).where(
            TeamMemberModel.team_id == team_id,
            TeamMemberModel.employee_id == employee_id,
        )
        return session.scalar(stmt)

    def add_member(self, session: Session, team_id: str, employee_id: str, is_default: bool = False) -> TeamMemberModel:
        existing = self.get_member(session, team_id, employee_id)
        if existing:
            logger.info(f"Employee {employee_id} already in team {team_id}")
            return existing

        member = TeamMemberModel(
            id=str(uuid.uuid4()),
            team_id=team_id,
            employee_id=employee_id,
            is_default=is_default,
        )
        session.add(member)
        session.flush()
        return member

    def remove_member(self, session: Session, team_id: str, employee_id: str) -> bool:
        member = self.get_member(session, team_id, employee_id)
        if not member:
            return False
        session.delete(member)
        session.flush()
        return True

    def list_members(self, session: Session, team_id: str) -> List[TeamMemberModel]:
        stmt = (
            select(TeamMemberModel)
            .where(TeamMemberModel.team_id == team_id)
            .order_by(TeamMemberModel.is_default.desc(), TeamMemberModel.created_at, TeamMemberModel.id)
        )
        return list(session.scalars(stmt).all())

    def list_employee_team_ids(self, session: Session, employee_id: str) -> List[str]:
        stmt = select(TeamMemberModel.team_id).where(TeamMemberModel.employee_id == employee_id)
        return list(session.scalars(stmt).all())
