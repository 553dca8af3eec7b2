"""
SQL-backed implementations of the scheduling store contracts.

Each call opens its own transactional session through the adapter, so reads
always see the current database state and every write commits on return.
"""

from datetime import date
from typing import List, Optional
import logging

from crewplan.platform.config import settings
from crewplan.scheduling.models import (
    Booking,
    DailyAssignment,
    Employee,
    HolidayScope,
    Team,
    TeamMembership,
)
from crewplan.scheduling.errors import ValidationError
from crewplan.scheduling.stores import (
    BookingStore,
    DailyAssignmentStore,
    HolidayRegistry,
    SchedulingStores,
    TeamDirectory,
    TeamMembershipStore,
)

from .base import StorageAdapter
from .models import (
    DailyTeamAssignmentModel,
    EmployeeModel,
    PlacementTeamModel,
    TeamBookingModel,
    TeamMemberModel,
)
from .repositories import (
    BookingRepository,
    DailyAssignmentRepository,
    HolidayRepository,
    TeamRepository,
)

logger = logging.getLogger(__name__)


def team_from_model(row: PlacementTeamModel) -> Team:
    return Team(id=row.id, name=row.name, color=row.color, is_active=row.is_active)


def employee_from_model(row: EmployeeModel) -> Employee:
    return Employee(id=row.id, name=row.name, role=row.role or "", email=row.email)


def membership_from_model(row: TeamMemberModel) -> TeamMembership:
    return TeamMembership(team_id=row.team_id, employee_id=row.employee_id, is_default=row.is_default, id=row.id)


def assignment_from_model(row: DailyTeamAssignmentModel) -> DailyAssignment:
    return DailyAssignment(
        employee_id=row.employee_id,
        team_id=row.team_id,
        date=row.date,
        is_available=row.is_available,
        notes=row.notes,
        id=row.id,
    )


def booking_from_model(row: TeamBookingModel) -> Booking:
    return Booking(
        id=row.id,
        project_id=row.project_id,
        team_id=row.team_id,
        start_date=row.start_date,
        duration_days=row.duration,
        project_name=row.project_name,
        start_hour=row.start_hour,
        end_hour=row.end_hour,
    )


class SqlTeamDirectory(TeamDirectory):

    def __init__(self, adapter: StorageAdapter, teams: Optional[TeamRepository] = None):
        self.adapter = adapter
        self.teams = teams or TeamRepository()

    async def get_team(self, team_id: str) -> Optional[Team]:
        with self.adapter.get_session() as session:
            row = self.teams.get(session, team_id)
            return team_from_model(row) if row else None

    async def list_teams(self, active_only: bool = True) -> List[Team]:
        with self.adapter.get_session() as session:
            rows = self.teams.list_active(session) if active_only else self.teams.list_all(session)
            return [team_from_model(r) for r in rows]

    async def get_employee(self, employee_id: str) -> Optional[Employee]:
        with self.adapter.get_session() as session:
            row = self.teams.get_employee(session, employee_id)
            return employee_from_model(row) if row else None

    async def list_employees(self) -> List[Employee]:
        with self.adapter.get_session() as session:
            return [employee_from_model(r) for r in self.teams.list_employees(session)]


class SqlTeamMembershipStore(TeamMembershipStore):

    def __init__(self, adapter: StorageAdapter, teams: Optional[TeamRepository] = None):
        self.adapter = adapter
        self.teams = teams or TeamRepository()

    async def add_member(self, team_id: str, employee_id: str, is_default: bool = False) -> TeamMembership:
        if not team_id or not employee_id:
            raise ValidationError("team_id and employee_id are required")
        with self.adapter.get_session() as session:
            return membership_from_model(self.teams.add_member(session, team_id, employee_id, is_default))

    async def remove_member(self, team_id: str, employee_id: str) -> bool:
        with self.adapter.get_session() as session:
            return self.teams.remove_member(session, team_id, employee_id)

    async def list_members(self, team_id: str) -> List[Employee]:
        with self.adapter.get_session() as session:
            return [employee_from_model(m.employee) for m in self.teams.list_members(session, team_id)]

    async def list_memberships(self, team_id: str) -> List[TeamMembership]:
        with self.adapter.get_session() as session:
            return [membership_from_model(m) for m in self.teams.list_members(session, team_id)]

    async def list_employee_teams(self, employee_id: str) -> List[str]:
        with self.adapter.get_session() as session:
            return self.teams.list_employee_team_ids(session, employee_id)


class SqlDailyAssignmentStore(DailyAssignmentStore):

    def __init__(self, adapter: StorageAdapter, assignments: Optional[DailyAssignmentRepository] = None):
        self.adapter = adapter
        self.assignments = assignments or DailyAssignmentRepository()

    async def upsert_daily_assignment(
        self,
        employee_id: str,
        team_id: str,
        day: date,
        is_available: bool = True,
        notes: Optional[str] = None,
    ) -> DailyAssignment:
        if not employee_id or not team_id:
            raise ValidationError("employee_id and team_id are required")
        with self.adapter.get_session() as session:
            row = self.assignments.upsert(session, employee_id, team_id, day, is_available, notes)
            return assignment_from_model(row)

    async def get_daily_assignment(self, employee_id: str, team_id: str, day: date) -> Optional[DailyAssignment]:
        with self.adapter.get_session() as session:
            row = self.assignments.get_by_key(session, employee_id, team_id, day)
            return assignment_from_model(row) if row else None

    async def query_daily_assignments(
        self,
        team_id: Optional[str],
        start_date: date,
        end_date: date,
    ) -> List[DailyAssignment]:
        with self.adapter.get_session() as session:
            rows = self.assignments.list_in_range(session, start_date, end_date, team_id)
            return [assignment_from_model(r) for r in rows]

    async def delete_daily_assignment(self, employee_id: str, team_id: str, day: date) -> bool:
        with self.adapter.get_session() as session:
            return self.assignments.delete_by_key(session, employee_id, team_id, day)


class SqlHolidayRegistry(HolidayRegistry):

    def __init__(self, adapter: StorageAdapter, holidays: Optional[HolidayRepository] = None):
        self.adapter = adapter
        self.holidays = holidays or HolidayRepository()

    async def is_employee_on_holiday(self, employee_id: str, day: date) -> bool:
        with self.adapter.get_session() as session:
            return self.holidays.covers(session, HolidayScope.EMPLOYEE.value, employee_id, day)

    async def is_team_on_holiday(self, team_id: str, day: date) -> bool:
        with self.adapter.get_session() as session:
            return self.holidays.covers(session, HolidayScope.TEAM.value, team_id, day)


class SqlBookingStore(BookingStore):

    def __init__(self, adapter: StorageAdapter, bookings: Optional[BookingRepository] = None):
        self.adapter = adapter
        self.bookings = bookings or BookingRepository()

    async def list_bookings(self, team_id: Optional[str] = None) -> List[Booking]:
        with self.adapter.get_session() as session:
            if team_id is None:
                rows = self.bookings.list_all(session)
            elif team_id == settings.UNASSIGNED_TEAM_ID:
                rows = self.bookings.list_for_team(session, None)
            else:
                rows = self.bookings.list_for_team(session, team_id)
            return [booking_from_model(r) for r in rows]

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        with self.adapter.get_session() as session:
            row = self.bookings.get(session, booking_id)
            return booking_from_model(row) if row else None

    async def update_booking_range(
        self,
        booking_id: str,
        start_date: date,
        duration_days: int,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
    ) -> Booking:
        with self.adapter.get_session() as session:
            row = self.bookings.update(session, booking_id, {
                "start_date": start_date,
                "duration": duration_days,
                "start_hour": start_hour,
                "end_hour": end_hour,
            })
            if row is None:
                raise LookupError(f"Booking {booking_id} not found")
            logger.info(f"Booking {booking_id} moved to {start_date.isoformat()} for {duration_days} day(s)")
            return booking_from_model(row)


def sql_stores(adapter: StorageAdapter) -> SchedulingStores:
    """Build the full set of SQL-backed stores over one adapter."""
    teams = TeamRepository()
    return SchedulingStores(
        directory=SqlTeamDirectory(adapter, teams),
        memberships=SqlTeamMembershipStore(adapter, teams),
        assignments=SqlDailyAssignmentStore(adapter),
        holidays=SqlHolidayRegistry(adapter),
        bookings=SqlBookingStore(adapter),
    )
