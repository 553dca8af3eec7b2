"""
In-process implementations of the store contracts.

Used by tests and by callers that already hold their data in memory (for
example a view model fetched up front).
"""

import uuid
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ValidationError
from .models import Booking, DailyAssignment, Employee, Holiday, HolidayScope, Team, TeamMembership
from .stores import (
    BookingStore,
    DailyAssignmentStore,
    HolidayRegistry,
    SchedulingStores,
    TeamDirectory,
    TeamMembershipStore,
)


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise ValidationError(f"{name} is required")
    return value


class InMemoryTeamDirectory(TeamDirectory):

    def __init__(self, teams: Iterable[Team] = (), employees: Iterable[Employee] = ()):
        self.teams: Dict[str, Team] = {t.id: t for t in teams}
        self.employees: Dict[str, Employee] = {e.id: e for e in employees}

    async def get_team(self, team_id: str) -> Optional[Team]:
        return self.teams.get(team_id)

    async def list_teams(self, active_only: bool = True) -> List[Team]:
        teams = [t for t in self.teams.values() if t.is_active or not active_only]
        return sorted(teams, key=lambda t: t.name)

    async def get_employee(self, employee_id: str) -> Optional[Employee]:
        return self.employees.get(employee_id)

    async def list_employees(self) -> List[Employee]:
        return sorted(self.employees.values(), key=lambda e: e.name)


class InMemoryTeamMembershipStore(TeamMembershipStore):

    def __init__(self, directory: InMemoryTeamDirectory, memberships: Iterable[TeamMembership] = ()):
        self.directory = directory
        self.memberships: Dict[Tuple[str, str], TeamMembership] = {}
        for membership in memberships:
            self.memberships[membership.key] = membership

    async def add_member(self, team_id: str, employee_id: str, is_default: bool = False) -> TeamMembership:
        key = (_require(team_id, "team_id"), _require(employee_id, "employee_id"))
        existing = self.memberships.get(key)
        if existing:
            return existing
        membership = TeamMembership(team_id, employee_id, is_default=is_default, id=str(uuid.uuid4()))
        self.memberships[key] = membership
        return membership

    async def remove_member(self, team_id: str, employee_id: str) -> bool:
        return self.memberships.pop((team_id, employee_id), None) is not None

    async def list_members(self, team_id: str) -> List[Employee]:
        members = []
        for membership in await self.list_memberships(team_id):
            employee = self.directory.employees.get(membership.employee_id)
            if employee:
                members.append(employee)
        return members

    async def list_memberships(self, team_id: str) -> List[TeamMembership]:
        # Default members first, like the roster screen
        rows = [m for m in self.memberships.values() if m.team_id == team_id]
        return sorted(rows, key=lambda m: not m.is_default)

    async def list_employee_teams(self, employee_id: str) -> List[str]:
        return [m.team_id for m in self.memberships.values() if m.employee_id == employee_id]


class InMemoryDailyAssignmentStore(DailyAssignmentStore):

    def __init__(self):
        self.rows: Dict[Tuple[str, str, date], DailyAssignment] = {}

    async def upsert_daily_assignment(
        self,
        employee_id: str,
        team_id: str,
        day: date,
        is_available: bool = True,
        notes: Optional[str] = None,
    ) -> DailyAssignment:
        key = (_require(employee_id, "employee_id"), _require(team_id, "team_id"), day)
        existing = self.rows.get(key)
        if existing:
            updated = replace(existing, is_available=is_available, notes=notes)
        else:
            updated = DailyAssignment(employee_id, team_id, day, is_available, notes, id=str(uuid.uuid4()))
        self.rows[key] = updated
        return updated

    async def get_daily_assignment(self, employee_id: str, team_id: str, day: date) -> Optional[DailyAssignment]:
        return self.rows.get((employee_id, team_id, day))

    async def query_daily_assignments(
        self,
        team_id: Optional[str],
        start_date: date,
        end_date: date,
    ) -> List[DailyAssignment]:
        rows = [
            row for row in self.rows.values()
            if start_date <= row.date <= end_date and (team_id is None or row.team_id == team_id)
        ]
        return sorted(rows, key=lambda r: (r.date, r.team_id, r.employee_id))

    async def delete_daily_assignment(self, employee_id: str, team_id: str, day: date) -> bool:
        return self.rows.pop((employee_id, team_id, day), None) is not None


class InMemoryHolidayRegistry(HolidayRegistry):

    def __init__(self, holidays: Iterable[Holiday] = ()):
        self.holidays: List[Holiday] = list(holidays)

    def add(self, holiday: Holiday) -> None:
        self.holidays.append(holiday)

    def _covered(self, subject_id: str, scope: HolidayScope, day: date) -> bool:
        return any(
            h.subject_id == subject_id and h.scope == scope and h.covers(day)
            for h in self.holidays
        )

    async def is_employee_on_holiday(self, employee_id: str, day: date) -> bool:
        return self._covered(employee_id, HolidayScope.EMPLOYEE, day)

    async def is_team_on_holiday(self, team_id: str, day: date) -> bool:
        return self._covered(team_id, HolidayScope.TEAM, day)


class InMemoryBookingStore(BookingStore):

    def __init__(self, bookings: Iterable[Booking] = ()):
        self.bookings: Dict[str, Booking] = {b.id: b for b in bookings}

    def add(self, booking: Booking) -> None:
        self.bookings[booking.id] = booking

    async def list_bookings(self, team_id: Optional[str] = None) -> List[Booking]:
        return [b for b in self.bookings.values() if team_id is None or b.team_id == team_id]

    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self.bookings.get(booking_id)

    async def update_booking_range(
        self,
        booking_id: str,
        start_date: date,
        duration_days: int,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
    ) -> Booking:
        booking = self.bookings.get(booking_id)
        if booking is None:
            raise LookupError(f"Booking {booking_id} not found")
        updated = booking.with_range(start_date, duration_days, start_hour, end_hour)
        self.bookings[booking_id] = updated
        return updated


def in_memory_stores(
    teams: Iterable[Team] = (),
    employees: Iterable[Employee] = (),
    memberships: Iterable[TeamMembership] = (),
    holidays: Iterable[Holiday] = (),
    bookings: Iterable[Booking] = (),
) -> SchedulingStores:
    """Build a full set of in-memory stores sharing one directory."""
    directory = InMemoryTeamDirectory(teams, employees)
    return SchedulingStores(
        directory=directory,
        memberships=InMemoryTeamMembershipStore(directory, memberships),
        assignments=InMemoryDailyAssignmentStore(),
        holidays=InMemoryHolidayRegistry(holidays),
        bookings=InMemoryBookingStore(bookings),
    )
