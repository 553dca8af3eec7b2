"""
Store contracts consumed by the scheduling services.

The services depend only on these abstract classes; implementations live in
``crewplan.scheduling.memory`` (in process) and ``crewplan.storage.sql_stores``
(SQLAlchemy). Every method is awaited by the caller. Implementations must not
cache reads across calls.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from .models import Booking, DailyAssignment, Employee, Team, TeamMembership


class TeamDirectory(ABC):
    """Read-only view of teams and employees."""

    @abstractmethod
    async def get_team(self, team_id: str) -> Optional[Team]:
        pass

    @abstractmethod
    async def list_teams(self, active_only: bool = True) -> List[Team]:
        pass

    @abstractmethod
    async def get_employee(self, employee_id: str) -> Optional[Employee]:
        pass

    @abstractmethod
    async def list_employees(self) -> List[Employee]:
        pass


class TeamMembershipStore(ABC):
    """Permanent team rosters. Unique on (team, employee)."""

    @abstractmethod
    async def add_member(self, team_id: str, employee_id: str, is_default: bool = False) -> TeamMembership:
        """Add a member; adding an existing member returns the existing row."""
        pass

    @abstractmethod
    async def remove_member(self, team_id: str, employee_id: str) -> bool:
        pass

    @abstractmethod
    async def list_members(self, team_id: str) -> List[Employee]:
        pass

    @abstractmethod
    async def list_memberships(self, team_id: str) -> List[TeamMembership]:
        pass

    @abstractmethod
    async def list_employee_teams(self, employee_id: str) -> List[str]:
        pass


class DailyAssignmentStore(ABC):
    """Per (employee, team, date) availability rows."""

    @abstractmethod
    async def upsert_daily_assignment(
        self,
        employee_id: str,
        team_id: str,
        day: date,
        is_available: bool = True,
        notes: Optional[str] = None,
    ) -> DailyAssignment:
        pass

    @abstractmethod
    async def get_daily_assignment(self, employee_id: str, team_id: str, day: date) -> Optional[DailyAssignment]:
        pass

    @abstractmethod
    async def query_daily_assignments(
        self,
        team_id: Optional[str],
        start_date: date,
        end_date: date,
    ) -> List[DailyAssignment]:
        """Rows in ``[start_date, end_date]``, ordered by date; all teams when ``team_id`` is None."""
        pass

    @abstractmethod
    async def delete_daily_assignment(self, employee_id: str, team_id: str, day: date) -> bool:
        pass


class HolidayRegistry(ABC):
    """Approved holidays for employees and teams."""

    @abstractmethod
    async def is_employee_on_holiday(self, employee_id: str, day: date) -> bool:
        pass

    @abstractmethod
    async def is_team_on_holiday(self, team_id: str, day: date) -> bool:
        pass

    async def is_on_holiday(self, subject_id: str, day: date) -> bool:
        """True when ``subject_id`` (employee or team) is off on ``day``."""
        if await self.is_employee_on_holiday(subject_id, day):
            return True
        return await self.is_team_on_holiday(subject_id, day)


class BookingStore(ABC):
    """Project-team bookings."""

    @abstractmethod
    async def list_bookings(self, team_id: Optional[str] = None) -> List[Booking]:
        pass

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def update_booking_range(
        self,
        booking_id: str,
        start_date: date,
        duration_days: int,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
    ) -> Booking:
        """Persist a new range; raises LookupError for an unknown booking."""
        pass


@dataclass
class SchedulingStores:
    """The collaborators a scheduling service talks to."""
    directory: TeamDirectory
    memberships: TeamMembershipStore
    assignments: DailyAssignmentStore
    holidays: HolidayRegistry
    bookings: BookingStore
