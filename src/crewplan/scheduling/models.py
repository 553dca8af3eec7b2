"""
Domain types for crew scheduling.

Teams, employees and memberships come from the directory; bookings tie a
project to a team for a number of days; daily assignments record who works
for which team on which date.
"""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Tuple

from crewplan.platform.config import settings
from .errors import ValidationError


@dataclass
class Team:
    """An installation team."""
    id: str
    name: str
    color: str = "#6B7280"
    is_active: bool = True

    @property
    def is_unassigned(self) -> bool:
        return self.id == settings.UNASSIGNED_TEAM_ID

    @classmethod
    def unassigned(cls) -> "Team":
        """Sentinel team holding bookings without a crew."""
        return cls(id=settings.UNASSIGNED_TEAM_ID, name="Unassigned")


@dataclass
class Employee:
    id: str
    name: str
    role: str = ""
    email: Optional[str] = None


@dataclass
class TeamMembership:
    """Permanent (date independent) membership of an employee in a team."""
    team_id: str
    employee_id: str
    is_default: bool = False
    id: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str]:
        return (self.team_id, self.employee_id)


@dataclass(frozen=True)
class Booking:
    """A project's assignment to a team for ``duration_days`` calendar days."""
    id: str
    project_id: str
    team_id: Optional[str]
    start_date: date
    duration_days: int
    project_name: Optional[str] = None
    start_hour: Optional[int] = None
    end_hour: Optional[int] = None

    def __post_init__(self):
        if not self.id:
            raise ValidationError("Booking id is required")
        if self.duration_days is None or self.duration_days < settings.MIN_BOOKING_DURATION_DAYS:
            raise ValidationError(
                f"Booking {self.id} has duration {self.duration_days}, "
                f"minimum is {settings.MIN_BOOKING_DURATION_DAYS}"
            )
        if not self.team_id:
            object.__setattr__(self, "team_id", settings.UNASSIGNED_TEAM_ID)

    @property
    def end_date(self) -> date:
        """Last day of the booking (inclusive)."""
        return self.start_date + timedelta(days=self.duration_days - 1)

    @property
    def is_unassigned(self) -> bool:
        return self.team_id == settings.UNASSIGNED_TEAM_ID

    def with_range(
        self,
        start_date: date,
        duration_days: int,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
    ) -> "Booking":
        return replace(
            self,
            start_date=start_date,
            duration_days=duration_days,
            start_hour=start_hour,
            end_hour=end_hour,
        )


@dataclass
class DailyAssignment:
    """Whether an employee works under a team on a given date."""
    employee_id: str
    team_id: str
    date: date
    is_available: bool = True
    notes: Optional[str] = None
    id: Optional[str] = None

    @property
    def key(self) -> Tuple[str, str, date]:
        return (self.employee_id, self.team_id, self.date)


class HolidayScope(str, Enum):
    EMPLOYEE = "employee"
    TEAM = "team"


@dataclass
class Holiday:
    """Approved time off for an employee or a whole team."""
    subject_id: str
    scope: HolidayScope
    start_date: date
    end_date: Optional[date] = None
    status: str = "approved"

    def covers(self, day: date) -> bool:
        if self.status != "approved":
            return False
        last = self.end_date or self.start_date
        return self.start_date <= day <= last


@dataclass
class OverlapCandidate:
    """
    A conflicting booking with an editable range.

    Produced by detection, edited by the caller, consumed by commit. Never
    persisted as such.
    """
    booking: Booking
    start_date: date
    end_date: date
    start_hour: int
    end_hour: int
    overlaps_with: list = field(default_factory=list)

    @property
    def booking_id(self) -> str:
        return self.booking.id

    @property
    def team_id(self) -> str:
        return self.booking.team_id

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1
