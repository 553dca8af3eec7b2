"""
Base Scheduler class for crew scheduling services.

Provides store access, settings, validation helpers and logging.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Optional

from crewplan.platform.config import Settings, settings as default_settings
from crewplan.platform.logging import get_logger

from .errors import ValidationError
from .models import Team
from .stores import SchedulingStores


class SchedulerBase(ABC):
    """
    Base class for all scheduling services.

    Provides:
    - Store access (directory, memberships, daily assignments, holidays, bookings)
    - Team and duration validation
    - Structured logging
    """

    def __init__(self, stores: SchedulingStores, settings: Optional[Settings] = None):
        """
        Initialize the scheduler.

        Args:
            stores: Store implementations to read from and write to
            settings: Overrides the process-wide settings
        """
        self.stores = stores
        self.settings = settings or default_settings
        self.logger = get_logger(self.__class__.__name__)

    @property
    def unassigned_team_id(self) -> str:
        return self.settings.UNASSIGNED_TEAM_ID

    async def require_team(self, team_id: Optional[str]) -> Team:
        """Resolve a real team or raise ValidationError."""
        if not team_id:
            raise ValidationError("team_id is required")
        if team_id == self.unassigned_team_id:
            raise ValidationError("The unassigned team has no roster")
        team = await self.stores.directory.get_team(team_id)
        if team is None:
            raise ValidationError(f"Unknown team: {team_id}")
        return team

    def require_duration(self, duration_days: Optional[int]) -> int:
        minimum = self.settings.MIN_BOOKING_DURATION_DAYS
        if duration_days is None or duration_days < minimum:
            raise ValidationError(f"Duration must be at least {minimum} day(s), got {duration_days}")
        return duration_days

    def require_date(self, value: Any, name: str) -> date:
        if not isinstance(value, date):
            raise ValidationError(f"{name} must be a date, got {value!r}")
        if isinstance(value, datetime):
            return value.date()
        return value

    @abstractmethod
    async def run(self, *args, **kwargs) -> Any:
        """
        Main entry point for the scheduler.

        Must be implemented by subclasses.
        """
        pass
