from .base import BaseRepository
from .booking_repository import BookingRepository
from .daily_assignment_repository import DailyAssignmentRepository
from .holiday_repository import HolidayRepository
from .team_repository import TeamRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "DailyAssignmentRepository",
    "HolidayRepository",
    "TeamRepository",
]
