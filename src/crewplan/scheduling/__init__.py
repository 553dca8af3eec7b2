"""
crewplan Scheduling Core

This package contains the crew scheduling services:
- Calendar helpers: date/hour ranges and offsets
- Position mapping: clipped bar positions inside a visible range
- OverlapDetector: same-team bookings with intersecting ranges
- OverlapResolver: propose/commit loop for clearing conflicts
- AutoAssignmentOrchestrator: expands bookings into daily member rows
"""

from .auto_assigner import AssignmentFailure, AutoAssignmentOrchestrator, AutoAssignResult
from .calendar import Granularity, date_range, start_of_week, week_range
from .errors import InvalidTransitionError, SchedulingError, ValidationError
from .memory import in_memory_stores
from .models import (
    Booking,
    DailyAssignment,
    Employee,
    Holiday,
    HolidayScope,
    OverlapCandidate,
    Team,
    TeamMembership,
)
from .overlap_detector import OverlapDetector, detect_overlaps
from .overlap_resolver import CommitOutcome, OverlapResolver, ResolutionReport, ResolutionState
from .positions import Position, map_to_position
from .stores import SchedulingStores

__all__ = [
    # Services
    "AutoAssignmentOrchestrator",
    "OverlapDetector",
    "OverlapResolver",
    # Functions
    "date_range",
    "week_range",
    "start_of_week",
    "map_to_position",
    "detect_overlaps",
    "in_memory_stores",
    # Types
    "Granularity",
    "Position",
    "Team",
    "Employee",
    "TeamMembership",
    "Booking",
    "DailyAssignment",
    "Holiday",
    "HolidayScope",
    "OverlapCandidate",
    "AutoAssignResult",
    "AssignmentFailure",
    "CommitOutcome",
    "ResolutionReport",
    "ResolutionState",
    "SchedulingStores",
    # Errors
    "SchedulingError",
    "ValidationError",
    "InvalidTransitionError",
]
