"""crewplan Storage Layer - SQLAlchemy adapter, models, repositories and SQL-backed stores."""

from .base import StorageAdapter
from .postgres_adapter import PostgresAdapter, PostgresConfig
from .models import (
    Base,
    DailyTeamAssignmentModel,
    EmployeeModel,
    HolidayModel,
    PlacementTeamModel,
    TeamBookingModel,
    TeamMemberModel,
)
from .sql_stores import sql_stores

__all__ = [
    "StorageAdapter",
    "PostgresAdapter",
    "PostgresConfig",
    "Base",
    "PlacementTeamModel",
    "EmployeeModel",
    "TeamMemberModel",
    "DailyTeamAssignmentModel",
    "HolidayModel",
    "TeamBookingModel",
    "sql_stores",
]
