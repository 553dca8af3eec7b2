"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import date

import pytest

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "warning")

sys.path.append(os.path.join(os.getcwd(), "src"))

from crewplan.scheduling.models import Booking, Employee, Team, TeamMembership  # noqa: E402
from crewplan.scheduling.memory import in_memory_stores  # noqa: E402


@pytest.fixture
def team_blue():
    return Team(id="team_blue", name="Team Blue", color="#3B82F6")


@pytest.fixture
def team_green():
    return Team(id="team_green", name="Team Green", color="#22C55E")


@pytest.fixture
def employees():
    return [
        Employee(id="emp_anna", name="Anna Peeters", role="installer"),
        Employee(id="emp_bart", name="Bart Claes", role="installer"),
        Employee(id="emp_carl", name="Carl Maes", role="foreman"),
    ]


@pytest.fixture
def stores(team_blue, team_green, employees):
    """In-memory stores: Anna and Bart are permanent members of Team Blue, Carl of Team Green."""
    return in_memory_stores(
        teams=[team_blue, team_green],
        employees=employees,
        memberships=[
            TeamMembership("team_blue", "emp_anna", is_default=True),
            TeamMembership("team_blue", "emp_bart"),
            TeamMembership("team_green", "emp_carl", is_default=True),
        ],
    )


def make_booking(booking_id: str, team_id, start: date, duration: int, project_id: str = None) -> Booking:
    """Helper to create bookings with a project id derived from the booking id."""
    return Booking(
        id=booking_id,
        project_id=project_id or f"proj_{booking_id}",
        team_id=team_id,
        start_date=start,
        duration_days=duration,
        project_name=f"Project {booking_id}",
    )


@pytest.fixture
def booking_factory():
    return make_booking
