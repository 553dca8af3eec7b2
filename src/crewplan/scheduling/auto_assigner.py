"""
Auto-Assignment Orchestrator

Expands a team-level booking into one daily assignment per permanent member
per day, skipping days on which the member or the whole team is on holiday.

Usage:
    orchestrator = AutoAssignmentOrchestrator(stores)

    # Expand one booking
    result = await orchestrator.auto_assign("team_blue", date(2026, 1, 5), 5)
    print(result.summary())  # "10 of 10 assignments succeeded"

    # Expand every booking in the booking store
    results = await orchestrator.auto_assign_bookings()

Upserts are keyed on (employee, team, date), so running the same expansion
twice converges on the same rows. A failing holiday lookup or upsert is
recorded on the result and the remaining members and days still run.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from .base import SchedulerBase
from .calendar import is_weekend, iter_days
from .models import Booking, DailyAssignment, Employee


class SkipReason:
    EMPLOYEE_HOLIDAY = "employee_holiday"
    TEAM_HOLIDAY = "team_holiday"
    WEEKEND = "weekend"


@dataclass
class SkippedAssignment:
    employee_id: str
    date: date
    reason: str


@dataclass
class AssignmentFailure:
    """A holiday lookup or upsert that raised; the key and the error text."""
    employee_id: str
    team_id: str
    date: date
    reason: str


@dataclass
class AutoAssignResult:
    """Outcome of one expansion."""
    team_id: str
    applied: List[DailyAssignment] = field(default_factory=list)
    skipped: List[SkippedAssignment] = field(default_factory=list)
    failures: List[AssignmentFailure] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.applied) + len(self.failures)

    @property
    def succeeded(self) -> int:
        return len(self.applied)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    def summary(self) -> str:
        return f"{self.succeeded} of {self.attempted} assignments succeeded"


class AutoAssignmentOrchestrator(SchedulerBase):
    """Creates daily assignments for permanent team members."""

    async def run(self, bookings: Optional[Iterable[Booking]] = None) -> Dict[str, AutoAssignResult]:
        return await self.auto_assign_bookings(bookings)

    async def auto_assign(
        self,
        team_id: str,
        start_date: date,
        duration_days: int,
        skip_weekends: Optional[bool] = None,
        notes: Optional[str] = None,
    ) -> AutoAssignResult:
        """
        Upsert a daily assignment for every member and day of a booking.

        Args:
            team_id: Team the booking belongs to
            start_date: First day of the booking
            duration_days: Number of calendar days (>= minimum duration)
            skip_weekends: Leave Saturdays and Sundays empty; defaults to settings
            notes: Note stored on each row; defaults to the auto-assign note

        Returns:
            AutoAssignResult with applied rows, skips, failures and warnings

        Raises:
            ValidationError: unknown/missing team or bad duration
        """
        team = await self.require_team(team_id)
        start_date = self.require_date(start_date, "start_date")
        duration_days = self.require_duration(duration_days)
        if skip_weekends is None:
            skip_weekends = self.settings.AUTO_ASSIGN_SKIP_WEEKENDS
        if notes is None:
            notes = self.settings.AUTO_ASSIGN_NOTE

        result = AutoAssignResult(team_id=team.id)

        members = await self.stores.memberships.list_members(team.id)
        if not members:
            message = f"Team {team.name} has no permanent members; nothing to assign"
            result.warnings.append(message)
            self.logger.warning("auto_assign.empty_roster", team_id=team.id)
            return result

        keys = []
        for day in iter_days(start_date, duration_days):
            if skip_weekends and is_weekend(day):
                result.skipped.extend(SkippedAssignment(m.id, day, SkipReason.WEEKEND) for m in members)
                continue
            try:
                team_off = await self.stores.holidays.is_team_on_holiday(team.id, day)
            except Exception as e:
                self._record_failures(result, team.id, members, day, e)
                continue
            if team_off:
                result.skipped.extend(SkippedAssignment(m.id, day, SkipReason.TEAM_HOLIDAY) for m in members)
                continue
            for member in members:
                try:
                    member_off = await self.stores.holidays.is_employee_on_holiday(member.id, day)
                except Exception as e:
                    self._record_failures(result, team.id, [member], day, e)
                    continue
                if member_off:
                    result.skipped.append(SkippedAssignment(member.id, day, SkipReason.EMPLOYEE_HOLIDAY))
                    continue
                keys.append((member, day))

        await self._upsert_all(team.id, keys, notes, result)

        self.logger.info(
            "auto_assign.completed",
            team_id=team.id,
            start_date=start_date.isoformat(),
            duration_days=duration_days,
            applied=result.succeeded,
            skipped=len(result.skipped),
            failed=len(result.failures),
        )
        return result

    async def _upsert_all(
        self,
        team_id: str,
        keys: List[tuple],
        notes: Optional[str],
        result: AutoAssignResult,
        availability: Optional[Dict[str, bool]] = None,
    ) -> None:
        """Issue independent upserts concurrently and sort outcomes into the result."""
        availability = availability or {}
        outcomes = await asyncio.gather(
            *[
                self.stores.assignments.upsert_daily_assignment(
                    employee_id=member.id,
                    team_id=team_id,
                    day=day,
                    is_available=availability.get(member.id, True),
                    notes=notes,
                )
                for member, day in keys
            ],
            return_exceptions=True,
        )

        for (member, day), outcome in zip(keys, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                self._record_failures(result, team_id, [member], day, outcome, event="auto_assign.upsert_failed")
            else:
                result.applied.append(outcome)

    def _record_failures(
        self,
        result: AutoAssignResult,
        team_id: str,
        members: Iterable[Employee],
        day: date,
        error: Exception,
        event: str = "auto_assign.holiday_lookup_failed",
    ) -> None:
        for member in members:
            self.logger.error(
                event,
                team_id=team_id,
                employee_id=member.id,
                date=day.isoformat(),
                error=str(error),
            )
            result.failures.append(AssignmentFailure(member.id, team_id, day, str(error)))

    async def auto_assign_bookings(
        self,
        bookings: Optional[Iterable[Booking]] = None,
    ) -> Dict[str, AutoAssignResult]:
        """
        Expand every team booking; unassigned and unknown-team bookings are skipped.

        Args:
            bookings: Bookings to expand; read from the booking store when omitted

        Returns:
            Mapping of booking id to its AutoAssignResult
        """
        if bookings is None:
            bookings = await self.stores.bookings.list_bookings()

        results: Dict[str, AutoAssignResult] = {}
        for booking in bookings:
            if booking.is_unassigned:
                continue
            if await self.stores.directory.get_team(booking.team_id) is None:
                self.logger.warning(
                    "auto_assign.unknown_team",
                    booking_id=booking.id,
                    team_id=booking.team_id,
                )
                continue
            results[booking.id] = await self.auto_assign(
                booking.team_id, booking.start_date, booking.duration_days
            )
        return results

    async def generate_default_assignments(self, day: date) -> AutoAssignResult:
        """
        Seed a day with every active team's default members.

        Only runs when no assignment exists for ``day`` yet. Members on holiday
        get a row marked unavailable rather than no row.

        Returns:
            AutoAssignResult for the pseudo team ``*``
        """
        day = self.require_date(day, "day")
        result = AutoAssignResult(team_id="*")

        existing = await self.stores.assignments.query_daily_assignments(None, day, day)
        if existing:
            result.warnings.append(f"Assignments already exist for {day.isoformat()}")
            return result

        for team in await self.stores.directory.list_teams(active_only=True):
            memberships = await self.stores.memberships.list_memberships(team.id)
            defaults = [m for m in memberships if m.is_default]
            if not defaults:
                continue

            members = []
            for membership in defaults:
                member = await self.stores.directory.get_employee(membership.employee_id)
                members.append(member or Employee(id=membership.employee_id, name=membership.employee_id))

            try:
                team_off = await self.stores.holidays.is_team_on_holiday(team.id, day)
            except Exception as e:
                self._record_failures(result, team.id, members, day, e)
                continue

            keys = []
            availability: Dict[str, bool] = {}
            for member in members:
                try:
                    on_holiday = team_off or await self.stores.holidays.is_employee_on_holiday(member.id, day)
                except Exception as e:
                    self._record_failures(result, team.id, [member], day, e)
                    continue
                availability[member.id] = not on_holiday
                keys.append((member, day))

            await self._upsert_all(team.id, keys, None, result, availability)

        self.logger.info(
            "auto_assign.defaults_generated",
            date=day.isoformat(),
            applied=result.succeeded,
            failed=len(result.failures),
        )
        return result

    async def remove_assignments(self, team_id: str, start_date: date, duration_days: int) -> int:
        """Delete the team's daily rows covering a booking's days."""
        team = await self.require_team(team_id)
        start_date = self.require_date(start_date, "start_date")
        duration_days = self.require_duration(duration_days)
        end_date = start_date + timedelta(days=duration_days - 1)

        rows = await self.stores.assignments.query_daily_assignments(team.id, start_date, end_date)
        removed = 0
        for row in rows:
            if await self.stores.assignments.delete_daily_assignment(row.employee_id, row.team_id, row.date):
                removed += 1

        self.logger.info("auto_assign.removed", team_id=team.id, removed=removed)
        return removed
