"""
Overlap Resolver

Lets a caller move conflicting bookings until a team's schedule is clear.

The resolver does not decide new dates itself. It hands editable candidates
to the caller (a dialog, a form, a script), validates and stores what comes
back, and re-runs detection. Whether to loop again is the caller's choice,
bounded by ``MAX_RESOLUTION_ROUNDS`` when driven through :meth:`resolve`.

States:
    DETECTED -> PROPOSED -> COMMITTED -> DETECTED (still overlapping)
                                      -> RESOLVED
    any round past the cap            -> UNRESOLVED

Usage:
    resolver = OverlapResolver(stores)
    candidates = resolver.propose_resolution(
        resolver.to_candidates(await detector.detect("team_blue"))
    )
    candidates[1].start_date = date(2026, 1, 6)
    candidates[1].end_date = date(2026, 1, 11)
    outcomes = await resolver.commit_resolution(candidates)
    report = await resolver.redetect("team_blue")
"""

import inspect
from dataclasses import dataclass, field, replace
from datetime import datetime, time
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Union

from crewplan.platform.logging import log_context

from .base import SchedulerBase
from .errors import InvalidTransitionError, ValidationError
from .models import Booking, OverlapCandidate
from .overlap_detector import detect_overlaps, find_candidate_overlaps, find_overlapping_pairs


class ResolutionState(str, Enum):
    DETECTED = "detected"
    PROPOSED = "proposed"
    COMMITTED = "committed"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


_TRANSITIONS = {
    ResolutionState.DETECTED: {ResolutionState.PROPOSED, ResolutionState.RESOLVED, ResolutionState.UNRESOLVED},
    ResolutionState.PROPOSED: {ResolutionState.COMMITTED, ResolutionState.DETECTED, ResolutionState.UNRESOLVED},
    ResolutionState.COMMITTED: {ResolutionState.DETECTED, ResolutionState.RESOLVED},
    ResolutionState.RESOLVED: set(),
    ResolutionState.UNRESOLVED: set(),
}


@dataclass
class CommitOutcome:
    booking_id: str
    success: bool
    booking: Optional[Booking] = None
    reason: Optional[str] = None


@dataclass
class ResolutionReport:
    """Result of re-running detection after a commit."""
    team_id: str
    remaining: List[Booking] = field(default_factory=list)
    rounds: int = 0
    state: ResolutionState = ResolutionState.DETECTED
    outcomes: List[CommitOutcome] = field(default_factory=list)

    @property
    def is_clear(self) -> bool:
        return not self.remaining


@dataclass
class ResolutionSession:
    """Tracks one team's way through the resolution states."""
    team_id: str
    max_rounds: int
    state: ResolutionState = ResolutionState.DETECTED
    rounds: int = 0
    history: List[ResolutionState] = field(default_factory=lambda: [ResolutionState.DETECTED])

    def transition(self, target: ResolutionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"Cannot move from {self.state.value} to {target.value}")
        if target is ResolutionState.COMMITTED:
            self.rounds += 1
        self.state = target
        self.history.append(target)

    @property
    def exhausted(self) -> bool:
        return self.rounds >= self.max_rounds

    @property
    def finished(self) -> bool:
        return self.state in (ResolutionState.RESOLVED, ResolutionState.UNRESOLVED)


Editor = Callable[
    [List[OverlapCandidate]],
    Union[Optional[List[OverlapCandidate]], Awaitable[Optional[List[OverlapCandidate]]]],
]


class OverlapResolver(SchedulerBase):
    """Proposes, validates and commits new ranges for conflicting bookings."""

    async def run(self, team_id: str, editor: Editor, max_rounds: Optional[int] = None) -> ResolutionReport:
        return await self.resolve(team_id, editor, max_rounds)

    def to_candidates(self, bookings: Iterable[Booking]) -> List[OverlapCandidate]:
        """Annotate bookings with their current range and default hours."""
        bookings = list(bookings)
        partners: Dict[str, List[str]] = {b.id: [] for b in bookings}
        for first, second in find_overlapping_pairs(bookings):
            partners[first.id].append(second.id)
            partners[second.id].append(first.id)

        return [
            OverlapCandidate(
                booking=booking,
                start_date=booking.start_date,
                end_date=booking.end_date,
                start_hour=booking.start_hour if booking.start_hour is not None else self.settings.DEFAULT_START_HOUR,
                end_hour=booking.end_hour if booking.end_hour is not None else self.settings.DEFAULT_END_HOUR,
                overlaps_with=partners.get(booking.id, []),
            )
            for booking in bookings
        ]

    def propose_resolution(self, candidates: Iterable[OverlapCandidate]) -> List[OverlapCandidate]:
        """Editable copies of ``candidates``; the originals stay untouched."""
        return [replace(c, overlaps_with=list(c.overlaps_with)) for c in candidates]

    def preview_overlaps(self, candidates: Iterable[OverlapCandidate]) -> Dict[str, List[str]]:
        """Which candidates still clash with which, at hour resolution."""
        clashes: Dict[str, List[str]] = {}
        for first, second in find_candidate_overlaps(candidates):
            clashes.setdefault(first.booking_id, []).append(second.booking_id)
            clashes.setdefault(second.booking_id, []).append(first.booking_id)
        return clashes

    def validate_candidate(self, candidate: OverlapCandidate) -> None:
        for name in ("start_hour", "end_hour"):
            hour = getattr(candidate, name)
            if not isinstance(hour, int) or not 0 <= hour <= 23:
                raise ValidationError(f"{candidate.booking_id}: {name} must be 0..23, got {hour!r}")
        start = datetime.combine(candidate.start_date, time(hour=candidate.start_hour))
        end = datetime.combine(candidate.end_date, time(hour=candidate.end_hour))
        if end < start:
            raise ValidationError(f"{candidate.booking_id}: end {end.isoformat()} is before start {start.isoformat()}")
        self.require_duration(candidate.duration_days)

    async def commit_resolution(self, resolved: Iterable[OverlapCandidate]) -> List[CommitOutcome]:
        """
        Store the edited ranges.

        Every candidate is validated before the first write; a ValidationError
        leaves the store untouched. Store errors are reported per candidate.

        Returns:
            One CommitOutcome per candidate, in input order
        """
        resolved = list(resolved)
        for candidate in resolved:
            self.validate_candidate(candidate)

        outcomes = []
        for candidate in resolved:
            try:
                booking = await self.stores.bookings.update_booking_range(
                    candidate.booking_id,
                    candidate.start_date,
                    candidate.duration_days,
                    candidate.start_hour,
                    candidate.end_hour,
                )
                outcomes.append(CommitOutcome(candidate.booking_id, True, booking=booking))
            except Exception as e:
                self.logger.error(
                    "overlap_resolution.commit_failed",
                    booking_id=candidate.booking_id,
                    error=str(e),
                )
                outcomes.append(CommitOutcome(candidate.booking_id, False, reason=str(e)))

        self.logger.info(
            "overlap_resolution.committed",
            committed=sum(1 for o in outcomes if o.success),
            failed=sum(1 for o in outcomes if not o.success),
        )
        return outcomes

    async def redetect(self, team_id: str) -> ResolutionReport:
        """Re-read the team's bookings and report what still overlaps."""
        bookings = await self.stores.bookings.list_bookings(team_id)
        remaining = detect_overlaps(team_id, bookings)
        state = ResolutionState.RESOLVED if not remaining else ResolutionState.DETECTED
        if remaining:
            self.logger.warning(
                "overlap_resolution.unresolved",
                team_id=team_id,
                bookings=[b.id for b in remaining],
            )
        return ResolutionReport(team_id=team_id, remaining=remaining, state=state)

    async def resolve(
        self,
        team_id: str,
        editor: Editor,
        max_rounds: Optional[int] = None,
    ) -> ResolutionReport:
        """
        Loop detect -> propose -> edit -> commit until clear or out of rounds.

        Args:
            team_id: Team to clear
            editor: Receives the proposed candidates and returns them edited;
                returning None abandons the round without writing
            max_rounds: Commit rounds allowed; defaults to settings

        Returns:
            ResolutionReport with the final state and any remaining conflicts
        """
        if max_rounds is None:
            max_rounds = self.settings.MAX_RESOLUTION_ROUNDS
        session = ResolutionSession(team_id=team_id, max_rounds=max_rounds)
        outcomes: List[CommitOutcome] = []

        with log_context(team_id=team_id):
            report = await self.redetect(team_id)

            while True:
                if report.is_clear:
                    session.transition(ResolutionState.RESOLVED)
                    break
                if session.exhausted:
                    session.transition(ResolutionState.UNRESOLVED)
                    break

                proposed = self.propose_resolution(self.to_candidates(report.remaining))
                session.transition(ResolutionState.PROPOSED)

                edited = editor(proposed)
                if inspect.isawaitable(edited):
                    edited = await edited
                if edited is None:
                    session.transition(ResolutionState.UNRESOLVED)
                    break

                outcomes.extend(await self.commit_resolution(edited))
                session.transition(ResolutionState.COMMITTED)

                report = await self.redetect(team_id)
                if not report.is_clear:
                    session.transition(ResolutionState.DETECTED)

            self.logger.info(
                "overlap_resolution.finished",
                state=session.state.value,
                rounds=session.rounds,
            )

        return ResolutionReport(
            team_id=team_id,
            remaining=report.remaining,
            rounds=session.rounds,
            state=session.state,
            outcomes=outcomes,
        )
