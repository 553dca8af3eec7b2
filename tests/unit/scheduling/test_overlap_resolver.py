"""
Tests for the Overlap Resolver.

Tests cover:
- Candidate annotation and proposal copies
- Commit validation and per-item outcomes
- Re-detection after commit
- The resolve() loop and its state machine
"""

from datetime import date

import pytest

from crewplan.scheduling.errors import InvalidTransitionError, ValidationError
from crewplan.scheduling.memory import in_memory_stores
from crewplan.scheduling.overlap_detector import OverlapDetector
from crewplan.scheduling.overlap_resolver import (
    OverlapResolver,
    ResolutionSession,
    ResolutionState,
)


@pytest.fixture
def blue_stores(team_blue, booking_factory):
    return in_memory_stores(
        teams=[team_blue],
        bookings=[
            booking_factory("P1", "team_blue", date(2026, 1, 1), 5),
            booking_factory("P2", "team_blue", date(2026, 1, 3), 6),
        ],
    )


@pytest.fixture
def resolver(blue_stores):
    return OverlapResolver(blue_stores)


async def _proposal(resolver, stores):
    conflicting = await OverlapDetector(stores).detect("team_blue")
    return resolver.propose_resolution(resolver.to_candidates(conflicting))


class TestProposal:

    @pytest.mark.asyncio
    async def test_candidates_carry_range_and_default_hours(self, resolver, blue_stores):
        candidates = await _proposal(resolver, blue_stores)

        assert [c.booking_id for c in candidates] == ["P1", "P2"]
        p2 = candidates[1]
        assert (p2.start_date, p2.end_date) == (date(2026, 1, 3), date(2026, 1, 8))
        assert (p2.start_hour, p2.end_hour) == (8, 17)
        assert p2.overlaps_with == ["P1"]

    @pytest.mark.asyncio
    async def test_proposal_is_a_copy(self, resolver, blue_stores):
        originals = resolver.to_candidates(await OverlapDetector(blue_stores).detect("team_blue"))
        proposed = resolver.propose_resolution(originals)

        proposed[0].start_date = date(2026, 2, 1)
        proposed[0].overlaps_with.append("X")

        assert originals[0].start_date == date(2026, 1, 1)
        assert originals[0].overlaps_with == ["P2"]

    @pytest.mark.asyncio
    async def test_preview_overlaps(self, resolver, blue_stores):
        candidates = await _proposal(resolver, blue_stores)
        assert resolver.preview_overlaps(candidates) == {"P1": ["P2"], "P2": ["P1"]}

        candidates[1].start_date = date(2026, 1, 6)
        assert resolver.preview_overlaps(candidates) == {}


class TestCommit:

    @pytest.mark.asyncio
    async def test_moving_booking_clears_overlap(self, resolver, blue_stores):
        candidates = await _proposal(resolver, blue_stores)
        candidates[1].start_date = date(2026, 1, 6)
        candidates[1].end_date = date(2026, 1, 11)

        outcomes = await resolver.commit_resolution(candidates)

        assert all(o.success for o in outcomes)
        moved = await blue_stores.bookings.get_booking("P2")
        assert moved.start_date == date(2026, 1, 6)
        assert moved.duration_days == 6
        assert (moved.start_hour, moved.end_hour) == (8, 17)

        assert await OverlapDetector(blue_stores).detect("team_blue") == []
        report = await resolver.redetect("team_blue")
        assert report.is_clear
        assert report.state is ResolutionState.RESOLVED

    @pytest.mark.asyncio
    async def test_residual_overlap_is_reported(self, resolver, blue_stores):
        candidates = await _proposal(resolver, blue_stores)
        candidates[1].start_date = date(2026, 1, 5)

        await resolver.commit_resolution(candidates)
        report = await resolver.redetect("team_blue")

        assert not report.is_clear
        assert [b.id for b in report.remaining] == ["P1", "P2"]
        assert report.state is ResolutionState.DETECTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value", [
        ("start_hour", 24),
        ("end_hour", -1),
        ("end_date", date(2025, 12, 31)),
    ])
    async def test_invalid_candidate_aborts_before_writing(self, resolver, blue_stores, field, value):
        candidates = await _proposal(resolver, blue_stores)
        candidates[0].start_date = date(2026, 1, 20)
        candidates[0].end_date = date(2026, 1, 21)
        setattr(candidates[1], field, value)

        with pytest.raises(ValidationError):
            await resolver.commit_resolution(candidates)

        untouched = await blue_stores.bookings.get_booking("P1")
        assert untouched.start_date == date(2026, 1, 1)

    @pytest.mark.asyncio
    async def test_same_day_end_before_start_hour_rejected(self, resolver, blue_stores):
        candidates = await _proposal(resolver, blue_stores)
        candidates[1].end_date = candidates[1].start_date
        candidates[1].start_hour, candidates[1].end_hour = 14, 9

        with pytest.raises(ValidationError):
            await resolver.commit_resolution(candidates)

    @pytest.mark.asyncio
    async def test_store_failure_reported_per_item(self, resolver, blue_stores, booking_factory):
        candidates = await _proposal(resolver, blue_stores)
        del blue_stores.bookings.bookings["P1"]

        outcomes = await resolver.commit_resolution(candidates)

        assert [(o.booking_id, o.success) for o in outcomes] == [("P1", False), ("P2", True)]
        assert "not found" in outcomes[0].reason


class TestResolveLoop:

    @pytest.mark.asyncio
    async def test_editor_clears_conflict_in_one_round(self, resolver):
        def editor(candidates):
            for c in candidates:
                if c.booking_id == "P2":
                    c.start_date = date(2026, 1, 6)
                    c.end_date = date(2026, 1, 11)
            return candidates

        report = await resolver.resolve("team_blue", editor)

        assert report.state is ResolutionState.RESOLVED
        assert report.rounds == 1
        assert report.remaining == []
        assert len(report.outcomes) == 2

    @pytest.mark.asyncio
    async def test_async_editor(self, resolver):
        async def editor(candidates):
            candidates[0].end_date = date(2026, 1, 2)
            return candidates

        report = await resolver.run("team_blue", editor)

        assert report.state is ResolutionState.RESOLVED

    @pytest.mark.asyncio
    async def test_round_cap(self, resolver):
        calls = []

        def stubborn(candidates):
            calls.append(len(candidates))
            return candidates

        report = await resolver.resolve("team_blue", stubborn, max_rounds=3)

        assert report.state is ResolutionState.UNRESOLVED
        assert report.rounds == 3
        assert len(calls) == 3
        assert [b.id for b in report.remaining] == ["P1", "P2"]

    @pytest.mark.asyncio
    async def test_abandoned_round_writes_nothing(self, resolver, blue_stores):
        report = await resolver.resolve("team_blue", lambda candidates: None)

        assert report.state is ResolutionState.UNRESOLVED
        assert report.rounds == 0
        assert (await blue_stores.bookings.get_booking("P2")).start_date == date(2026, 1, 3)

    @pytest.mark.asyncio
    async def test_already_clear(self, team_blue, booking_factory):
        stores = in_memory_stores(teams=[team_blue], bookings=[booking_factory("P1", "team_blue", date(2026, 1, 1), 5)])

        report = await OverlapResolver(stores).resolve("team_blue", lambda c: pytest.fail("editor called"))

        assert report.state is ResolutionState.RESOLVED
        assert report.rounds == 0


def test_session_transitions():
    session = ResolutionSession(team_id="team_blue", max_rounds=2)

    session.transition(ResolutionState.PROPOSED)
    session.transition(ResolutionState.COMMITTED)
    session.transition(ResolutionState.DETECTED)

    assert session.rounds == 1
    assert not session.finished

    with pytest.raises(InvalidTransitionError):
        session.transition(ResolutionState.COMMITTED)

    session.transition(ResolutionState.PROPOSED)
    session.transition(ResolutionState.COMMITTED)
    session.transition(ResolutionState.RESOLVED)

    assert session.finished
    assert session.exhausted
    with pytest.raises(InvalidTransitionError):
        session.transition(ResolutionState.DETECTED)
