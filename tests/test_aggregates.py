import asyncio
from contextlib import asynccontextmanager

import pytest
from unittest.mock import AsyncMock, MagicMock

from analytics.aggregates import compute_hole_aggregate
from analytics.recompute import HoleAggregateRecomputer
from database.exceptions import NotFoundError, PersistenceError, UpstreamUnavailableError
from models import Round, RoundHole, Shot


def _shot(number, category, *, end_lie=None, penalty=None, holed=False):
    return Shot(
        round_id="r1",
        hole_number=1,
        shot_number=number,
        category=category,
        end_lie=end_lie,
        penalty_strokes=penalty,
        holed=holed,
    )


def _par_four_hole():
    return [
        _shot(1, "tee", end_lie="Fairway"),
        _shot(2, "approach", end_lie="Green"),
        _shot(3, "putt", end_lie="green"),
        _shot(4, "putt", holed=True),
    ]


# ================================================================
# compute_hole_aggregate
# ================================================================

def test_regulation_par_four():
    hole = compute_hole_aggregate(_par_four_hole(), 4, round_id="r1", hole_number=1)
    assert hole.gross_score == 4
    assert hole.putts == 2
    assert hole.penalties == 0
    assert hole.fir is True
    assert hole.gir is True


def test_penalties_add_to_gross_score():
    shots = [
        _shot(1, "tee", end_lie="water", penalty=1),
        _shot(2, "tee", end_lie="fairway"),
        _shot(3, "approach", end_lie="green"),
        _shot(4, "putt", holed=True),
    ]
    hole = compute_hole_aggregate(shots, 4, hole_number=1)
    assert hole.penalties == 1
    assert hole.gross_score == 5
    assert hole.fir is False


def test_par_three_never_records_fir():
    shots = [_shot(1, "tee", end_lie="fairway"), _shot(2, "around_green", end_lie="green")]
    hole = compute_hole_aggregate(shots, 3, hole_number=1)
    assert hole.fir is False
    assert hole.gir is False


def test_par_five_tee_shot_in_rough_misses_fairway():
    shots = [
        _shot(1, "tee", end_lie="Rough"),
        _shot(2, "approach", end_lie="fairway"),
        _shot(3, "approach", end_lie="green"),
        _shot(4, "putt", end_lie="green"),
        _shot(5, "putt", holed=True),
    ]
    hole = compute_hole_aggregate(shots, 5, hole_number=1)
    assert hole.fir is False
    assert hole.gir is True
    assert hole.gross_score == 5


def test_par_three_gir_needs_green_off_the_tee():
    shots = [_shot(1, "tee", end_lie="green"), _shot(2, "putt", holed=True)]
    hole = compute_hole_aggregate(shots, 3, hole_number=1)
    assert hole.gir is True


def test_green_reached_late_is_not_gir():
    shots = [
        _shot(1, "tee", end_lie="rough"),
        _shot(2, "approach", end_lie="fringe"),
        _shot(3, "around_green", end_lie="green"),
        _shot(4, "putt", holed=True),
    ]
    hole = compute_hole_aggregate(shots, 4, hole_number=1)
    assert hole.gir is False


def test_empty_hole_has_no_score():
    hole = compute_hole_aggregate([], 5, hole_number=3)
    assert hole.gross_score is None
    assert hole.putts == 0
    assert hole.penalties == 0
    assert hole.fir is False
    assert hole.gir is False
    assert hole.par == 5


def test_gross_score_uses_highest_shot_number():
    shots = [_shot(3, "putt", holed=True), _shot(1, "tee", end_lie="fairway")]
    assert compute_hole_aggregate(shots, 4, hole_number=1).gross_score == 3


def test_recompute_is_idempotent():
    shots = _par_four_hole()
    first = compute_hole_aggregate(shots, 4, round_id="r1", hole_number=1)
    second = compute_hole_aggregate(shots, 4, round_id="r1", hole_number=1)
    assert first == second


# ================================================================
# HoleAggregateRecomputer
# ================================================================

@pytest.fixture
def collaborators():
    shots = AsyncMock()
    store = AsyncMock()
    store.hole_lock = MagicMock()
    courses = AsyncMock()

    shots.fetch_for_hole.return_value = _par_four_hole()
    store.get_round.return_value = Round(id="r1", course_id="c1")
    store.ensure_hole.side_effect = lambda round_id, hole_number, par: RoundHole(
        id="h1", round_id=round_id, hole_number=hole_number, par=par
    )
    store.upsert_hole.side_effect = lambda hole: hole
    store.upsert_round_totals.return_value = Round(id="r1")
    courses.get_hole_par.return_value = 4
    return shots, store, courses


@pytest.mark.asyncio
async def test_recompute_seeds_missing_hole_with_course_par(collaborators):
    shots, store, courses = collaborators
    courses.get_hole_par.return_value = 5
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    hole = await recomputer.recompute_hole_aggregate("r1", 1)

    store.ensure_hole.assert_awaited_once_with("r1", 1, 5)
    assert hole.id == "h1"
    assert hole.par == 5
    assert hole.gross_score == 4
    # Shot 2 is still within par - 2 on a par 5
    assert hole.gir is True
    store.upsert_round_totals.assert_awaited_once_with("r1")


@pytest.mark.asyncio
async def test_recompute_keeps_existing_hole_par(collaborators):
    shots, store, courses = collaborators
    store.get_round.return_value = Round(
        id="r1", holes=[RoundHole(id="h9", round_id="r1", hole_number=1, par=3)]
    )
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    hole = await recomputer.recompute_hole_aggregate("r1", 1)

    store.ensure_hole.assert_not_awaited()
    courses.get_hole_par.assert_not_awaited()
    assert hole.par == 3
    assert hole.id == "h9"


@pytest.mark.asyncio
async def test_recompute_missing_round_is_a_noop(collaborators):
    shots, store, courses = collaborators
    store.get_round.return_value = None
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    assert await recomputer.recompute_hole_aggregate("missing", 1) is None
    store.upsert_hole.assert_not_awaited()
    store.upsert_round_totals.assert_not_awaited()


@pytest.mark.asyncio
async def test_recompute_round_deleted_midway_returns_none(collaborators):
    shots, store, courses = collaborators
    store.upsert_round_totals.side_effect = NotFoundError("gone")
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    assert await recomputer.recompute_hole_aggregate("r1", 1) is None


@pytest.mark.asyncio
async def test_par_lookup_failure_defaults_to_par_four(collaborators):
    shots, store, courses = collaborators
    courses.get_hole_par.side_effect = UpstreamUnavailableError("courses down")
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    hole = await recomputer.recompute_hole_aggregate("r1", 1)

    store.ensure_hole.assert_awaited_once_with("r1", 1, 4)
    assert hole.par == 4


@pytest.mark.asyncio
async def test_unknown_course_defaults_to_par_four(collaborators):
    shots, store, _ = collaborators
    recomputer = HoleAggregateRecomputer(shots, store)

    hole = await recomputer.recompute_hole_aggregate("r1", 1)

    store.ensure_hole.assert_awaited_once_with("r1", 1, 4)
    assert hole.par == 4


@pytest.mark.asyncio
async def test_hole_with_no_shots_clears_aggregate(collaborators):
    shots, store, courses = collaborators
    shots.fetch_for_hole.return_value = []
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    hole = await recomputer.recompute_hole_aggregate("r1", 1)

    assert hole.gross_score is None
    assert hole.putts == 0
    store.upsert_round_totals.assert_awaited_once_with("r1")


@pytest.mark.asyncio
async def test_persistence_errors_propagate(collaborators):
    shots, store, courses = collaborators
    store.upsert_hole.side_effect = PersistenceError("write failed")
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    with pytest.raises(PersistenceError):
        await recomputer.recompute_hole_aggregate("r1", 1)
    store.upsert_round_totals.assert_not_awaited()


def _tracking_fetch():
    state = {"active": 0, "peak": 0}

    async def fetch(round_id, hole_number):
        state["active"] += 1
        state["peak"] = max(state["peak"], state["active"])
        await asyncio.sleep(0)
        state["active"] -= 1
        return []

    return fetch, state


@pytest.mark.asyncio
async def test_same_hole_recomputes_are_serialized(collaborators):
    shots, store, courses = collaborators
    store.get_round.return_value = Round(
        id="r1", holes=[RoundHole(round_id="r1", hole_number=1, par=4)]
    )
    fetch, state = _tracking_fetch()
    shots.fetch_for_hole.side_effect = fetch
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    await asyncio.gather(
        recomputer.recompute_hole_aggregate("r1", 1),
        recomputer.recompute_hole_aggregate("r1", 1),
    )

    assert state["peak"] == 1
    assert store.upsert_round_totals.await_count == 2


@pytest.mark.asyncio
async def test_different_holes_recompute_concurrently(collaborators):
    shots, store, courses = collaborators
    store.get_round.return_value = Round(
        id="r1",
        holes=[
            RoundHole(round_id="r1", hole_number=1, par=4),
            RoundHole(round_id="r1", hole_number=2, par=3),
        ],
    )
    fetch, state = _tracking_fetch()
    shots.fetch_for_hole.side_effect = fetch
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    results = await asyncio.gather(
        recomputer.recompute_hole_aggregate("r1", 1),
        recomputer.recompute_hole_aggregate("r1", 2),
    )

    assert state["peak"] == 2
    assert [h.hole_number for h in results] == [1, 2]


@pytest.mark.asyncio
async def test_store_lock_spans_read_and_write(collaborators):
    shots, store, courses = collaborators
    events = []

    @asynccontextmanager
    async def hole_lock(round_id, hole_number):
        events.append(("lock", round_id, hole_number))
        yield
        events.append(("unlock", round_id, hole_number))

    async def fetch(round_id, hole_number):
        events.append(("read", round_id, hole_number))
        return _par_four_hole()

    async def upsert(hole):
        events.append(("write", hole.round_id, hole.hole_number))
        return hole

    async def totals(round_id):
        events.append(("totals", round_id))
        return Round(id=round_id)

    store.hole_lock = hole_lock
    store.upsert_hole.side_effect = upsert
    store.upsert_round_totals.side_effect = totals
    shots.fetch_for_hole.side_effect = fetch
    recomputer = HoleAggregateRecomputer(shots, store, courses)

    await recomputer.recompute_hole_aggregate("r1", 2)

    assert events == [
        ("lock", "r1", 2),
        ("read", "r1", 2),
        ("write", "r1", 2),
        ("unlock", "r1", 2),
        ("totals", "r1"),
    ]
