import asyncpg
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from config import Settings
from database.converters import (
    round_from_rows,
    round_hole_from_row,
    round_hole_to_row,
    shot_from_row,
)
from database.connection import DatabasePool
from database.exceptions import NotFoundError, PersistenceError, UpstreamUnavailableError
from database.repositories.course_repo import CourseReferenceDB
from database.repositories.round_repo import RoundRepositoryDB
from database.repositories.shot_repo import ShotRepositoryDB
from models import ResultZone, RoundHole, ShotCategory
from models.shot import LateralMiss


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


def _with_transaction(conn):
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__.return_value = AsyncMock()


def _shot_row(*, round_id=None, hole_number=1, shot_number=1, **overrides):
    """Helper: minimal shots row dict."""
    row = {
        "id": uuid4(),
        "round_id": round_id or uuid4(),
        "hole_number": hole_number,
        "shot_number": shot_number,
        "shot_category": "approach",
        "club": "7 Iron",
        "start_lie": "Fairway",
        "start_distance_to_hole": 155,
        "end_lie": "Green",
        "end_distance_to_hole": 12,
        "result_zone": "good",
        "penalty_strokes": None,
        "holed": None,
        "shot_shape": None,
        "trajectory": None,
        "contact_quality": None,
        "distance_error": None,
        "lateral_error": "Right",
        "created_at": datetime(2025, 4, 2, 9, 15, tzinfo=timezone.utc),
    }
    row.update(overrides)
    return row


def _round_row(round_id, **overrides):
    """Helper: minimal rounds row dict."""
    row = {
        "id": round_id,
        "user_id": uuid4(),
        "course_id": None,
        "started_at": None,
        "status": "in_progress",
        "total_score": None,
        "par_total": None,
    }
    row.update(overrides)
    return row


def _hole_row(round_id, *, hole_number=1, par=4, gross_score=None, putts=None,
              penalties=None, fir=None, gir=None):
    """Helper: minimal round_holes row dict."""
    return {
        "id": uuid4(),
        "round_id": round_id,
        "hole_number": hole_number,
        "par": par,
        "gross_score": gross_score,
        "putts": putts,
        "penalties": penalties,
        "fir": fir,
        "gir": gir,
    }


# ================================================================
# converters.py: pure function tests (no mocks needed)
# ================================================================

def test_shot_converter_normalizes_labels():
    """shot_from_row normalizes lies and result labels from stored text."""
    row = _shot_row()
    shot = shot_from_row(row)

    assert shot.id == str(row["id"])
    assert shot.round_id == str(row["round_id"])
    assert shot.category == ShotCategory.APPROACH
    assert shot.start_lie == "fairway"
    assert shot.end_lie == "green"
    assert shot.result_zone == ResultZone.GOOD
    assert shot.lateral_error == LateralMiss.RIGHT
    assert shot.holed is False


def test_shot_converter_holed_putt():
    row = _shot_row(shot_category="putt", club="Putter", start_distance_to_hole=8,
                    end_distance_to_hole=None, holed=True)
    shot = shot_from_row(row)
    assert shot.holed is True
    assert shot.end_distance_to_hole == 0


def test_round_hole_converter_null_counts():
    """round_hole_from_row reads NULL putts/penalties as 0 and NULL flags as False."""
    rid = uuid4()
    hole = round_hole_from_row(_hole_row(rid, par=5))

    assert hole.round_id == str(rid)
    assert hole.par == 5
    assert hole.gross_score is None
    assert hole.putts == 0
    assert hole.penalties == 0
    assert hole.fir is False
    assert hole.gir is False


def test_round_converter_holes_sorted():
    """round_from_rows sorts holes by hole_number."""
    rid = uuid4()
    hole_rows = [
        _hole_row(rid, hole_number=3, gross_score=4),
        _hole_row(rid, hole_number=1, gross_score=5),
        _hole_row(rid, hole_number=2, par=3, gross_score=3),
    ]
    r = round_from_rows(_round_row(rid, status=None), hole_rows)

    assert r.id == str(rid)
    assert r.status == "in_progress"
    assert [h.hole_number for h in r.holes] == [1, 2, 3]
    assert r.calculate_total_score() == 12


def test_round_hole_to_row_only_derived_columns():
    hole = RoundHole(round_id="r1", hole_number=4, par=3, gross_score=3, putts=1, gir=True)
    row = round_hole_to_row(hole)
    assert row == {"gross_score": 3, "putts": 1, "penalties": 0, "fir": False, "gir": True}


# ================================================================
# ShotRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_shot_repo_fetch_for_hole(mock_pool):
    pool, conn = mock_pool
    repo = ShotRepositoryDB(pool, settings=Settings())

    round_id = uuid4()
    conn.fetch.return_value = [
        _shot_row(round_id=round_id, shot_number=1, shot_category="tee"),
        _shot_row(round_id=round_id, shot_number=2),
    ]

    shots = await repo.fetch_for_hole(str(round_id), 1)
    assert [s.shot_number for s in shots] == [1, 2]
    sql, *args = conn.fetch.call_args[0]
    assert "ORDER BY shot_number" in sql
    assert args == [round_id, 1]


@pytest.mark.asyncio
async def test_shot_repo_history_is_bounded(mock_pool):
    """fetch_historical passes the round count, cutoff and row cap."""
    pool, conn = mock_pool
    repo = ShotRepositoryDB(pool, settings=Settings(history_row_cap=1000))
    conn.fetch.return_value = [_shot_row()]

    user_id = uuid4()
    since = datetime(2025, 1, 1, tzinfo=timezone.utc)
    shots = await repo.fetch_historical(str(user_id), 3, since)

    assert len(shots) == 1
    sql, *args = conn.fetch.call_args[0]
    assert "LIMIT $4" in sql
    assert args == [user_id, 3, since, 300]


@pytest.mark.asyncio
async def test_shot_repo_history_respects_row_cap(mock_pool):
    pool, conn = mock_pool
    repo = ShotRepositoryDB(pool, settings=Settings(history_row_cap=250))
    conn.fetch.return_value = []

    await repo.fetch_historical(str(uuid4()), 10)
    assert conn.fetch.call_args[0][-1] == 250


@pytest.mark.asyncio
async def test_shot_repo_history_unreachable(mock_pool):
    pool, conn = mock_pool
    repo = ShotRepositoryDB(pool, settings=Settings())
    conn.fetch.side_effect = OSError("connection refused")

    with pytest.raises(UpstreamUnavailableError):
        await repo.fetch_historical(str(uuid4()), 5)


# ================================================================
# RoundRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_round_repo_get_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    round_id = uuid4()
    conn.fetchrow.return_value = _round_row(round_id, total_score=9, par_total=8)
    conn.fetch.return_value = [
        _hole_row(round_id, gross_score=5),
        _hole_row(round_id, hole_number=2, gross_score=4),
    ]

    r = await repo.get_round(str(round_id))
    assert r is not None
    assert r.total_score == 9
    assert len(r.holes) == 2


@pytest.mark.asyncio
async def test_round_repo_get_round_not_found(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetchrow.return_value = None

    assert await repo.get_round(str(uuid4())) is None
    conn.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_round_repo_ensure_hole_keeps_existing_row(mock_pool):
    """ensure_hole inserts with ON CONFLICT DO NOTHING and returns the stored row."""
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    round_id = uuid4()
    conn.fetchrow.return_value = _hole_row(round_id, hole_number=7, par=3)

    hole = await repo.ensure_hole(str(round_id), 7, 4)

    sql = conn.execute.call_args[0][0]
    assert "ON CONFLICT (round_id, hole_number) DO NOTHING" in sql
    assert hole.par == 3


@pytest.mark.asyncio
async def test_round_repo_hole_lock_holds_advisory_lock(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    _with_transaction(conn)
    round_id = str(uuid4())

    async with repo.hole_lock(round_id, 2):
        lock_sql, lock_key, lock_hole = conn.execute.call_args[0]
        assert "pg_advisory_xact_lock" in lock_sql
        assert (lock_key, lock_hole) == (round_id, 2)
        conn.transaction.return_value.__aexit__.assert_not_awaited()

    conn.transaction.return_value.__aexit__.assert_awaited_once()


@pytest.mark.asyncio
async def test_round_repo_hole_lock_failure(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    _with_transaction(conn)
    conn.execute.side_effect = asyncpg.PostgresError("lock timeout")

    with pytest.raises(PersistenceError):
        async with repo.hole_lock(str(uuid4()), 1):
            pass


@pytest.mark.asyncio
async def test_round_repo_upsert_hole(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    round_id = uuid4()
    conn.fetchrow.return_value = _hole_row(round_id, hole_number=2, gross_score=4, putts=2,
                                           penalties=0, fir=True, gir=True)

    hole = RoundHole(round_id=str(round_id), hole_number=2, par=4, gross_score=4,
                     putts=2, fir=True, gir=True)
    saved = await repo.upsert_hole(hole)

    assert conn.fetchrow.call_args[0][1:3] == (round_id, 2)
    update_sql = conn.fetchrow.call_args[0][0]
    assert "par =" not in update_sql
    assert saved.gross_score == 4
    assert saved.fir is True


@pytest.mark.asyncio
async def test_round_repo_upsert_hole_missing_row(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    _with_transaction(conn)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.upsert_hole(RoundHole(round_id=str(uuid4()), hole_number=1))


@pytest.mark.asyncio
async def test_round_repo_upsert_round_totals(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    _with_transaction(conn)

    round_id = uuid4()
    conn.fetchrow.side_effect = [
        {"id": round_id},                                       # FOR UPDATE
        _round_row(round_id, total_score=9, par_total=7),        # UPDATE ... RETURNING
    ]
    conn.fetch.return_value = [
        _hole_row(round_id, hole_number=1, par=4, gross_score=5),
        _hole_row(round_id, hole_number=2, par=3, gross_score=4),
    ]

    r = await repo.upsert_round_totals(str(round_id))

    lock_sql = conn.fetchrow.call_args_list[0][0][0]
    assert "FOR UPDATE" in lock_sql
    update_sql = conn.fetchrow.call_args_list[1][0][0]
    assert "COALESCE(SUM(gross_score), 0)" in update_sql
    assert r.total_score == 9
    assert r.par_total == 7
    assert r.calculate_par_total() == 7


@pytest.mark.asyncio
async def test_round_repo_upsert_round_totals_missing_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    _with_transaction(conn)
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await repo.upsert_round_totals(str(uuid4()))


@pytest.mark.asyncio
async def test_round_repo_recent_totals(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetch.return_value = [{"total_score": 84}, {"total_score": 88}]

    assert await repo.recent_totals(str(uuid4()), 20) == [84, 88]
    sql = conn.fetch.call_args[0][0]
    assert "status = 'completed'" in sql


@pytest.mark.asyncio
async def test_round_repo_recent_totals_without_user(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    assert await repo.recent_totals(None, 20) == []
    conn.fetch.assert_not_called()


@pytest.mark.asyncio
async def test_round_repo_recent_totals_unreachable(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)
    conn.fetch.side_effect = OSError("timeout")

    with pytest.raises(UpstreamUnavailableError):
        await repo.recent_totals(str(uuid4()), 20)


# ================================================================
# CourseReferenceDB
# ================================================================

@pytest.mark.asyncio
async def test_course_reference_hole_par(mock_pool):
    pool, conn = mock_pool
    repo = CourseReferenceDB(pool)
    conn.fetchval.return_value = 5

    course_id = uuid4()
    assert await repo.get_hole_par(str(course_id), 9) == 5
    assert conn.fetchval.call_args[0][1:] == (course_id, 9)


@pytest.mark.asyncio
async def test_course_reference_without_course(mock_pool):
    pool, conn = mock_pool
    repo = CourseReferenceDB(pool)

    assert await repo.get_hole_par(None, 9) is None
    conn.fetchval.assert_not_called()


@pytest.mark.asyncio
async def test_course_reference_unreachable(mock_pool):
    pool, conn = mock_pool
    repo = CourseReferenceDB(pool)
    conn.fetchval.side_effect = OSError("connection reset")

    with pytest.raises(UpstreamUnavailableError):
        await repo.get_hole_par(str(uuid4()), 1)


# ================================================================
# DatabasePool
# ================================================================

@pytest.mark.asyncio
async def test_health_check_without_pool():
    pool = DatabasePool()
    assert pool.is_initialized is False
    assert await pool.health_check() is False
    with pytest.raises(RuntimeError):
        pool.pool


@pytest.mark.asyncio
async def test_health_check_reports_connection_errors(mock_pool):
    raw_pool, conn = mock_pool
    pool = DatabasePool()
    pool._pool = raw_pool

    conn.fetchval.return_value = 1
    assert await pool.health_check() is True

    conn.fetchval.side_effect = OSError("connection refused")
    assert await pool.health_check() is False
