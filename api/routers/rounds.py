"""Round aggregate endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from typing import List
from uuid import UUID

from analytics import stats
from analytics.service import AnalyticsService
from api.dependencies import get_analytics, get_db
from api.schemas import RoundStatsResponse, RoundSummaryResponse, ShotDraftRequest
from database.db_manager import DatabaseManager
from database.exceptions import PersistenceError
from models import Round, RoundHole, Shot

router = APIRouter()


def summarize_round(r: Round) -> RoundSummaryResponse:
    """Project a full Round model into a lightweight summary."""
    return RoundSummaryResponse(
        id=r.id,
        started_at=r.started_at,
        status=r.status,
        holes_played=r.holes_played(),
        total_score=r.get_total_score(),
        par_total=r.par_total if r.par_total is not None else r.calculate_par_total(),
        to_par=r.score_to_par(),
        total_putts=r.get_total_putts(),
        total_gir=r.get_total_gir(),
        fairways_hit=r.get_fairways_hit(),
    )


@router.get("/user/{user_id}", response_model=List[RoundSummaryResponse])
async def get_rounds_for_user(
    user_id: UUID,
    limit: int = Query(20, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: DatabaseManager = Depends(get_db),
):
    rounds = await db.rounds.get_rounds_for_user(str(user_id), limit=limit, offset=offset)
    return [summarize_round(r) for r in rounds]


@router.get("/user/{user_id}/stats", response_model=RoundStatsResponse)
async def get_round_stats(
    user_id: UUID,
    limit: int = Query(20, ge=1, le=500),
    db: DatabaseManager = Depends(get_db),
):
    # Oldest first so trends read left to right
    rounds = list(reversed(await db.rounds.get_rounds_for_user(str(user_id), limit=limit)))
    return RoundStatsResponse(
        rounds=[summarize_round(r) for r in rounds],
        putts=stats.putts_per_round(rounds),
        gir=stats.gir_per_round(rounds),
        fir=stats.fir_per_round(rounds),
        scoring_by_par=stats.scoring_by_par(rounds),
        score_types=stats.score_type_distribution_per_round(rounds),
    )


@router.get("/{round_id}", response_model=Round)
async def get_round(round_id: UUID, db: DatabaseManager = Depends(get_db)):
    round_ = await db.rounds.get_round(str(round_id))
    if not round_:
        raise HTTPException(404, "Round not found")
    return round_


@router.post("/{round_id}/holes/{hole_number}/recompute", response_model=RoundHole)
async def recompute_hole(
    round_id: UUID,
    hole_number: int = Path(..., ge=1, le=18),
    service: AnalyticsService = Depends(get_analytics),
):
    """Re-derive one hole's aggregate from its shots, then the round totals."""
    try:
        hole = await service.recompute_hole_aggregate(str(round_id), hole_number)
    except PersistenceError as e:
        raise HTTPException(503, str(e))
    if hole is None:
        raise HTTPException(404, "Round not found")
    return hole


@router.post("/{round_id}/holes/{hole_number}/shots/draft", response_model=Shot)
async def draft_shot(
    req: ShotDraftRequest,
    round_id: UUID,
    hole_number: int = Path(..., ge=1, le=18),
):
    """Turn a parsed voice entry into an unsaved Shot for the player to confirm."""
    return req.intent.to_shot(
        round_id=str(round_id),
        hole_number=hole_number,
        shot_number=req.shot_number,
        category=req.category,
    )
