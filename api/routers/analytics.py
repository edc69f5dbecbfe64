"""Shot history analytics endpoints."""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from uuid import UUID

from analytics.service import AnalyticsService
from api.dependencies import get_analytics
from models import (
    ClubPerformanceStat,
    HeatMapPoint,
    PerformanceInsight,
    ShotPatternAnalysis,
    TendencyInsight,
)

router = APIRouter()

RoundLimit = Query(None, ge=1, le=100)


@router.get("/{user_id}/clubs", response_model=List[ClubPerformanceStat])
async def get_club_performance(
    user_id: UUID,
    rounds: Optional[int] = RoundLimit,
    service: AnalyticsService = Depends(get_analytics),
):
    return await service.get_club_performance(str(user_id), rounds)


@router.get("/{user_id}/tendencies", response_model=List[TendencyInsight])
async def get_tendencies(
    user_id: UUID,
    rounds: Optional[int] = RoundLimit,
    service: AnalyticsService = Depends(get_analytics),
):
    return await service.get_tendencies(str(user_id), rounds)


@router.get("/{user_id}/heat-map", response_model=List[HeatMapPoint])
async def get_heat_map(
    user_id: UUID,
    rounds: Optional[int] = RoundLimit,
    service: AnalyticsService = Depends(get_analytics),
):
    return await service.get_heat_map(str(user_id), rounds)


@router.get("/{user_id}/patterns", response_model=ShotPatternAnalysis)
async def get_shot_analysis(
    user_id: UUID,
    rounds: Optional[int] = RoundLimit,
    service: AnalyticsService = Depends(get_analytics),
):
    """Heat map, tendencies, club stats and summary in one response."""
    return await service.get_shot_analysis(str(user_id), rounds)


@router.get("/{user_id}/insights", response_model=List[PerformanceInsight])
async def get_performance_insights(
    user_id: UUID,
    service: AnalyticsService = Depends(get_analytics),
):
    return await service.get_performance_insights(str(user_id))
