"""In-round recommendation endpoints."""

from fastapi import APIRouter, Depends

from analytics.service import AnalyticsService
from api.dependencies import get_analytics
from api.schemas import (
    ClubSuggestionRequest,
    ClubSuggestionResponse,
    LieAnalysisRequest,
    LiePredictionRequest,
    PressureAnalysisRequest,
    ShotDecisionRequest,
    WindAdjustmentRequest,
)
from models import LieAnalysis, LiePrediction, PressureAnalysis, ShotDecision, WindAdjustment

router = APIRouter()


@router.post("/club-suggestions", response_model=ClubSuggestionResponse)
async def get_club_suggestions(
    req: ClubSuggestionRequest,
    service: AnalyticsService = Depends(get_analytics),
):
    suggestions = await service.get_club_suggestions(str(req.user_id), req.context)
    return ClubSuggestionResponse(
        suggestions=suggestions,
        recommended_club=suggestions[0].club if suggestions else None,
        wind_adjustment=service.get_wind_adjustment(req.context.wind),
    )


@router.post("/wind-adjustment", response_model=WindAdjustment)
async def get_wind_adjustment(
    req: WindAdjustmentRequest,
    service: AnalyticsService = Depends(get_analytics),
):
    return service.get_wind_adjustment(req.wind)


@router.post("/pressure", response_model=PressureAnalysis)
async def get_pressure_analysis(
    req: PressureAnalysisRequest,
    service: AnalyticsService = Depends(get_analytics),
):
    return await service.get_pressure_analysis(str(req.user_id), req.context)


@router.post("/decision", response_model=ShotDecision)
async def get_shot_decision(
    req: ShotDecisionRequest,
    service: AnalyticsService = Depends(get_analytics),
):
    return await service.get_shot_decision(str(req.user_id), req.context)


@router.post("/lie-prediction", response_model=LiePrediction)
async def get_lie_prediction(
    req: LiePredictionRequest,
    service: AnalyticsService = Depends(get_analytics),
):
    """Where the next shot is likely to be played from."""
    return await service.get_lie_prediction(str(req.user_id), req.context)


@router.post("/lie-analysis", response_model=LieAnalysis)
async def get_lie_analysis(
    req: LieAnalysisRequest,
    service: AnalyticsService = Depends(get_analytics),
):
    return await service.get_lie_analysis(str(req.user_id), req.lie)
