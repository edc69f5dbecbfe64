"""API-specific request and response models."""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID

from models import (
    ClubSuggestion,
    LieContext,
    PressureContext,
    ShotCategory,
    ShotIntent,
    SituationContext,
    SuggestionContext,
    WindAdjustment,
    WindConditions,
)


class RoundSummaryResponse(BaseModel):
    """Lightweight round for list views."""
    id: Optional[str] = None
    started_at: Optional[datetime] = None
    status: str
    holes_played: int
    total_score: Optional[int] = None
    par_total: Optional[int] = None
    to_par: Optional[int] = None
    total_putts: Optional[int] = None
    total_gir: Optional[int] = None
    fairways_hit: Optional[int] = None


class RoundStatsResponse(BaseModel):
    """Per-round and per-par scoring stats over a user's recent rounds."""
    rounds: List[RoundSummaryResponse]
    putts: List[dict]
    gir: List[dict]
    fir: List[dict]
    scoring_by_par: List[dict]
    score_types: List[dict]


class ClubSuggestionRequest(BaseModel):
    user_id: UUID
    context: SuggestionContext


class ClubSuggestionResponse(BaseModel):
    suggestions: List[ClubSuggestion]
    recommended_club: Optional[str] = None
    wind_adjustment: WindAdjustment


class WindAdjustmentRequest(BaseModel):
    wind: Optional[WindConditions] = None


class PressureAnalysisRequest(BaseModel):
    user_id: UUID
    context: PressureContext


class ShotDecisionRequest(BaseModel):
    user_id: UUID
    context: SituationContext


class LiePredictionRequest(BaseModel):
    user_id: UUID
    context: LieContext


class LieAnalysisRequest(BaseModel):
    user_id: UUID
    lie: Optional[str] = None


class ShotDraftRequest(BaseModel):
    """A parsed voice entry plus the slot the shot fills on the hole."""
    shot_number: int = Field(..., ge=1)
    category: ShotCategory
    intent: ShotIntent
