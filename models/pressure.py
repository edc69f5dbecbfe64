from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from .base import ReadModel
from .shot import ShotCategory, normalize_lie


class PressureType(str, Enum):
    SCORING_OPPORTUNITY = "scoring_opportunity"
    TROUBLE_RECOVERY = "trouble_recovery"
    CLOSING_HOLE = "closing_hole"
    COMPETITIVE_MOMENT = "competitive_moment"
    STREAK_SITUATION = "streak_situation"


class PressureIntensity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


# Older clients send these names for the putt and around-green categories.
_CATEGORY_ALIASES = {
    "putting": ShotCategory.PUTT.value,
    "short_game": ShotCategory.AROUND_GREEN.value,
}


class RecentResult(BaseModel):
    result: str
    category: Optional[str] = None


class PressureContext(BaseModel):
    """The shot about to be played, as seen by the pressure classifier."""
    category: ShotCategory
    lie: Optional[str] = None
    distance_to_pin: float = Field(..., ge=0)
    hole_number: int = Field(..., ge=1, le=18)
    shot_number: int = Field(1, ge=1)
    round_score: Optional[int] = Field(None, ge=0)
    par_value: int = Field(4, ge=3, le=6)
    previous_shots: List[RecentResult] = Field(default_factory=list)

    @field_validator('category', mode='before')
    @classmethod
    def _alias_category(cls, v):
        if isinstance(v, str):
            return _CATEGORY_ALIASES.get(v.strip().lower(), v)
        return v

    @field_validator('lie', mode='before')
    @classmethod
    def _normalize_lie(cls, v):
        return normalize_lie(v)


class PressureFactor(ReadModel):
    factor: str
    weight: int = Field(..., ge=1, le=10)
    description: str


class PressurePerformance(ReadModel):
    """How the player has historically fared in matching situations."""
    success_rate: float
    compared_to_normal: int  # percent difference vs. category baseline
    common_reactions: List[str] = Field(default_factory=list)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    improvement_trend: bool = False
    sample_size: int = 0


class PressureSituation(ReadModel):
    type: PressureType
    intensity: PressureIntensity
    description: str
    factors: List[PressureFactor] = Field(default_factory=list)
    mental_approach: List[str] = Field(default_factory=list)
    historical_performance: Optional[PressurePerformance] = None


class PressureAnalysis(ReadModel):
    current_situation: PressureSituation
    recommended_mindset: List[str] = Field(default_factory=list)
    technical_adjustments: List[str] = Field(default_factory=list)
    strategy_recommendations: List[str] = Field(default_factory=list)
    confidence_booster: str
    degraded: bool = False
