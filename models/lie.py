from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from .base import ReadModel
from .shot import ResultZone, ShotCategory, normalize_lie


class LieDifficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    VERY_DIFFICULT = "very_difficult"


class LieConditions(BaseModel):
    recent_rain: bool = False
    windy: bool = False


class LieContext(BaseModel):
    """The shot just played, used to predict where the next one is played from."""
    category: ShotCategory
    club: Optional[str] = None
    result: Optional[ResultZone] = None
    start_lie: Optional[str] = None
    distance_to_pin: float = Field(0.0, ge=0)
    conditions: Optional[LieConditions] = None

    @field_validator('start_lie', mode='before')
    @classmethod
    def _normalize_lie(cls, v):
        return normalize_lie(v)

    @field_validator('result', mode='before')
    @classmethod
    def _parse_result(cls, v):
        return ResultZone.parse(v)


class LieProbability(ReadModel):
    lie: str
    probability: float


class LiePrediction(ReadModel):
    most_likely: str
    probability: float
    alternatives: List[LieProbability] = Field(default_factory=list)
    reasoning: List[str] = Field(default_factory=list)
    difficulty: LieDifficulty
    recommendations: List[str] = Field(default_factory=list)
    sample_size: int = 0  # matching historical shots blended in
    degraded: bool = False


class LiePerformance(ReadModel):
    success_rate: float
    typical_result: str
    common_mistakes: List[str] = Field(default_factory=list)
    sample_size: int = 0


class LieAdjustments(ReadModel):
    club_selection: str
    technique: List[str] = Field(default_factory=list)
    strategy: str


class LieAnalysis(ReadModel):
    lie: str
    expected_difficulty: int  # 1-10
    historical_performance: LiePerformance
    adjustments: LieAdjustments
    degraded: bool = False
