from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional

from .base import ReadModel
from .shot import normalize_lie


class Strategy(str, Enum):
    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    LAYUP = "layup"
    TARGET_SPECIFIC = "target_specific"


class PressureLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Hazards(BaseModel):
    water: bool = False
    bunkers: bool = False
    ob: bool = False
    rough: bool = False


class Weather(BaseModel):
    wind_speed: float = Field(0.0, ge=0)  # mph
    conditions: Optional[str] = None


class SituationContext(BaseModel):
    """Where the player stands before choosing a strategy."""
    distance_to_pin: float = Field(..., ge=0)
    lie: Optional[str] = None
    hole_number: int = Field(..., ge=1, le=18)
    current_score: int = Field(0, ge=0)  # strokes taken before this hole
    par_for_hole: int = Field(4, ge=3, le=6)
    shot_number: int = Field(1, ge=1)
    weather: Optional[Weather] = None
    hazards: Optional[Hazards] = None
    pressure: Optional[PressureLevel] = None

    @field_validator('lie', mode='before')
    @classmethod
    def _normalize_lie(cls, v):
        return normalize_lie(v)

    def score_to_par(self) -> int:
        """Pace relative to par, assuming every completed hole shares this par."""
        return self.current_score - self.par_for_hole * (self.hole_number - 1)


class PerformanceTendency(ReadModel):
    """A historical success rate under one named condition."""
    condition: str
    success_rate: float = Field(..., ge=0.0, le=1.0)
    pattern: str
    common_miss: Optional[str] = None


class CourseManagementProfile(ReadModel):
    layup_distance: int = 100
    aggressive_threshold: float = 0.75
    conservative_preference: float = 0.6


class PressureResponse(ReadModel):
    front_nine_avg: float = 82
    back_nine_avg: float = 85
    clutch_performance: float = 0.68


class PerformancePatterns(ReadModel):
    tendencies: List[PerformanceTendency] = Field(default_factory=list)
    course_management: CourseManagementProfile = Field(default_factory=CourseManagementProfile)
    pressure_response: PressureResponse = Field(default_factory=PressureResponse)


class RiskFactors(ReadModel):
    score: float = Field(..., ge=0.0, le=1.0)
    factors: List[str] = Field(default_factory=list)


class RiskAssessment(ReadModel):
    success_probability: float
    worst_case_scenario: str
    best_case_scenario: str


class AlternativeStrategy(ReadModel):
    strategy: str
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)


class ShotDecision(ReadModel):
    recommendation: Strategy
    confidence: float
    reasoning: List[str] = Field(default_factory=list)
    alternative_strategy: Optional[AlternativeStrategy] = None
    risk_assessment: RiskAssessment
    degraded: bool = False


class PerformanceInsight(ReadModel):
    category: str
    pattern: str
    frequency: float
    impact: str  # positive | negative | neutral
    recommendation: str
