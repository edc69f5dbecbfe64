from datetime import date
from enum import Enum
from pydantic import Field
from typing import List, Optional

from .base import ReadModel


class TrendPoint(ReadModel):
    date: date
    distance: int


class ClubPerformanceStat(ReadModel):
    """Distance, accuracy and dispersion for one (club, category) group."""
    club: str
    category: str
    average_distance: float
    shots: int = Field(..., ge=0)
    accuracy: float = Field(..., ge=0.0, le=1.0)  # fraction of "good" shots
    dispersion: float = Field(..., ge=0.0)        # population std dev, yards
    trends: List[TrendPoint] = Field(default_factory=list)


class TendencyInsight(ReadModel):
    """A statistically flagged directional, distance or category bias."""
    category: str
    description: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    recommendation: Optional[str] = None
    sample_size: int = Field(..., ge=0)


class HeatMapPoint(ReadModel):
    """A shot projected into normalized dispersion space."""
    x: float = Field(..., ge=-100, le=100)  # lateral, 0 = on line
    y: float = Field(..., ge=0, le=100)     # progress toward the pin, 100 = pin
    category: str
    club: Optional[str] = None
    result: str = "Unknown"


class AccuracyTrend(str, Enum):
    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"


class ShotSummary(ReadModel):
    """Headline numbers for a shot-history window."""
    total_shots: int
    rounds_analyzed: int
    strongest_club: str = "N/A"
    biggest_opportunity: str = "N/A"
    accuracy_trend: AccuracyTrend = AccuracyTrend.STABLE


class ShotPatternAnalysis(ReadModel):
    """Full pattern report for a user's recent history."""
    heat_map: List[HeatMapPoint] = Field(default_factory=list)
    tendencies: List[TendencyInsight] = Field(default_factory=list)
    club_stats: List[ClubPerformanceStat] = Field(default_factory=list)
    summary: ShotSummary
    degraded: bool = False
