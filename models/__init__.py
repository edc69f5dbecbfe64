from .base import BaseGolfModel, ReadModel
from .decision import (
    Hazards,
    PerformanceInsight,
    PerformancePatterns,
    PerformanceTendency,
    PressureLevel,
    ShotDecision,
    SituationContext,
    Strategy,
    Weather,
)
from .intent import ShotIntent
from .lie import LieAnalysis, LieConditions, LieContext, LieDifficulty, LiePrediction
from .performance import (
    ClubPerformanceStat,
    HeatMapPoint,
    ShotPatternAnalysis,
    ShotSummary,
    TendencyInsight,
)
from .pressure import PressureAnalysis, PressureContext, PressureSituation
from .round import Round
from .round_hole import RoundHole
from .shot import (
    DistanceMiss,
    LateralMiss,
    ResultZone,
    Shot,
    ShotCategory,
    ShotDetails,
    normalize_lie,
)
from .suggestion import ClubSuggestion, SuggestionContext, WindAdjustment, WindConditions

__all__ = [
    "BaseGolfModel",
    "ReadModel",
    "Shot",
    "ShotCategory",
    "ShotDetails",
    "ResultZone",
    "LateralMiss",
    "DistanceMiss",
    "normalize_lie",
    "ShotIntent",
    "Round",
    "RoundHole",
    "ClubPerformanceStat",
    "TendencyInsight",
    "HeatMapPoint",
    "ShotSummary",
    "ShotPatternAnalysis",
    "SuggestionContext",
    "WindConditions",
    "ClubSuggestion",
    "WindAdjustment",
    "PressureContext",
    "PressureSituation",
    "PressureAnalysis",
    "SituationContext",
    "Hazards",
    "Weather",
    "PressureLevel",
    "Strategy",
    "ShotDecision",
    "PerformanceTendency",
    "PerformancePatterns",
    "PerformanceInsight",
    "LieContext",
    "LieConditions",
    "LieDifficulty",
    "LiePrediction",
    "LieAnalysis",
]
