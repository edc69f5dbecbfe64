from .aggregates import compute_hole_aggregate
from .club_stats import get_club_performance
from .club_suggestion import ClubSuggestionEngine, get_wind_adjustment
from .heat_map import get_heat_map
from .lie_intelligence import LieIntelligence
from .pressure import PressureClassifier
from .recompute import HoleAggregateRecomputer
from .service import AnalyticsService
from .shot_decision import ShotDecisionEngine
from .stats import (
    fir_per_round,
    gir_per_round,
    putts_per_round,
    round_summary,
    score_trend,
    score_type_distribution_per_round,
    scoring_by_par,
)
from .summary import get_shot_summary
from .tendencies import get_tendencies
from .visualizations import (
    plot_club_distances,
    plot_gir_per_round,
    plot_heat_map,
    plot_putts_per_round,
    plot_score_trend,
)

__all__ = [
    "AnalyticsService",
    "HoleAggregateRecomputer",
    "compute_hole_aggregate",
    "get_club_performance",
    "get_tendencies",
    "get_heat_map",
    "get_shot_summary",
    "ClubSuggestionEngine",
    "get_wind_adjustment",
    "PressureClassifier",
    "ShotDecisionEngine",
    "LieIntelligence",
    "round_summary",
    "putts_per_round",
    "gir_per_round",
    "fir_per_round",
    "score_trend",
    "scoring_by_par",
    "score_type_distribution_per_round",
    "plot_putts_per_round",
    "plot_gir_per_round",
    "plot_score_trend",
    "plot_heat_map",
    "plot_club_distances",
]
