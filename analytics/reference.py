"""Fixed reference tables used by the analytics engines.

All tables are frozen pydantic models. Engines receive them at construction
so tests can substitute their own via ``model_copy(update=...)``.
"""

from datetime import datetime, timedelta
from pydantic import BaseModel, ConfigDict
from typing import Dict, FrozenSet, List, Tuple

from models.decision import (
    CourseManagementProfile,
    PerformancePatterns,
    PerformanceTendency,
    PressureResponse,
)
from models.shot import Shot, ShotCategory


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class LieAdjustment(_Frozen):
    distance: float = 1.0
    accuracy: float = 1.0


class ClubPrior(_Frozen):
    avg_distance: float
    accuracy: float
    samples: int


NEUTRAL_LIE = LieAdjustment()


class ClubReference(_Frozen):
    """Club distance priors, lie multipliers and per-category club sets."""
    club_priors: Dict[str, ClubPrior]
    lie_adjustments: Dict[str, LieAdjustment]
    category_clubs: Dict[ShotCategory, FrozenSet[str]]
    # Clubs that never apply to an approach
    approach_excluded: FrozenSet[str] = frozenset({"Driver", "Putter"})
    # (carry, club, accuracy %) for the last-resort distance table
    basic_distance_table: Tuple[Tuple[int, str, int], ...] = ()

    def lie_adjustment(self, lie) -> LieAdjustment:
        return self.lie_adjustments.get(lie or "", NEUTRAL_LIE)

    def is_club_relevant(self, club: str, category: ShotCategory) -> bool:
        allowed = self.category_clubs.get(category)
        if allowed is not None:
            return club in allowed
        return club not in self.approach_excluded


class PressureWeights(_Frozen):
    """Pressure factor weights on a 1-10 scale."""
    birdie_putt: int = 7
    close_pin: int = 6
    heavy_rough: int = 8
    bunker: int = 7
    other_trouble: int = 6
    final_holes: int = 8
    closing_holes: int = 6
    streak: int = 6
    personal_best: int = 9
    exceptional_round: int = 8
    solid_round: int = 6
    milestone: int = 7
    high_shot_count: int = 5
    milestone_scores: FrozenSet[int] = frozenset({70, 75, 80, 85, 90})


# Landing-lie probabilities, keyed result zone -> lie -> probability
LieOdds = Dict[str, Dict[str, float]]


class LieReference(_Frozen):
    """Lie difficulty scale and landing-lie probabilities by shot type."""
    difficulty: Dict[str, int]
    tee_by_club: Dict[str, LieOdds]
    approach_long: LieOdds
    approach_short: LieOdds
    recovery: LieOdds
    default_tee_club: str = "Driver"
    # Approaches longer than this use the long table
    long_approach_yards: int = 150

    def difficulty_of(self, lie) -> int:
        return self.difficulty.get(lie or "", 5)


DEFAULT_CLUB_REFERENCE = ClubReference(
    club_priors={
        "Driver": ClubPrior(avg_distance=275, accuracy=0.72, samples=45),
        "3 Wood": ClubPrior(avg_distance=230, accuracy=0.78, samples=20),
        "5 Iron": ClubPrior(avg_distance=180, accuracy=0.75, samples=35),
        "6 Iron": ClubPrior(avg_distance=170, accuracy=0.80, samples=42),
        "7 Iron": ClubPrior(avg_distance=155, accuracy=0.82, samples=55),
        "8 Iron": ClubPrior(avg_distance=140, accuracy=0.85, samples=38),
        "9 Iron": ClubPrior(avg_distance=125, accuracy=0.80, samples=33),
        "Pitching Wedge": ClubPrior(avg_distance=110, accuracy=0.78, samples=48),
        "Sand Wedge": ClubPrior(avg_distance=80, accuracy=0.70, samples=40),
        "Lob Wedge": ClubPrior(avg_distance=60, accuracy=0.68, samples=25),
        "Putter": ClubPrior(avg_distance=15, accuracy=0.65, samples=120),
    },
    lie_adjustments={
        "tee_box": LieAdjustment(distance=1.0, accuracy=1.0),
        "fairway": LieAdjustment(distance=1.0, accuracy=1.0),
        "first_cut": LieAdjustment(distance=0.95, accuracy=0.95),
        "light_rough": LieAdjustment(distance=0.90, accuracy=0.85),
        "heavy_rough": LieAdjustment(distance=0.75, accuracy=0.70),
        "fairway_bunker": LieAdjustment(distance=0.85, accuracy=0.75),
        "greenside_bunker": LieAdjustment(distance=0.70, accuracy=0.60),
        "fringe": LieAdjustment(distance=1.0, accuracy=0.95),
        "green": LieAdjustment(distance=1.0, accuracy=1.0),
    },
    category_clubs={
        ShotCategory.PUTT: frozenset({"Putter"}),
        ShotCategory.TEE: frozenset({"Driver", "3 Wood", "5 Wood", "Hybrid"}),
        ShotCategory.AROUND_GREEN: frozenset(
            {"Pitching Wedge", "Sand Wedge", "Lob Wedge", "9 Iron"}
        ),
    },
    basic_distance_table=(
        (280, "Driver", 72),
        (230, "3 Wood", 78),
        (180, "5 Iron", 75),
        (170, "6 Iron", 80),
        (155, "7 Iron", 82),
        (140, "8 Iron", 85),
        (125, "9 Iron", 80),
        (110, "Pitching Wedge", 78),
        (80, "Sand Wedge", 70),
        (60, "Lob Wedge", 68),
    ),
)

DEFAULT_PRESSURE_WEIGHTS = PressureWeights()

DEFAULT_LIE_REFERENCE = LieReference(
    difficulty={
        "tee_box": 1,
        "fairway": 2,
        "first_cut": 3,
        "light_rough": 4,
        "fringe": 3,
        "green": 2,
        "heavy_rough": 7,
        "fairway_bunker": 6,
        "greenside_bunker": 5,
        "recovery": 8,
    },
    tee_by_club={
        "Driver": {
            "Good": {"fairway": 0.7, "first_cut": 0.2, "light_rough": 0.1},
            "Acceptable": {"fairway": 0.4, "first_cut": 0.3, "light_rough": 0.2,
                           "heavy_rough": 0.1},
            "Poor": {"light_rough": 0.3, "heavy_rough": 0.4, "recovery": 0.2,
                     "fairway_bunker": 0.1},
        },
        "3 Wood": {
            "Good": {"fairway": 0.8, "first_cut": 0.15, "light_rough": 0.05},
            "Acceptable": {"fairway": 0.5, "first_cut": 0.3, "light_rough": 0.2},
            "Poor": {"light_rough": 0.4, "heavy_rough": 0.3, "recovery": 0.3},
        },
    },
    approach_long={
        "Good": {"green": 0.6, "fringe": 0.3, "greenside_bunker": 0.1},
        "Acceptable": {"green": 0.3, "fringe": 0.2, "first_cut": 0.2, "light_rough": 0.2,
                       "greenside_bunker": 0.1},
        "Poor": {"light_rough": 0.3, "heavy_rough": 0.2, "greenside_bunker": 0.2,
                 "recovery": 0.3},
    },
    approach_short={
        "Good": {"green": 0.7, "fringe": 0.2, "greenside_bunker": 0.1},
        "Acceptable": {"green": 0.4, "fringe": 0.3, "light_rough": 0.2, "greenside_bunker": 0.1},
        "Poor": {"light_rough": 0.2, "heavy_rough": 0.2, "greenside_bunker": 0.3,
                 "recovery": 0.3},
    },
    recovery={
        "Good": {"fairway": 0.4, "green": 0.2, "first_cut": 0.2, "fringe": 0.2},
        "Acceptable": {"fairway": 0.3, "first_cut": 0.2, "light_rough": 0.3, "fringe": 0.2},
        "Poor": {"light_rough": 0.3, "heavy_rough": 0.3, "recovery": 0.4},
    },
)

DEMO_PATTERNS = PerformancePatterns(
    tendencies=[
        PerformanceTendency(
            condition="approach_shots_150_plus",
            success_rate=0.72,
            common_miss="short_right",
            pattern="Tends to come up short on longer approach shots",
        ),
        PerformanceTendency(
            condition="pressure_situations",
            success_rate=0.65,
            common_miss="pull_left",
            pattern="Pulls shots left under pressure",
        ),
        PerformanceTendency(
            condition="rough_lies",
            success_rate=0.58,
            common_miss="heavy_contact",
            pattern="Struggles with heavy rough lies",
        ),
        PerformanceTendency(
            condition="wind_conditions",
            success_rate=0.70,
            common_miss="poor_distance_control",
            pattern="Distance control issues in wind",
        ),
    ],
    course_management=CourseManagementProfile(),
    pressure_response=PressureResponse(),
)


# ================================================================
# Demo shot history
# ================================================================

_DEMO_EPOCH = datetime(2024, 11, 15, 9, 0)

# (hole, shot, category, club, start_lie, start, end_lie, end, result, lateral, distance_error)
_DEMO_ROWS: List[tuple] = [
    (1, 1, "tee", "Driver", "tee_box", 400, "fairway", 160, "Good", "On line", "On distance"),
    (1, 2, "approach", "7 Iron", "fairway", 160, "green", 20, "Good", "Left", "Short"),
    (1, 3, "putt", "Putter", "green", 20, "green", 3, "Acceptable", None, None),
    (1, 4, "putt", "Putter", "green", 3, "green", 0, "Good", None, None),
    (2, 1, "tee", "Driver", "tee_box", 420, "light_rough", 170, "Acceptable", "Left", "On distance"),
    (2, 2, "approach", "6 Iron", "light_rough", 170, "fringe", 25, "Acceptable", "Left", "Short"),
    (2, 3, "around_green", "Sand Wedge", "fringe", 25, "green", 6, "Good", None, None),
    (2, 4, "putt", "Putter", "green", 6, "green", 0, "Good", None, None),
    (3, 1, "approach", "8 Iron", "tee_box", 145, "green", 18, "Good", "On line", "On distance"),
    (3, 2, "putt", "Putter", "green", 18, "green", 0, "Good", None, None),
    (4, 1, "tee", "Driver", "tee_box", 510, "fairway", 255, "Good", "Right", "Long"),
    (4, 2, "approach", "3 Wood", "fairway", 255, "fairway", 30, "Acceptable", "Left", "Short"),
    (4, 3, "around_green", "Pitching Wedge", "fairway", 30, "green", 8, "Good", None, None),
    (4, 4, "putt", "Putter", "green", 8, "green", 0, "Good", None, None),
    (5, 1, "tee", "Driver", "tee_box", 390, "fairway", 150, "Good", "On line", "On distance"),
    (5, 2, "approach", "7 Iron", "fairway", 150, "greenside_bunker", 15, "Poor", "Far left", "Short"),
    (5, 3, "around_green", "Sand Wedge", "greenside_bunker", 15, "green", 5, "Acceptable", None, None),
    (5, 4, "putt", "Putter", "green", 5, "green", 0, "Good", None, None),
    (6, 1, "tee", "Driver", "tee_box", 405, "fairway", 160, "Good", "On line", "On distance"),
    (6, 2, "approach", "7 Iron", "fairway", 160, "green", 12, "Good", "On line", "On distance"),
    (6, 3, "putt", "Putter", "green", 12, "green", 0, "Good", None, None),
    (7, 1, "approach", "8 Iron", "tee_box", 140, "green", 30, "Acceptable", "Right", "Long"),
    (7, 2, "putt", "Putter", "green", 30, "green", 2, "Acceptable", None, None),
    (7, 3, "putt", "Putter", "green", 2, "green", 0, "Good", None, None),
]


def _build_demo_history() -> Tuple[Shot, ...]:
    shots = []
    for index, row in enumerate(_DEMO_ROWS):
        (hole, number, category, club, start_lie, start,
         end_lie, end, result, lateral, distance_error) = row
        shots.append(Shot(
            round_id="demo-round",
            hole_number=hole,
            shot_number=number,
            category=category,
            club=club,
            start_lie=start_lie,
            start_distance_to_hole=start,
            end_lie=end_lie,
            end_distance_to_hole=end,
            result_zone=result,
            holed=end == 0,
            details={"lateral_error": lateral, "distance_error": distance_error},
            created_at=_DEMO_EPOCH + timedelta(minutes=5 * index),
        ))
    return tuple(shots)


DEMO_HISTORY: Tuple[Shot, ...] = _build_demo_history()
