"""Classification and coaching for high-stakes shots.

The classifier picks one situation type per shot (first match wins),
collects up to four weighted factors, folds them into an intensity, and,
when enough matching history exists, summarizes how the player has
performed in similar spots.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from analytics.reference import DEFAULT_PRESSURE_WEIGHTS, PressureWeights
from models import PressureAnalysis, PressureContext, PressureSituation, Shot, ShotCategory
from models.pressure import (
    PressureFactor,
    PressureIntensity,
    PressurePerformance,
    PressureType,
    RecentResult,
)

logger = logging.getLogger(__name__)

CLOSE_PUTT_DISTANCE = 6
CLOSE_APPROACH_DISTANCE = 15
LATE_SHORT_GAME_SHOT = 3
CLOSING_HOLE = 15
FINAL_HOLES = 17
STREAK_WINDOW = 6
STREAK_LENGTH = 3
HIGH_SHOT_COUNT = 4
MAX_FACTORS = 4
HOLES_PER_ROUND = 18

# Score context needs more than this many historical totals
MIN_ROUND_TOTALS = 5
PERSONAL_BEST_MARGIN = 2
EXCEPTIONAL_MARGIN = 3
SOLID_MARGIN = 1

MEAN_WEIGHT = 0.6
PEAK_WEIGHT = 0.4
EXTREME_AT = 8.5
HIGH_AT = 7
MEDIUM_AT = 5

MIN_MATCHING_SHOTS = 8
MATCH_WINDOW = 50
BASELINE_MIN_SHOTS = 20
BASELINE_WINDOW = 200
DEFAULT_BASELINE = 0.7
TREND_MIN_SHOTS = 10
TREND_IMPROVEMENT = 0.1
BIRDIE_PUTT_RANGE = (3, 8)

TROUBLE_WORDS = ("rough", "bunker")
RECOVERY_LIE = "recovery"

_INTENSITY_WORD = {
    PressureIntensity.LOW: "Manageable",
    PressureIntensity.MEDIUM: "Moderate",
    PressureIntensity.HIGH: "High",
    PressureIntensity.EXTREME: "Extreme",
}
_HEIGHTENED = (PressureIntensity.HIGH, PressureIntensity.EXTREME)


def _lie_text(lie: Optional[str]) -> str:
    return (lie or "unknown lie").replace("_", " ")


def is_trouble_lie(lie: Optional[str]) -> bool:
    if not lie:
        return False
    return lie == RECOVERY_LIE or any(word in lie for word in TROUBLE_WORDS)


def trailing_streak(previous: Sequence[RecentResult]) -> int:
    """Length of the run of identical results ending at the latest shot."""
    recent = list(previous)[-STREAK_WINDOW:]
    if not recent:
        return 0
    last = recent[-1].result.strip().lower()
    run = 0
    for item in reversed(recent):
        if item.result.strip().lower() != last:
            break
        run += 1
    return run


def combined_intensity(factors: Sequence[PressureFactor]) -> PressureIntensity:
    """0.6 x mean weight + 0.4 x peak weight, bucketed."""
    if not factors:
        return PressureIntensity.LOW
    weights = [f.weight for f in factors]
    combined = MEAN_WEIGHT * (sum(weights) / len(weights)) + PEAK_WEIGHT * max(weights)
    if combined >= EXTREME_AT:
        return PressureIntensity.EXTREME
    if combined >= HIGH_AT:
        return PressureIntensity.HIGH
    if combined >= MEDIUM_AT:
        return PressureIntensity.MEDIUM
    return PressureIntensity.LOW


def _success_rate(shots: Sequence[Shot]) -> float:
    return sum(1 for s in shots if s.is_success) / len(shots)


class PressureClassifier:
    """Pressure situation analysis for a single upcoming shot."""

    def __init__(self, weights: PressureWeights = DEFAULT_PRESSURE_WEIGHTS):
        self._weights = weights

    # ================================================================
    # Classification
    # ================================================================

    def classify(self, context: PressureContext) -> PressureType:
        if context.category == ShotCategory.PUTT and context.distance_to_pin <= CLOSE_PUTT_DISTANCE:
            return PressureType.SCORING_OPPORTUNITY
        if (context.category == ShotCategory.APPROACH
                and context.distance_to_pin <= CLOSE_APPROACH_DISTANCE):
            return PressureType.SCORING_OPPORTUNITY
        if (context.category == ShotCategory.AROUND_GREEN
                and context.shot_number >= LATE_SHORT_GAME_SHOT):
            return PressureType.SCORING_OPPORTUNITY
        if is_trouble_lie(context.lie):
            return PressureType.TROUBLE_RECOVERY
        if context.hole_number >= CLOSING_HOLE:
            return PressureType.CLOSING_HOLE
        if trailing_streak(context.previous_shots) >= STREAK_LENGTH:
            return PressureType.STREAK_SITUATION
        return PressureType.COMPETITIVE_MOMENT

    # ================================================================
    # Factors
    # ================================================================

    def situational_factors(
        self, context: PressureContext, pressure_type: PressureType
    ) -> List[PressureFactor]:
        w = self._weights
        distance = round(context.distance_to_pin)
        factors: List[PressureFactor] = []

        if pressure_type == PressureType.SCORING_OPPORTUNITY:
            if context.category == ShotCategory.PUTT:
                factors.append(PressureFactor(
                    factor="Birdie putt opportunity",
                    weight=w.birdie_putt,
                    description=f"{distance}ft birdie putt",
                ))
            elif context.category == ShotCategory.APPROACH:
                factors.append(PressureFactor(
                    factor="Close pin position",
                    weight=w.close_pin,
                    description=f"{distance}ft to pin",
                ))
            else:
                factors.append(PressureFactor(
                    factor="Up-and-down chance",
                    weight=w.close_pin,
                    description=f"Shot {context.shot_number} to save the hole",
                ))
        elif pressure_type == PressureType.TROUBLE_RECOVERY:
            lie = context.lie or ""
            if "heavy" in lie:
                weight = w.heavy_rough
            elif "bunker" in lie:
                weight = w.bunker
            else:
                weight = w.other_trouble
            factors.append(PressureFactor(
                factor="Difficult lie",
                weight=weight,
                description=f"Recovery from {_lie_text(context.lie)}",
            ))
        elif pressure_type == PressureType.CLOSING_HOLE:
            factors.append(PressureFactor(
                factor="Finishing holes",
                weight=w.final_holes if context.hole_number >= FINAL_HOLES else w.closing_holes,
                description=f"Hole {context.hole_number} - round conclusion",
            ))
        elif pressure_type == PressureType.STREAK_SITUATION:
            factors.append(PressureFactor(
                factor="Streak on the line",
                weight=w.streak,
                description=f"{trailing_streak(context.previous_shots)} straight "
                            f"'{context.previous_shots[-1].result}' results",
            ))
        return factors

    def score_context_factors(
        self, round_score: int, hole_number: int, recent_totals: Sequence[int]
    ) -> List[PressureFactor]:
        """Pace factors from linear extrapolation of the current round."""
        totals = [t for t in recent_totals if t is not None]
        if len(totals) <= MIN_ROUND_TOTALS:
            return []

        w = self._weights
        average = sum(totals) / len(totals)
        best = min(totals)
        remaining = HOLES_PER_ROUND - hole_number
        projected = round_score + remaining * (round_score / hole_number)

        factors: List[PressureFactor] = []
        if projected <= best + PERSONAL_BEST_MARGIN:
            factors.append(PressureFactor(
                factor="Personal best opportunity",
                weight=w.personal_best,
                description=f"On pace for {round(projected)} (best: {best})",
            ))
        if projected <= average - EXCEPTIONAL_MARGIN:
            factors.append(PressureFactor(
                factor="Exceptional round in progress",
                weight=w.exceptional_round,
                description="Well below average pace",
            ))
        elif projected <= average + SOLID_MARGIN:
            factors.append(PressureFactor(
                factor="Solid round potential",
                weight=w.solid_round,
                description="Around average scoring pace",
            ))
        if round(projected) in w.milestone_scores:
            factors.append(PressureFactor(
                factor="Milestone score opportunity",
                weight=w.milestone,
                description=f"On pace for {round(projected)}",
            ))
        return factors

    def collect_factors(
        self,
        context: PressureContext,
        pressure_type: PressureType,
        recent_totals: Sequence[int] = (),
    ) -> List[PressureFactor]:
        factors = self.situational_factors(context, pressure_type)
        if context.round_score is not None:
            factors.extend(
                self.score_context_factors(context.round_score, context.hole_number, recent_totals)
            )
        if context.shot_number >= HIGH_SHOT_COUNT:
            factors.append(PressureFactor(
                factor="High shot count",
                weight=self._weights.high_shot_count,
                description=f"{context.shot_number} shots on hole",
            ))
        return factors[:MAX_FACTORS]

    # ================================================================
    # Historical performance
    # ================================================================

    def _matcher(
        self, pressure_type: PressureType, context: PressureContext
    ) -> Callable[[Shot], bool]:
        if pressure_type == PressureType.SCORING_OPPORTUNITY:
            if context.category == ShotCategory.PUTT:
                low, high = BIRDIE_PUTT_RANGE
                return lambda s: (
                    s.category == ShotCategory.PUTT
                    and s.start_distance_to_hole is not None
                    and low <= s.start_distance_to_hole <= high
                )
            return lambda s: s.category == context.category
        if pressure_type == PressureType.TROUBLE_RECOVERY:
            return lambda s: is_trouble_lie(s.start_lie)
        if pressure_type == PressureType.CLOSING_HOLE:
            return lambda s: s.hole_number >= CLOSING_HOLE
        return lambda s: True

    def baseline(self, category: ShotCategory, history: Sequence[Shot]) -> float:
        """Normal Good/Acceptable rate for the category, or the default."""
        shots = [s for s in history if s.category == category][:BASELINE_WINDOW]
        if len(shots) < BASELINE_MIN_SHOTS:
            return DEFAULT_BASELINE
        return _success_rate(shots)

    def historical_performance(
        self,
        pressure_type: PressureType,
        context: PressureContext,
        history: Sequence[Shot],
    ) -> Optional[PressurePerformance]:
        matches = [s for s in history if self._matcher(pressure_type, context)(s)][:MATCH_WINDOW]
        if len(matches) < MIN_MATCHING_SHOTS:
            return None

        success_rate = _success_rate(matches)
        normal = self.baseline(context.category, history)
        # A zero baseline has no relative delta
        compared = round((success_rate - normal) / normal * 100) if normal else 0
        return PressurePerformance(
            success_rate=round(success_rate, 2),
            compared_to_normal=compared,
            common_reactions=_common_reactions(matches),
            strengths=_strengths(matches, success_rate),
            weaknesses=_weaknesses(matches, success_rate),
            improvement_trend=_improving(matches),
            sample_size=len(matches),
        )

    # ================================================================
    # Assembly
    # ================================================================

    def situation(
        self,
        context: PressureContext,
        history: Sequence[Shot] = (),
        recent_totals: Sequence[int] = (),
    ) -> PressureSituation:
        pressure_type = self.classify(context)
        factors = self.collect_factors(context, pressure_type, recent_totals)
        intensity = combined_intensity(factors)
        return PressureSituation(
            type=pressure_type,
            intensity=intensity,
            description=_describe(pressure_type, context, intensity),
            factors=factors,
            mental_approach=_mental_approach(pressure_type, intensity),
            historical_performance=self.historical_performance(pressure_type, context, history),
        )

    def analyze(
        self,
        context: PressureContext,
        history: Sequence[Shot] = (),
        recent_totals: Sequence[int] = (),
    ) -> PressureAnalysis:
        situation = self.situation(context, history, recent_totals)
        logger.debug(
            "pressure %s/%s on hole %s (%d factors)",
            situation.type.value, situation.intensity.value,
            context.hole_number, len(situation.factors),
        )
        return PressureAnalysis(
            current_situation=situation,
            recommended_mindset=_recommended_mindset(situation),
            technical_adjustments=_technical_adjustments(situation),
            strategy_recommendations=_strategy_recommendations(situation),
            confidence_booster=_confidence_booster(situation),
        )

    @staticmethod
    def basic_analysis() -> PressureAnalysis:
        """Static analysis served when the situation cannot be evaluated."""
        situation = PressureSituation(
            type=PressureType.COMPETITIVE_MOMENT,
            intensity=PressureIntensity.MEDIUM,
            description="Standard competitive shot",
            factors=[PressureFactor(
                factor="Competitive situation",
                weight=5,
                description="Normal game pressure",
            )],
            mental_approach=["Stay focused", "Trust your swing"],
        )
        return PressureAnalysis(
            current_situation=situation,
            recommended_mindset=["Stay calm", "Trust your routine"],
            technical_adjustments=["Normal setup"],
            strategy_recommendations=["Play your normal game"],
            confidence_booster="You got this - trust your ability!",
            degraded=True,
        )


# ================================================================
# Coaching text
# ================================================================

def _describe(
    pressure_type: PressureType, context: PressureContext, intensity: PressureIntensity
) -> str:
    word = _INTENSITY_WORD[intensity]
    distance = round(context.distance_to_pin)
    if pressure_type == PressureType.SCORING_OPPORTUNITY:
        if context.category == ShotCategory.PUTT:
            return f"{word} pressure birdie putt from {distance}ft"
        return f"{word} pressure scoring chance from {distance}ft"
    if pressure_type == PressureType.TROUBLE_RECOVERY:
        return f"{word} pressure recovery shot from {_lie_text(context.lie)}"
    if pressure_type == PressureType.CLOSING_HOLE:
        return f"{word} pressure finish - hole {context.hole_number}"
    if pressure_type == PressureType.STREAK_SITUATION:
        return f"{word} pressure streak situation"
    return f"{word} pressure competitive moment"


def _mental_approach(pressure_type: PressureType, intensity: PressureIntensity) -> List[str]:
    if pressure_type == PressureType.SCORING_OPPORTUNITY:
        approaches = ["Trust your read and stroke", "Focus on process, not outcome"]
        if intensity in _HEIGHTENED:
            approaches.append("Take extra time to settle")
    elif pressure_type == PressureType.TROUBLE_RECOVERY:
        approaches = ["Accept the challenge", "Commit fully to your plan", "Focus on clean contact"]
    elif pressure_type == PressureType.CLOSING_HOLE:
        approaches = ["One shot at a time", "Stay in present moment"]
        if intensity in _HEIGHTENED:
            approaches.append("Embrace the moment")
    else:
        approaches = ["Stay confident and committed", "Trust your preparation"]

    if intensity == PressureIntensity.EXTREME:
        approaches.append("Use deep breathing to center")
    elif intensity == PressureIntensity.LOW:
        approaches.append("Play with confidence")
    return approaches[:3]


def _recommended_mindset(situation: PressureSituation) -> List[str]:
    mindset = list(situation.mental_approach)
    history = situation.historical_performance
    if history:
        if history.success_rate >= 0.7:
            mindset.append("Draw on your proven pressure ability")
        elif history.success_rate < 0.5:
            mindset.append("Focus on executing fundamentals")
        if history.improvement_trend:
            mindset.append("Trust your recent pressure improvements")
    return mindset[:4]


def _technical_adjustments(situation: PressureSituation) -> List[str]:
    adjustments = {
        PressureIntensity.EXTREME: [
            "Take extra practice swings", "Slow down pre-shot routine", "Focus on smooth tempo",
        ],
        PressureIntensity.HIGH: ["One extra deep breath", "Check grip pressure"],
        PressureIntensity.MEDIUM: ["Trust normal routine"],
        PressureIntensity.LOW: ["Play with confidence"],
    }[situation.intensity]

    if situation.type == PressureType.SCORING_OPPORTUNITY:
        adjustments.append("Commit to your read completely")
    elif situation.type == PressureType.TROUBLE_RECOVERY:
        adjustments.append("Make solid contact priority #1")
    return adjustments[:3]


def _strategy_recommendations(situation: PressureSituation) -> List[str]:
    if situation.intensity in _HEIGHTENED:
        strategies = ["Choose conservative target", "Trust your most reliable shot"]
    else:
        strategies = ["Play your normal game plan"]
    history = situation.historical_performance
    if history and history.success_rate < 0.6:
        strategies.append("Extra emphasis on safe play")
    return strategies[:3]


def _confidence_booster(situation: PressureSituation) -> str:
    history = situation.historical_performance
    if history and history.success_rate >= 0.7:
        return "You've succeeded in this situation before - trust yourself!"
    return {
        PressureType.SCORING_OPPORTUNITY: "This is why you practice - go make it happen!",
        PressureType.TROUBLE_RECOVERY: "Great challenge - show your skill and creativity!",
        PressureType.CLOSING_HOLE: "You've earned this moment - finish strong!",
    }.get(situation.type, "Trust your preparation and ability!")


def _poor(shot: Shot) -> bool:
    return shot.result_zone is not None and shot.result_zone.value == "Poor"


def _impure_contact(shot: Shot) -> bool:
    return shot.details.contact_quality is not None and not shot.details.is_pure_contact


def _common_reactions(shots: Sequence[Shot]) -> List[str]:
    reactions = []
    poor = [s for s in shots if _poor(s)]
    if len(poor) > len(shots) * 0.4:
        reactions.append("Higher miss rate under pressure")
    if poor and sum(1 for s in poor if _impure_contact(s)) > len(poor) * 0.6:
        reactions.append("Contact quality suffers when pressured")
    if not reactions:
        reactions.append("Generally handles pressure well")
    return reactions[:2]


def _strengths(shots: Sequence[Shot], success_rate: float) -> List[str]:
    strengths = []
    if success_rate >= 0.75:
        strengths.append("Excellent under pressure")
    elif success_rate >= 0.65:
        strengths.append("Solid pressure performer")
    if sum(1 for s in shots if s.details.is_pure_contact) / len(shots) >= 0.6:
        strengths.append("Maintains contact quality")
    if not strengths:
        strengths.append("Room for pressure improvement")
    return strengths[:2]


def _weaknesses(shots: Sequence[Shot], success_rate: float) -> List[str]:
    weaknesses = []
    if success_rate < 0.5:
        weaknesses.append("Struggles significantly under pressure")
    elif success_rate < 0.65:
        weaknesses.append("Performance drops under pressure")
    if sum(1 for s in shots if _impure_contact(s) and _poor(s)) > len(shots) * 0.3:
        weaknesses.append("Tension affects contact")
    if not weaknesses:
        weaknesses.append("No significant pressure weaknesses")
    return weaknesses[:2]


def _improving(shots: Sequence[Shot]) -> bool:
    """Second chronological half beats the first by more than ten points."""
    dated = sorted((s for s in shots if s.created_at is not None), key=lambda s: s.created_at)
    if len(dated) < TREND_MIN_SHOTS:
        return False
    midpoint = len(dated) // 2
    first, second = dated[:midpoint], dated[midpoint:]
    return _success_rate(second) > _success_rate(first) + TREND_IMPROVEMENT
