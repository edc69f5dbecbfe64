"""Next-lie prediction and per-lie performance analysis.

Predictions start from fixed landing-lie tables for the shot type, are
reweighted for course conditions, then blended with the player's own
history of where that club and result tend to finish.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from analytics.reference import DEFAULT_LIE_REFERENCE, LieOdds, LieReference
from models import Shot, ShotCategory, normalize_lie
from models.lie import (
    LieAdjustments,
    LieAnalysis,
    LieConditions,
    LieContext,
    LieDifficulty,
    LiePerformance,
    LiePrediction,
    LieProbability,
)
from models.shot import ResultZone

logger = logging.getLogger(__name__)

FALLBACK_RESULT = ResultZone.ACCEPTABLE.value

TRANSITION_WINDOW = 50
LIE_WINDOW = 100
MIN_LIE_SHOTS = 5
DEFAULT_SUCCESS_RATE = 0.7

MIN_PROBABILITY = 0.05  # exclusive
MAX_ALTERNATIVES = 3
HIGH_CONFIDENCE = 0.7
LOW_CONFIDENCE = 0.4

# (lie, multiplier) pairs applied per condition
RAIN_FACTORS = (("fairway", 0.8), ("light_rough", 1.3), ("heavy_rough", 1.2))
WIND_FACTORS = (("light_rough", 1.2), ("heavy_rough", 1.1), ("recovery", 1.3))

CONTACT_MISTAKE_SHARE = 0.5
SHAPE_MISTAKE_SHARE = 0.3
CURVED_SHAPES = frozenset({"hook", "slice"})
CAUTION_SUCCESS_RATE = 0.5

_RECOMMENDATIONS = {
    "fairway": ["Perfect lie for full swing", "Trust your normal club distances"],
    "light_rough": ["Take one more club", "Focus on clean contact"],
    "heavy_rough": [
        "Club up 2-3 clubs", "Aim for center of green", "Expect reduced distance and control",
    ],
    "greenside_bunker": ["Open clubface and aim left", "Accelerate through impact"],
    "fairway_bunker": ["Take enough club to clear lip", "Ball position back, clean contact crucial"],
    "green": ["Read the green carefully", "Consider pin position for approach"],
}

_ADJUSTMENTS = {
    "heavy_rough": LieAdjustments(
        club_selection="Short iron or wedge only",
        technique=["Very steep swing", "Firm grip", "Ball well back in stance"],
        strategy="Get back to fairway, forget the pin",
    ),
    "fairway_bunker": LieAdjustments(
        club_selection="Enough loft to clear lip",
        technique=["Ball position back", "Minimal lower body", "Hit ball first"],
        strategy="Conservative target, avoid lip",
    ),
    "greenside_bunker": LieAdjustments(
        club_selection="Sand wedge or lob wedge",
        technique=["Open clubface", "Hit sand behind ball", "Accelerate through"],
        strategy="Get out first, close second",
    ),
}
_STANDARD_ADJUSTMENTS = LieAdjustments(
    club_selection="Use normal club",
    technique=["Standard setup"],
    strategy="Play normally",
)


def _lie_text(lie: str) -> str:
    return lie.replace("_", " ")


def difficulty_bucket(score: int) -> LieDifficulty:
    if score <= 2:
        return LieDifficulty.EASY
    if score <= 4:
        return LieDifficulty.MODERATE
    if score <= 6:
        return LieDifficulty.DIFFICULT
    return LieDifficulty.VERY_DIFFICULT


def historical_weight(sample_size: int) -> float:
    """Share of the blend given to the player's own landing lies."""
    if sample_size >= 20:
        return 0.7
    if sample_size >= 10:
        return 0.5
    if sample_size >= 5:
        return 0.3
    return 0.1


def adjust_for_conditions(
    odds: Dict[str, float], conditions: Optional[LieConditions]
) -> Dict[str, float]:
    """Reweight for rain and wind, then renormalize to sum to 1."""
    adjusted = dict(odds)
    if conditions is not None:
        factors = []
        if conditions.recent_rain:
            factors.extend(RAIN_FACTORS)
        if conditions.windy:
            factors.extend(WIND_FACTORS)
        for lie, multiplier in factors:
            if lie in adjusted:
                adjusted[lie] *= multiplier

    total = sum(adjusted.values())
    if not total:
        return adjusted
    return {lie: p / total for lie, p in adjusted.items()}


def blend(pattern: Dict[str, float], history: Dict[str, float], weight: float) -> Dict[str, float]:
    lies = set(pattern) | set(history)
    return {
        lie: pattern.get(lie, 0.0) * (1 - weight) + history.get(lie, 0.0) * weight
        for lie in lies
    }


class LieIntelligence:
    """Predicts the next lie and summarizes play from a given lie."""

    def __init__(self, reference: LieReference = DEFAULT_LIE_REFERENCE):
        self._reference = reference

    # ================================================================
    # Prediction
    # ================================================================

    def base_odds(self, context: LieContext) -> Dict[str, float]:
        """Landing-lie table for the shot type and result."""
        ref = self._reference
        if context.category == ShotCategory.TEE:
            table: LieOdds = ref.tee_by_club.get(context.club or "") \
                or ref.tee_by_club[ref.default_tee_club]
        elif context.category == ShotCategory.APPROACH:
            if context.distance_to_pin > ref.long_approach_yards:
                table = ref.approach_long
            else:
                table = ref.approach_short
        else:
            table = ref.recovery

        result = context.result.value if context.result else FALLBACK_RESULT
        return dict(table.get(result) or table.get(FALLBACK_RESULT) or {})

    def historical_transitions(self, context: LieContext, history: Sequence[Shot]):
        """Where this club finished, for shots with the same result.

        Returns (lie -> share, matching shot count).
        """
        recent = [
            s for s in history
            if s.category == context.category and s.club == context.club and s.end_lie
        ][:TRANSITION_WINDOW]
        landed = Counter(s.end_lie for s in recent if s.result_zone == context.result)
        count = sum(landed.values())
        if not count:
            return {}, 0
        return {lie: n / count for lie, n in landed.items()}, count

    def predict(self, context: LieContext, history: Sequence[Shot] = ()) -> LiePrediction:
        pattern = adjust_for_conditions(self.base_odds(context), context.conditions)
        transitions, sample_size = self.historical_transitions(context, history)
        odds = blend(pattern, transitions, historical_weight(sample_size))

        ranked = sorted(
            ((lie, p) for lie, p in odds.items() if p > MIN_PROBABILITY),
            key=lambda item: (-item[1], item[0]),
        )
        if not ranked:
            logger.debug("no landing lie above %.2f for %s", MIN_PROBABILITY, context.category.value)
            return self.basic_prediction(context)

        lie, probability = ranked[0]
        return LiePrediction(
            most_likely=lie,
            probability=round(probability, 2),
            alternatives=[
                LieProbability(lie=alt, probability=round(p, 2))
                for alt, p in ranked[1:1 + MAX_ALTERNATIVES]
            ],
            reasoning=_prediction_reasoning(context, lie, probability),
            difficulty=difficulty_bucket(self._reference.difficulty_of(lie)),
            recommendations=_RECOMMENDATIONS.get(lie, ["Assess lie and adjust strategy"])[:3],
            sample_size=sample_size,
        )

    @staticmethod
    def basic_prediction(context: LieContext) -> LiePrediction:
        """Fixed guess served when no landing data can be used."""
        if context.result == ResultZone.POOR:
            lie, probability = "light_rough", 0.5
        elif context.category == ShotCategory.APPROACH:
            lie, probability = "green", 0.4
        else:
            lie, probability = "fairway", 0.6
        return LiePrediction(
            most_likely=lie,
            probability=probability,
            alternatives=[
                LieProbability(lie="first_cut", probability=0.2),
                LieProbability(lie="light_rough", probability=0.15),
            ],
            reasoning=["Basic prediction based on shot result"],
            difficulty=LieDifficulty.MODERATE,
            recommendations=["Assess actual lie when you reach ball"],
            degraded=True,
        )

    # ================================================================
    # Performance from a lie
    # ================================================================

    def lie_performance(self, lie: str, history: Sequence[Shot]) -> LiePerformance:
        shots = [s for s in history if s.start_lie == lie][:LIE_WINDOW]
        if len(shots) < MIN_LIE_SHOTS:
            return LiePerformance(
                success_rate=DEFAULT_SUCCESS_RATE,
                typical_result=FALLBACK_RESULT,
                common_mistakes=["Limited data available"],
                sample_size=len(shots),
            )

        success_rate = sum(1 for s in shots if s.is_success) / len(shots)
        results = Counter(s.result_zone.value if s.result_zone else "Unknown" for s in shots)
        typical = sorted(results.items(), key=lambda item: (-item[1], item[0]))[0][0]
        return LiePerformance(
            success_rate=round(success_rate, 2),
            typical_result=typical,
            common_mistakes=_common_mistakes(shots),
            sample_size=len(shots),
        )

    def analyze(self, lie: Optional[str], history: Sequence[Shot] = ()) -> LieAnalysis:
        lie = normalize_lie(lie) or "unknown"
        performance = self.lie_performance(lie, history)
        return LieAnalysis(
            lie=lie,
            expected_difficulty=self._reference.difficulty_of(lie),
            historical_performance=performance,
            adjustments=_adjustments(lie, performance.success_rate),
        )

    def basic_analysis(self, lie: Optional[str]) -> LieAnalysis:
        lie = normalize_lie(lie) or "unknown"
        return LieAnalysis(
            lie=lie,
            expected_difficulty=self._reference.difficulty_of(lie),
            historical_performance=LiePerformance(
                success_rate=DEFAULT_SUCCESS_RATE,
                typical_result=FALLBACK_RESULT,
                common_mistakes=["Limited historical data"],
            ),
            adjustments=LieAdjustments(
                club_selection="Assess based on lie",
                technique=["Standard approach"],
                strategy="Play within your abilities",
            ),
            degraded=True,
        )


def _prediction_reasoning(context: LieContext, lie: str, probability: float) -> List[str]:
    result = context.result.value if context.result else FALLBACK_RESULT
    reasons = [f"{result} {context.category.value} shot typically results in {_lie_text(lie)}"]
    if context.club == "Driver" and lie == "fairway":
        reasons.append("Driver with good contact usually finds fairway")
    elif context.category == ShotCategory.APPROACH and lie == "green":
        reasons.append("Solid approach shots generally reach putting surface")
    elif "rough" in lie:
        reasons.append("Off-line shots commonly end up in rough areas")

    if probability > HIGH_CONFIDENCE:
        reasons.append("High confidence based on shot pattern analysis")
    elif probability < LOW_CONFIDENCE:
        reasons.append("Multiple lie possibilities - course dependent")
    return reasons[:3]


def _common_mistakes(shots: Sequence[Shot]) -> List[str]:
    mistakes = []
    poor = [s for s in shots if s.result_zone == ResultZone.POOR]
    if poor:
        contact = [
            s for s in poor
            if s.details.contact_quality is not None and not s.details.is_pure_contact
        ]
        if len(contact) > len(poor) * CONTACT_MISTAKE_SHARE:
            mistakes.append("Contact quality issues from this lie")
        curved = [s for s in poor if s.details.shot_shape in CURVED_SHAPES]
        if len(curved) > len(poor) * SHAPE_MISTAKE_SHARE:
            mistakes.append("Ball flight control problems")
    if not mistakes:
        mistakes.append("Generally solid from this lie")
    return mistakes


def _adjustments(lie: str, success_rate: float) -> LieAdjustments:
    if lie == "light_rough":
        adjustments = LieAdjustments(
            club_selection="Club up 1-2 clubs" if success_rate < 0.7 else "Club up 1 club",
            technique=["Steeper angle of attack", "Ball position slightly back"],
            strategy="Prioritize clean contact over distance",
        )
    else:
        adjustments = _ADJUSTMENTS.get(lie, _STANDARD_ADJUSTMENTS)

    if success_rate < CAUTION_SUCCESS_RATE:
        adjustments = adjustments.model_copy(
            update={"strategy": "Extra conservative - focus on safe recovery"}
        )
    return adjustments
