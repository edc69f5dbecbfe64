"""Course-management strategy for the next shot.

Rules are applied in a fixed order and later rules override earlier ones,
so the score-pace rule has the final word.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from analytics.reference import DEMO_PATTERNS
from models import (
    PerformanceInsight,
    PerformancePatterns,
    PerformanceTendency,
    PressureLevel,
    Shot,
    ShotCategory,
    ShotDecision,
    SituationContext,
    Strategy,
)
from models.decision import AlternativeStrategy, RiskAssessment, RiskFactors

logger = logging.getLogger(__name__)

# Real patterns replace the demo set only above this many shots
MIN_REAL_HISTORY = 20
MIN_PATTERN_SHOTS = 10
LONG_APPROACH_YARDS = 100
CLUTCH_HOLE = 15

LONG_SHOT_YARDS = 200
HIGH_WIND_MPH = 15
EARLY_ROUND_HOLES = 3

DISTANCE_RISK = 0.2
LIE_RISK = 0.3
WATER_RISK = 0.4
OB_RISK = 0.3
WIND_RISK = 0.2
EARLY_ROUND_RISK = 0.1

DEFAULT_CONFIDENCE = 0.7
HIGH_RISK = 0.6
LOW_RISK = 0.3
AGGRESSIVE_CONFIDENCE = 0.75
CLUTCH_THRESHOLD = 0.7
LAYUP_MARGIN = 50
APPROACH_MATCH_YARDS = 150
CHASING_PAR = 3
PROTECTING_SCORE = -1
MAX_REASONS = 3

AGGRESSIVE_FACTOR = 0.8
CONSERVATIVE_FACTOR = 1.1
LAYUP_PROBABILITY = 0.85
MAX_PROBABILITY = 0.95

_ALTERNATIVES = {
    Strategy.AGGRESSIVE: AlternativeStrategy(
        strategy="Conservative approach to center of green",
        pros=["Higher success rate", "Avoids big numbers", "Stress-free shot"],
        cons=["Less birdie potential", "Longer putt likely"],
    ),
    Strategy.CONSERVATIVE: AlternativeStrategy(
        strategy="Aggressive attack at pin",
        pros=["Great birdie opportunity", "Shorter putt", "Confidence boost"],
        cons=["Higher miss rate", "Penalty risk", "Pressure situation"],
    ),
    Strategy.LAYUP: AlternativeStrategy(
        strategy="Go for it with longer club",
        pros=["Potential eagle/birdie", "Fewer total shots", "Momentum builder"],
        cons=["High risk of penalty", "Difficult recovery", "Pressure shot"],
    ),
}
_STAY_THE_COURSE = AlternativeStrategy(
    strategy="Stick with current plan",
    pros=["Confidence in decision"],
    cons=["No backup considered"],
)


def _difficult_lie(lie: Optional[str]) -> bool:
    return bool(lie) and ("rough" in lie or "bunker" in lie)


def _success_rate(shots: Sequence[Shot]) -> float:
    return sum(1 for s in shots if s.is_success) / len(shots)


def _graded(rate: float, strong: str, decent: str, weak: str, *, good: float, fair: float) -> str:
    if rate > good:
        return strong
    if rate > fair:
        return decent
    return weak


def analyze_real_performance(history: Sequence[Shot]) -> PerformancePatterns:
    """Derive tendencies and clutch rate from the player's own shots."""
    tendencies: List[PerformanceTendency] = []
    pressure_response = DEMO_PATTERNS.pressure_response

    approaches = [
        s for s in history
        if s.category == ShotCategory.APPROACH
        and (s.start_distance_to_hole or 0) >= LONG_APPROACH_YARDS
    ]
    if len(approaches) > MIN_PATTERN_SHOTS:
        rate = _success_rate(approaches)
        tendencies.append(PerformanceTendency(
            condition="approach_shots_long",
            success_rate=rate,
            pattern=_graded(
                rate,
                "Strong long approach game",
                "Decent long approach shots",
                "Struggles with long approach shots",
                good=0.75, fair=0.6,
            ),
        ))

    late = [s for s in history if s.hole_number >= CLUTCH_HOLE]
    if len(late) > MIN_PATTERN_SHOTS:
        pressure_response = pressure_response.model_copy(
            update={"clutch_performance": _success_rate(late)}
        )

    trouble = [s for s in history if _difficult_lie(s.start_lie)]
    if len(trouble) > MIN_PATTERN_SHOTS:
        rate = _success_rate(trouble)
        tendencies.append(PerformanceTendency(
            condition="difficult_lies_rough",
            success_rate=rate,
            pattern=_graded(
                rate,
                "Handles difficult lies well",
                "Decent from difficult lies",
                "Struggles from difficult lies",
                good=0.7, fair=0.5,
            ),
        ))

    return PerformancePatterns(
        tendencies=tendencies,
        course_management=DEMO_PATTERNS.course_management,
        pressure_response=pressure_response,
    )


def assess_risk_factors(context: SituationContext) -> RiskFactors:
    score = 0.0
    factors: List[str] = []

    if context.distance_to_pin > LONG_SHOT_YARDS:
        score += DISTANCE_RISK
        factors.append("Long distance increases miss probability")
    if _difficult_lie(context.lie):
        score += LIE_RISK
        factors.append("Difficult lie reduces control")
    if context.hazards and context.hazards.water:
        score += WATER_RISK
        factors.append("Water hazard penalty risk")
    if context.hazards and context.hazards.ob:
        score += OB_RISK
        factors.append("Out of bounds penalty risk")
    if context.weather and context.weather.wind_speed > HIGH_WIND_MPH:
        score += WIND_RISK
        factors.append("Strong wind affects ball flight")
    if context.shot_number == 1 and context.hole_number <= EARLY_ROUND_HOLES:
        score += EARLY_ROUND_RISK
        factors.append("Early round - avoid big numbers")

    return RiskFactors(score=min(round(score, 2), 1.0), factors=factors)


def assess_pressure_level(context: SituationContext) -> PressureLevel:
    """Pressure supplied by the caller wins; otherwise a points model decides."""
    if context.pressure is not None:
        return context.pressure

    points = 0
    if context.hole_number >= 15:
        points += 2
    elif context.hole_number >= 10:
        points += 1

    to_par = context.score_to_par()
    if to_par >= 5:
        points += 2
    elif to_par >= 2:
        points += 1
    elif to_par <= -2:
        points += 1

    if context.shot_number >= 4:
        points += 2
    elif context.shot_number == 3:
        points += 1

    if context.hazards and (context.hazards.water or context.hazards.ob):
        points += 1

    if points >= 4:
        return PressureLevel.HIGH
    if points >= 2:
        return PressureLevel.MEDIUM
    return PressureLevel.LOW


def _relevant_tendency(
    context: SituationContext, patterns: PerformancePatterns, pressure: PressureLevel
) -> Optional[PerformanceTendency]:
    for tendency in patterns.tendencies:
        condition = tendency.condition
        if context.distance_to_pin > APPROACH_MATCH_YARDS and "approach" in condition:
            return tendency
        if pressure == PressureLevel.HIGH and "pressure" in condition:
            return tendency
        if context.lie and "rough" in context.lie and "rough" in condition:
            return tendency
    return None


def risk_assessment(
    context: SituationContext, strategy: Strategy, confidence: float
) -> RiskAssessment:
    probability = confidence
    worst, best = "Miss the green", "Pin high"
    hazards = context.hazards

    if strategy == Strategy.AGGRESSIVE:
        probability = confidence * AGGRESSIVE_FACTOR
        if hazards and hazards.water:
            worst = "Water hazard"
        elif hazards and hazards.ob:
            worst = "Out of bounds"
        else:
            worst = "Poor lie for next shot"
        best = "Close to pin, great birdie chance"
    elif strategy == Strategy.CONSERVATIVE:
        probability = confidence * CONSERVATIVE_FACTOR
        worst, best = "Long putt", "Safe on green, good par chance"
    elif strategy == Strategy.LAYUP:
        probability = LAYUP_PROBABILITY
        worst, best = "Poor layup position", "Perfect wedge distance"

    return RiskAssessment(
        success_probability=min(probability, MAX_PROBABILITY),
        worst_case_scenario=worst,
        best_case_scenario=best,
    )


def alternative_strategy(strategy: Strategy) -> AlternativeStrategy:
    return _ALTERNATIVES.get(strategy, _STAY_THE_COURSE)


class ShotDecisionEngine:
    """Recommends aggressive, conservative or layup play."""

    def __init__(self, demo_patterns: PerformancePatterns = DEMO_PATTERNS):
        self._demo_patterns = demo_patterns

    def patterns_for(self, history: Sequence[Shot]) -> PerformancePatterns:
        if len(history) > MIN_REAL_HISTORY:
            return analyze_real_performance(history)
        logger.debug("only %d shots of history, using demo patterns", len(history))
        return self._demo_patterns

    def decide(
        self, context: SituationContext, history: Sequence[Shot] = ()
    ) -> ShotDecision:
        patterns = self.patterns_for(history)
        risk = assess_risk_factors(context)
        pressure = assess_pressure_level(context)

        reasoning: List[str] = []
        strategy = Strategy.CONSERVATIVE
        confidence = DEFAULT_CONFIDENCE

        tendency = _relevant_tendency(context, patterns, pressure)
        if tendency is not None:
            confidence = tendency.success_rate
            reasoning.append(tendency.pattern)

        if risk.score > HIGH_RISK:
            strategy = Strategy.CONSERVATIVE
            reasoning.append("High risk situation favors conservative play")
            reasoning.extend(risk.factors[:2])
        elif risk.score < LOW_RISK and confidence > AGGRESSIVE_CONFIDENCE:
            strategy = Strategy.AGGRESSIVE
            reasoning.append("Low risk with good success rate supports aggressive play")

        if (pressure == PressureLevel.HIGH
                and patterns.pressure_response.clutch_performance < CLUTCH_THRESHOLD):
            strategy = Strategy.CONSERVATIVE
            reasoning.append("Conservative approach recommended under pressure")

        layup = patterns.course_management.layup_distance
        if (context.distance_to_pin > LONG_SHOT_YARDS and context.shot_number == 2
                and layup and abs(context.distance_to_pin - layup) > LAYUP_MARGIN):
            strategy = Strategy.LAYUP
            reasoning.append(f"Consider laying up to preferred {layup} yard distance")

        to_par = context.score_to_par()
        if to_par >= CHASING_PAR:
            strategy = Strategy.AGGRESSIVE
            reasoning.append("Need to be aggressive to get back to par")
        elif to_par <= PROTECTING_SCORE:
            strategy = Strategy.CONSERVATIVE
            reasoning.append("Protect good score with conservative play")

        return ShotDecision(
            recommendation=strategy,
            confidence=confidence,
            reasoning=reasoning[:MAX_REASONS],
            alternative_strategy=alternative_strategy(strategy),
            risk_assessment=risk_assessment(context, strategy, confidence),
        )

    @staticmethod
    def basic_decision(context: SituationContext) -> ShotDecision:
        """Distance-only recommendation for when analysis cannot run."""
        strategy = Strategy.CONSERVATIVE
        reasoning = ["Basic recommendation based on distance and lie"]
        if context.distance_to_pin < 100:
            strategy = Strategy.TARGET_SPECIFIC
            reasoning.append("Short distance allows for precision")
        elif context.distance_to_pin > LONG_SHOT_YARDS and context.shot_number == 2:
            strategy = Strategy.LAYUP
            reasoning.append("Long distance suggests layup strategy")

        return ShotDecision(
            recommendation=strategy,
            confidence=0.6,
            reasoning=reasoning,
            risk_assessment=RiskAssessment(
                success_probability=0.7,
                worst_case_scenario="Miss green",
                best_case_scenario="Hit green",
            ),
            degraded=True,
        )

    def performance_insights(self, history: Sequence[Shot] = ()) -> List[PerformanceInsight]:
        """Coaching insights, one per known tendency."""
        return [
            PerformanceInsight(
                category="Performance Tendency",
                pattern=tendency.pattern,
                frequency=round(tendency.success_rate, 2),
                impact=_impact(tendency.success_rate),
                recommendation=_insight_recommendation(tendency),
            )
            for tendency in self.patterns_for(history).tendencies
        ]


def _impact(success_rate: float) -> str:
    if success_rate > 0.7:
        return "positive"
    if success_rate < 0.5:
        return "negative"
    return "neutral"


def _insight_recommendation(tendency: PerformanceTendency) -> str:
    condition, rate = tendency.condition, tendency.success_rate
    if "pressure" in condition:
        if rate < 0.7:
            return "Practice pressure situations and develop pre-shot routine"
        return "Continue using current pressure management techniques"
    if "rough" in condition:
        if rate < 0.6:
            return "Focus on rough lie practice and club-up strategy"
        return "Good rough play - maintain current technique"
    if "approach" in condition:
        if rate < 0.7:
            return "Work on approach shot accuracy and distance control"
        return "Strong approach game - keep it up"
    return "Continue current approach"
