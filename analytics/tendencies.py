"""Directional, distance and category bias detection over shot history.

Each detector has its own minimum sample size and stays silent below it;
a silent detector is not an error.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Optional

from analytics.club_stats import is_good_shot
from models import Shot, ShotCategory, TendencyInsight

LATERAL_MIN_SAMPLES = 5
LATERAL_BIAS_THRESHOLD = 0.4
DISTANCE_MIN_SAMPLES = 5
SHORT_BIAS_THRESHOLD = 0.4
LONG_BIAS_THRESHOLD = 0.35
TEE_MIN_SAMPLES = 3
TEE_NEEDS_WORK_BELOW = 0.5
TEE_STRONG_ABOVE = 0.7
APPROACH_MIN_SAMPLES = 5
APPROACH_FOCUS_BELOW = 0.4

MAX_BIAS_CONFIDENCE = 0.9
ACCURACY_CONFIDENCE = 0.8


def percent(fraction: float) -> int:
    """Fraction -> whole percent, rounding halves up."""
    return int(math.floor(fraction * 100 + 0.5))


def lateral_tendency(shots: List[Shot]) -> Optional[TendencyInsight]:
    sample = [s for s in shots if not s.is_putt and s.lateral_error is not None]
    if len(sample) < LATERAL_MIN_SAMPLES:
        return None

    left = sum(1 for s in sample if s.lateral_error.is_left) / len(sample)
    right = sum(1 for s in sample if s.lateral_error.is_right) / len(sample)

    if left > LATERAL_BIAS_THRESHOLD:
        return TendencyInsight(
            category="Lateral Tendency",
            description=f"You tend to miss left on {percent(left)}% of shots",
            confidence=min(left, MAX_BIAS_CONFIDENCE),
            recommendation="Focus on alignment and setup. Consider aiming slightly right to compensate.",
            sample_size=len(sample),
        )
    if right > LATERAL_BIAS_THRESHOLD:
        return TendencyInsight(
            category="Lateral Tendency",
            description=f"You tend to miss right on {percent(right)}% of shots",
            confidence=min(right, MAX_BIAS_CONFIDENCE),
            recommendation="Check your grip and swing path. Consider aiming slightly left.",
            sample_size=len(sample),
        )
    return None


def distance_tendency(shots: List[Shot]) -> Optional[TendencyInsight]:
    sample = [s for s in shots if not s.is_putt and s.distance_error is not None]
    if len(sample) < DISTANCE_MIN_SAMPLES:
        return None

    short = sum(1 for s in sample if s.distance_error.is_short) / len(sample)
    long_ = sum(1 for s in sample if s.distance_error.is_long) / len(sample)

    if short > SHORT_BIAS_THRESHOLD:
        return TendencyInsight(
            category="Distance Control",
            description=f"You tend to come up short on {percent(short)}% of shots",
            confidence=min(short, MAX_BIAS_CONFIDENCE),
            recommendation="Consider taking one more club or focusing on solid contact.",
            sample_size=len(sample),
        )
    if long_ > LONG_BIAS_THRESHOLD:
        return TendencyInsight(
            category="Distance Control",
            description=f"You tend to fly shots long {percent(long_)}% of the time",
            confidence=min(long_, MAX_BIAS_CONFIDENCE),
            recommendation="Consider club down or focus on tempo and rhythm.",
            sample_size=len(sample),
        )
    return None


def tee_tendency(shots: List[Shot]) -> Optional[TendencyInsight]:
    tee_shots = [s for s in shots if s.category == ShotCategory.TEE]
    if len(tee_shots) < TEE_MIN_SAMPLES:
        return None

    accuracy = sum(1 for s in tee_shots if is_good_shot(s, ShotCategory.TEE)) / len(tee_shots)
    if accuracy < TEE_NEEDS_WORK_BELOW:
        return TendencyInsight(
            category="Tee Shots",
            description=f"Fairway accuracy: {percent(accuracy)}% - needs improvement",
            confidence=ACCURACY_CONFIDENCE,
            recommendation="Consider using a more lofted driver or focus on accuracy over distance.",
            sample_size=len(tee_shots),
        )
    if accuracy > TEE_STRONG_ABOVE:
        return TendencyInsight(
            category="Tee Shots",
            description=f"Excellent fairway accuracy: {percent(accuracy)}%",
            confidence=ACCURACY_CONFIDENCE,
            recommendation="Great driving! Consider being more aggressive with approach shots.",
            sample_size=len(tee_shots),
        )
    return None


def approach_tendency(shots: List[Shot]) -> Optional[TendencyInsight]:
    approaches = [s for s in shots if s.category == ShotCategory.APPROACH]
    if len(approaches) < APPROACH_MIN_SAMPLES:
        return None

    accuracy = sum(
        1 for s in approaches if is_good_shot(s, ShotCategory.APPROACH)
    ) / len(approaches)
    if accuracy < APPROACH_FOCUS_BELOW:
        return TendencyInsight(
            category="Approach Shots",
            description=f"Green in regulation: {percent(accuracy)}% - focus area",
            confidence=ACCURACY_CONFIDENCE,
            recommendation="Work on distance control and club selection for approaches.",
            sample_size=len(approaches),
        )
    return None


DETECTORS = (lateral_tendency, distance_tendency, tee_tendency, approach_tendency)


def get_tendencies(history: Iterable[Shot]) -> List[TendencyInsight]:
    """Run every detector; each contributes at most one insight."""
    shots = list(history)
    insights: List[TendencyInsight] = []
    for detector in DETECTORS:
        insight = detector(shots)
        if insight is not None:
            insights.append(insight)
    return insights
