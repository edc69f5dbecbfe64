from __future__ import annotations

from typing import List, Sequence

from models import ClubPerformanceStat, Shot, ShotSummary
from models.performance import AccuracyTrend

STRONGEST_ACCURACY_WEIGHT = 0.7
STRONGEST_VOLUME_WEIGHT = 0.3
VOLUME_SATURATION = 20
OPPORTUNITY_MIN_SHOTS = 5
TREND_MIN_SHOTS = 10
TREND_THRESHOLD = 0.05


def _strength(stat: ClubPerformanceStat) -> float:
    return (
        STRONGEST_ACCURACY_WEIGHT * stat.accuracy
        + STRONGEST_VOLUME_WEIGHT * stat.shots / VOLUME_SATURATION
    )


def strongest_club(club_stats: Sequence[ClubPerformanceStat]) -> str:
    if not club_stats:
        return "N/A"
    return max(club_stats, key=_strength).club


def biggest_opportunity(club_stats: Sequence[ClubPerformanceStat]) -> str:
    candidates = [s for s in club_stats if s.shots >= OPPORTUNITY_MIN_SHOTS]
    if not candidates:
        return "N/A"
    return min(candidates, key=lambda s: s.accuracy).club


def accuracy_trend(history: Sequence[Shot]) -> AccuracyTrend:
    """Compare Good/Acceptable rates of the older and newer halves."""
    if len(history) < TREND_MIN_SHOTS:
        return AccuracyTrend.STABLE

    dated: List[Shot] = sorted(
        history, key=lambda s: (s.created_at is not None, s.created_at or 0)
    )
    midpoint = len(dated) // 2
    older, newer = dated[:midpoint], dated[midpoint:]
    delta = (
        sum(1 for s in newer if s.is_success) / len(newer)
        - sum(1 for s in older if s.is_success) / len(older)
    )
    if delta > TREND_THRESHOLD:
        return AccuracyTrend.IMPROVING
    if delta < -TREND_THRESHOLD:
        return AccuracyTrend.DECLINING
    return AccuracyTrend.STABLE


def get_shot_summary(
    history: Sequence[Shot], club_stats: Sequence[ClubPerformanceStat]
) -> ShotSummary:
    return ShotSummary(
        total_shots=len(history),
        rounds_analyzed=len({s.round_id for s in history if s.round_id}),
        strongest_club=strongest_club(club_stats),
        biggest_opportunity=biggest_opportunity(club_stats),
        accuracy_trend=accuracy_trend(history),
    )
