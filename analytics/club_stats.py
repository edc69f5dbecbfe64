from __future__ import annotations

import statistics
from typing import Dict, Iterable, List, Tuple

from models import ClubPerformanceStat, ResultZone, Shot, ShotCategory
from models.performance import TrendPoint

MIN_SAMPLES = 3
MIN_DISTANCE = 0     # exclusive
MAX_DISTANCE = 400   # exclusive; anything longer is a data-entry error
TREND_POINTS = 10

FAIRWAY = "fairway"
GREEN = "green"


def _valid_distance(shot: Shot):
    distance = shot.distance_gained
    if distance is None or not MIN_DISTANCE < distance < MAX_DISTANCE:
        return None
    return distance


def is_good_shot(shot: Shot, category: ShotCategory) -> bool:
    """Category-aware "good" classification used for accuracy."""
    if category == ShotCategory.TEE:
        return shot.end_lie == FAIRWAY or shot.result_zone == ResultZone.GOOD
    if category == ShotCategory.APPROACH:
        return shot.end_lie == GREEN or shot.result_zone == ResultZone.GOOD
    return shot.is_success


def group_by_club(history: Iterable[Shot]) -> Dict[Tuple[str, ShotCategory], List[Shot]]:
    """Group shots by (club, category), skipping shots with no club."""
    groups: Dict[Tuple[str, ShotCategory], List[Shot]] = {}
    for shot in history:
        if not shot.club:
            continue
        groups.setdefault((shot.club, shot.category), []).append(shot)
    return groups


def _trends(shots: List[Shot]) -> List[TrendPoint]:
    dated = sorted(
        (s for s in shots if s.created_at is not None and _valid_distance(s) is not None),
        key=lambda s: s.created_at,
    )
    return [
        TrendPoint(date=s.created_at.date(), distance=_valid_distance(s))
        for s in dated[-TREND_POINTS:]
    ]


def get_club_performance(history: Iterable[Shot]) -> List[ClubPerformanceStat]:
    """
    Per (club, category) distance, accuracy and dispersion.

    Output rows:
    - average_distance: mean yards gained over shots in (0, 400) yards
    - dispersion: population standard deviation of those distances
    - accuracy: fraction of the group's shots classified as good
    - trends: last 10 (date, distance) pairs, oldest first

    Groups with fewer than three valid distances are omitted.
    """
    results: List[ClubPerformanceStat] = []
    for (club, category), shots in group_by_club(history).items():
        distances = [d for d in (_valid_distance(s) for s in shots) if d is not None]
        if len(distances) < MIN_SAMPLES:
            continue

        good = sum(1 for s in shots if is_good_shot(s, category))
        results.append(
            ClubPerformanceStat(
                club=club,
                category=category.value,
                average_distance=round(statistics.fmean(distances), 1),
                shots=len(shots),
                accuracy=good / len(shots),
                dispersion=round(statistics.pstdev(distances), 1),
                trends=_trends(shots),
            )
        )

    results.sort(key=lambda stat: (-stat.shots, stat.club, stat.category))
    return results
