from __future__ import annotations

from typing import Iterable, List

from models import HeatMapPoint, LateralMiss, Shot

LATERAL_POSITIONS = {
    LateralMiss.FAR_LEFT: -80,
    LateralMiss.LEFT: -40,
    LateralMiss.ON_LINE: 0,
    LateralMiss.RIGHT: 40,
    LateralMiss.FAR_RIGHT: 80,
}


def lateral_position(shot: Shot) -> float:
    """Lateral x in [-100, 100]; unset lateral error plots on line."""
    if shot.lateral_error is None:
        return 0
    return LATERAL_POSITIONS[shot.lateral_error]


def distance_progress(shot: Shot) -> float:
    """Percent of the remaining distance covered, clamped to [0, 100]."""
    start = shot.start_distance_to_hole or 0
    end = shot.end_distance_to_hole or 0
    if start == 0:
        return 100
    progress = (start - end) / start * 100
    return max(0.0, min(100.0, progress))


def get_heat_map(history: Iterable[Shot]) -> List[HeatMapPoint]:
    """Project every non-putt shot into dispersion space. Putts are left out."""
    return [
        HeatMapPoint(
            x=lateral_position(shot),
            y=distance_progress(shot),
            category=shot.category.value,
            club=shot.club,
            result=shot.result_zone.value if shot.result_zone else "Unknown",
        )
        for shot in history
        if not shot.is_putt
    ]
