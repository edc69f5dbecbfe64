from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from models.round import Round
from models.round_hole import RoundHole

SCORE_TYPE_ORDER = [
    "eagle",
    "birdie",
    "par",
    "bogey",
    "double_bogey",
    "triple_bogey",
    "quad_bogey",
]


def _scored_holes(round_obj: Round) -> List[RoundHole]:
    return [hole for hole in round_obj.holes if hole.gross_score is not None]


def round_summary(round_obj: Round) -> Dict[str, Optional[float]]:
    """Compute summary metrics for a single round."""
    holes = _scored_holes(round_obj)
    holes_played = len(holes)
    total_putts = round_obj.get_total_putts()
    total_gir = round_obj.get_total_gir()
    fairways_hit = round_obj.get_fairways_hit()
    fairway_holes = sum(1 for h in holes if h.par >= 4)

    gir_percentage: Optional[float] = None
    putts_per_hole: Optional[float] = None
    fir_percentage: Optional[float] = None
    if holes_played:
        gir_percentage = (total_gir / holes_played) * 100 if total_gir is not None else None
        putts_per_hole = total_putts / holes_played if total_putts is not None else None
    if fairway_holes and fairways_hit is not None:
        fir_percentage = fairways_hit / fairway_holes * 100

    return {
        "holes_played": float(holes_played),
        "total_strokes": float(round_obj.calculate_total_score()),
        "to_par": round_obj.score_to_par(),
        "total_putts": float(total_putts) if total_putts is not None else None,
        "total_gir": float(total_gir) if total_gir is not None else None,
        "gir_percentage": gir_percentage,
        "fir_percentage": fir_percentage,
        "putts_per_hole": putts_per_hole,
        "penalties": float(sum(h.penalties for h in holes)),
    }


def putts_per_round(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Return putt totals by round for plotting/reporting."""
    results: List[Dict[str, Any]] = []
    for index, round_obj in enumerate(rounds, start=1):
        results.append(
            {
                "round_index": index,
                "round_id": round_obj.id,
                "total_putts": round_obj.get_total_putts(),
                "holes_played": round_obj.holes_played(),
            }
        )
    return results


def score_trend(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Return total score trend data by round."""
    results: List[Dict[str, Any]] = []
    for index, round_obj in enumerate(rounds, start=1):
        results.append(
            {
                "round_index": index,
                "round_id": round_obj.id,
                "total_score": round_obj.get_total_score(),
                "to_par": round_obj.score_to_par(),
            }
        )
    return results


def gir_per_round(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Return GIR totals and percentage by round."""
    results: List[Dict[str, Any]] = []
    for index, round_obj in enumerate(rounds, start=1):
        holes_played = round_obj.holes_played()
        total_gir = round_obj.get_total_gir()
        gir_percentage: Optional[float] = None
        if holes_played and total_gir is not None:
            gir_percentage = (total_gir / holes_played) * 100

        results.append(
            {
                "round_index": index,
                "round_id": round_obj.id,
                "total_gir": total_gir,
                "holes_played": holes_played,
                "gir_percentage": gir_percentage,
            }
        )
    return results


def fir_per_round(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Fairways hit by round. Par 3s have no fairway and are not counted."""
    results: List[Dict[str, Any]] = []
    for index, round_obj in enumerate(rounds, start=1):
        eligible = sum(1 for h in _scored_holes(round_obj) if h.par >= 4)
        hit = round_obj.get_fairways_hit()
        results.append(
            {
                "round_index": index,
                "round_id": round_obj.id,
                "fairways_hit": hit,
                "fairway_holes": eligible,
                "fir_percentage": (hit / eligible * 100) if eligible and hit is not None else None,
            }
        )
    return results


def scoring_by_par(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """
    Aggregate scoring performance by hole par (3, 4, 5).

    Output rows:
    - par: 3, 4, or 5
    - average_to_par: mean(strokes - par)
    - average_strokes: mean(strokes)
    - sample_size: number of holes included
    """
    by_par: Dict[int, List[int]] = {}

    for round_obj in rounds:
        for hole in _scored_holes(round_obj):
            if hole.par not in (3, 4, 5):
                continue
            by_par.setdefault(hole.par, []).append(hole.gross_score)

    results: List[Dict[str, Any]] = []
    for par in sorted(by_par):
        strokes = by_par[par]
        avg_strokes = sum(strokes) / len(strokes)
        results.append(
            {
                "par": par,
                "average_to_par": avg_strokes - par,
                "average_strokes": avg_strokes,
                "sample_size": len(strokes),
            }
        )
    return results


def _score_type_from_to_par(to_par: int) -> str:
    if to_par <= -2:
        return "eagle"
    if to_par == -1:
        return "birdie"
    if to_par == 0:
        return "par"
    if to_par == 1:
        return "bogey"
    if to_par == 2:
        return "double_bogey"
    if to_par == 3:
        return "triple_bogey"
    return "quad_bogey"


def score_type_distribution_per_round(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """
    Percentage of holes by score type for each round.

    Eagle includes anything better; anything worse than a quad bogey is
    counted as quad_bogey.
    """
    results: List[Dict[str, Any]] = []

    for index, round_obj in enumerate(rounds, start=1):
        counts = {name: 0 for name in SCORE_TYPE_ORDER}
        holes = _scored_holes(round_obj)
        for hole in holes:
            counts[_score_type_from_to_par(hole.to_par())] += 1

        total = len(holes)
        row: Dict[str, Any] = {
            "round_index": index,
            "round_id": round_obj.id,
            "holes_counted": total,
        }
        for name in SCORE_TYPE_ORDER:
            row[name] = (counts[name] / total * 100.0) if total else 0.0
        results.append(row)

    return results
