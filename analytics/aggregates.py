"""Pure derivation of a hole's scoring aggregate from its shot set."""

from typing import Iterable, Optional

from models import RoundHole, Shot, ShotCategory

FAIRWAY = "fairway"
GREEN = "green"
# Holes shorter than this have no fairway to hit
MIN_FIR_PAR = 4
# Regulation leaves two putts: the green must be reached by shot (par - 2)
REGULATION_PUTTS = 2


def fairway_in_regulation(shots: Iterable[Shot], par: int) -> bool:
    """True iff the tee shot (shot #1) on a par 4+ finished in the fairway."""
    if par < MIN_FIR_PAR:
        return False
    return any(s.shot_number == 1 and s.end_lie == FAIRWAY for s in shots)


def green_in_regulation(shots: Iterable[Shot], par: int) -> bool:
    """True iff some shot numbered <= par - 2 finished on the green."""
    limit = par - REGULATION_PUTTS
    return any(s.shot_number <= limit and s.end_lie == GREEN for s in shots)


def compute_hole_aggregate(
    shots: Iterable[Shot],
    par: int,
    *,
    round_id: Optional[str] = None,
    hole_number: int,
    hole_id: Optional[str] = None,
) -> RoundHole:
    """Derive putts, penalties, gross score, FIR and GIR for one hole.

    The result depends only on the shot set and par, so recomputing over an
    unchanged shot set always yields the same aggregate.
    """
    shots = list(shots)
    putts = sum(1 for s in shots if s.category == ShotCategory.PUTT)
    penalties = sum(s.penalty_strokes or 0 for s in shots)
    last_shot_number = max((s.shot_number for s in shots), default=None)

    gross_score = None
    if last_shot_number is not None:
        gross_score = last_shot_number + penalties

    return RoundHole(
        id=hole_id,
        round_id=round_id,
        hole_number=hole_number,
        par=par,
        gross_score=gross_score,
        putts=putts,
        penalties=penalties,
        fir=fairway_in_regulation(shots, par),
        gir=green_in_regulation(shots, par),
    )
