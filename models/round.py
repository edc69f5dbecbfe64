from datetime import datetime
from pydantic import Field
from typing import List, Optional

from .base import BaseGolfModel
from .round_hole import RoundHole


class Round(BaseGolfModel):
    """A round of golf and the per-hole aggregates derived from its shots."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    course_id: Optional[str] = None
    started_at: Optional[datetime] = None
    status: str = "in_progress"
    holes: List[RoundHole] = Field(default_factory=list)

    # Stored totals, rewritten by hole recomputation
    total_score: Optional[int] = None
    par_total: Optional[int] = None

    def get_hole(self, hole_number: int) -> Optional[RoundHole]:
        """Get the aggregate for a specific hole, if one exists."""
        for hole in self.holes:
            if hole.hole_number == hole_number:
                return hole
        return None

    def calculate_total_score(self) -> int:
        """Sum of gross scores; unscored holes count as 0."""
        return sum(h.gross_score or 0 for h in self.holes)

    def calculate_par_total(self) -> int:
        return sum(h.par for h in self.holes)

    def get_total_score(self) -> int:
        """Stored total when present, else calculated from holes."""
        if self.total_score is not None:
            return self.total_score
        return self.calculate_total_score()

    def holes_played(self) -> int:
        return sum(1 for h in self.holes if h.gross_score is not None)

    def get_total_putts(self) -> Optional[int]:
        played = [h.putts for h in self.holes if h.gross_score is not None]
        return sum(played) if played else None

    def get_total_gir(self) -> Optional[int]:
        played = [h for h in self.holes if h.gross_score is not None]
        return sum(1 for h in played if h.gir) if played else None

    def get_fairways_hit(self) -> Optional[int]:
        """Fairways hit on scored par 4s and 5s."""
        eligible = [h for h in self.holes if h.gross_score is not None and h.par >= 4]
        return sum(1 for h in eligible if h.fir) if eligible else None

    def score_to_par(self) -> Optional[int]:
        """Total relative to par over the holes that have a score."""
        played = [h for h in self.holes if h.gross_score is not None]
        if not played:
            return None
        return sum(h.gross_score - h.par for h in played)

    def is_complete(self) -> bool:
        if not self.holes:
            return False
        expected = 18 if len(self.holes) > 9 else 9
        return self.holes_played() == expected
