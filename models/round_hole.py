from pydantic import Field
from typing import Optional

from .base import BaseGolfModel

DEFAULT_PAR = 4


class RoundHole(BaseGolfModel):
    """Per-hole scoring aggregate derived from the hole's shot set."""
    id: Optional[str] = None
    round_id: Optional[str] = None
    hole_number: int = Field(..., ge=1, le=18)
    par: int = Field(DEFAULT_PAR, ge=3, le=6)
    gross_score: Optional[int] = Field(None, ge=1)
    putts: int = Field(0, ge=0)
    penalties: int = Field(0, ge=0)
    fir: bool = False
    gir: bool = False

    def to_par(self) -> Optional[int]:
        """Score relative to par (+2, -1, etc.)."""
        if self.gross_score is None:
            return None
        return self.gross_score - self.par

    def get_score_type(self) -> Optional[str]:
        """Name for this score (eagle, birdie, par, bogey, etc.)."""
        relative = self.to_par()
        if relative is None:
            return None
        if relative <= -3:
            return "albatross"
        if relative >= 5:
            return "quintuple+"
        return {
            -2: "eagle",
            -1: "birdie",
            0: "par",
            1: "bogey",
            2: "double bogey",
            3: "triple bogey",
            4: "quadruple bogey",
        }[relative]
