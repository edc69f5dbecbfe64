from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional

from .shot import ResultZone, Shot, ShotCategory, ShotDetails

FEET_PER_YARD = 3


class DistanceUnit(str, Enum):
    YARDS = "yards"
    FEET = "feet"


# Short result words produced by the speech parser
_RESULT_WORDS = {
    "good": ResultZone.GOOD,
    "acceptable": ResultZone.ACCEPTABLE,
    "poor": ResultZone.POOR,
    "ob": ResultZone.OB,
    "hazard": ResultZone.HAZARD,
    "lost": ResultZone.LOST_BALL,
}


class ShotIntent(BaseModel):
    """Already-parsed voice entry. Transcription happens upstream."""
    original_text: Optional[str] = None
    club: Optional[str] = None
    distance: Optional[float] = Field(None, ge=0)
    distance_unit: DistanceUnit = DistanceUnit.YARDS
    shot_shape: Optional[str] = None
    trajectory: Optional[str] = None
    result: Optional[str] = None
    lie: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)

    def distance_in_yards(self) -> Optional[int]:
        if self.distance is None:
            return None
        if self.distance_unit == DistanceUnit.FEET:
            return round(self.distance / FEET_PER_YARD)
        return round(self.distance)

    def result_zone(self) -> Optional[ResultZone]:
        if self.result is None:
            return None
        return _RESULT_WORDS.get(self.result.strip().lower()) or ResultZone.parse(self.result)

    def to_shot(
        self,
        *,
        round_id: str,
        hole_number: int,
        shot_number: int,
        category: ShotCategory,
    ) -> Shot:
        """Draft a Shot from the intent. The spoken distance is the start distance."""
        return Shot(
            round_id=round_id,
            hole_number=hole_number,
            shot_number=shot_number,
            category=category,
            club=self.club.title() if self.club else None,
            start_lie=self.lie,
            start_distance_to_hole=self.distance_in_yards(),
            result_zone=self.result_zone(),
            details=ShotDetails(shot_shape=self.shot_shape, trajectory=self.trajectory),
        )
