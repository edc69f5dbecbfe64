import re
from datetime import datetime
from enum import Enum
from pydantic import Field, field_validator, model_validator
from typing import Optional

from .base import BaseGolfModel


class ShotCategory(str, Enum):
    """Phase of play a shot belongs to."""
    TEE = "tee"
    APPROACH = "approach"
    AROUND_GREEN = "around_green"
    PUTT = "putt"


class ResultZone(str, Enum):
    """Coarse outcome classification recorded for a shot."""
    GOOD = "Good"
    ACCEPTABLE = "Acceptable"
    POOR = "Poor"
    OB = "OB"
    HAZARD = "Hazard"
    LOST_BALL = "Lost Ball"

    @classmethod
    def parse(cls, value) -> Optional["ResultZone"]:
        """Case-insensitive lookup; unknown labels return None."""
        if value is None or isinstance(value, cls):
            return value
        wanted = str(value).strip().lower()
        for zone in cls:
            if zone.value.lower() == wanted:
                return zone
        return None


SUCCESS_ZONES = frozenset({ResultZone.GOOD, ResultZone.ACCEPTABLE})


class LateralMiss(str, Enum):
    FAR_LEFT = "far_left"
    LEFT = "left"
    ON_LINE = "on_line"
    RIGHT = "right"
    FAR_RIGHT = "far_right"

    @property
    def is_left(self) -> bool:
        return self in (LateralMiss.FAR_LEFT, LateralMiss.LEFT)

    @property
    def is_right(self) -> bool:
        return self in (LateralMiss.FAR_RIGHT, LateralMiss.RIGHT)


class DistanceMiss(str, Enum):
    FAR_SHORT = "far_short"
    SHORT = "short"
    ON_DISTANCE = "on_distance"
    LONG = "long"
    FAR_LONG = "far_long"

    @property
    def is_short(self) -> bool:
        return self in (DistanceMiss.FAR_SHORT, DistanceMiss.SHORT)

    @property
    def is_long(self) -> bool:
        return self in (DistanceMiss.FAR_LONG, DistanceMiss.LONG)


def normalize_label(value) -> Optional[str]:
    """Canonical lowercase snake_case form of a free-text label.

    "Heavy rough" -> "heavy_rough", "Tee box" -> "tee_box". Blank -> None.
    Every lie comparison in the project goes through this function.
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    text = re.sub(r"[\s\-]+", "_", str(value).strip().lower())
    return text or None


normalize_lie = normalize_label


def _parse_enum(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    label = normalize_label(value)
    for member in enum_cls:
        if member.value == label:
            return member
    return None


class ShotDetails(BaseGolfModel):
    """Optional advanced fields recorded with a shot.

    Every field may be missing; unknown labels are dropped to None rather
    than rejected so that partially-entered shots still load.
    """
    shot_shape: Optional[str] = None
    trajectory: Optional[str] = None
    contact_quality: Optional[str] = None
    distance_error: Optional[DistanceMiss] = None
    lateral_error: Optional[LateralMiss] = None

    @field_validator('shot_shape', 'trajectory', 'contact_quality', mode='before')
    @classmethod
    def _normalize_text(cls, v):
        return normalize_label(v)

    @field_validator('distance_error', mode='before')
    @classmethod
    def _parse_distance_error(cls, v):
        return _parse_enum(DistanceMiss, v)

    @field_validator('lateral_error', mode='before')
    @classmethod
    def _parse_lateral_error(cls, v):
        return _parse_enum(LateralMiss, v)

    @property
    def is_pure_contact(self) -> bool:
        return self.contact_quality == "pure"


class Shot(BaseGolfModel):
    """One recorded stroke, keyed by (round_id, hole_number, shot_number)."""
    id: Optional[str] = None
    round_id: Optional[str] = None
    hole_number: int = Field(..., ge=1, le=18)
    shot_number: int = Field(..., ge=1)
    category: ShotCategory
    club: Optional[str] = None
    start_lie: Optional[str] = None
    start_distance_to_hole: Optional[int] = Field(None, ge=0)
    end_lie: Optional[str] = None
    end_distance_to_hole: Optional[int] = Field(None, ge=0)
    result_zone: Optional[ResultZone] = None
    penalty_strokes: Optional[int] = Field(None, ge=0)
    holed: bool = False
    details: ShotDetails = Field(default_factory=ShotDetails)
    created_at: Optional[datetime] = None

    @field_validator('start_lie', 'end_lie', mode='before')
    @classmethod
    def _normalize_lie(cls, v):
        return normalize_lie(v)

    @field_validator('result_zone', mode='before')
    @classmethod
    def _parse_result_zone(cls, v):
        return ResultZone.parse(v)

    @field_validator('holed', mode='before')
    @classmethod
    def _null_holed(cls, v):
        return bool(v) if v is not None else False

    @model_validator(mode='before')
    @classmethod
    def _holed_ends_in_cup(cls, data):
        if isinstance(data, dict) and data.get('holed') and data.get('end_distance_to_hole') is None:
            data = {**data, 'end_distance_to_hole': 0}
        return data

    @model_validator(mode='after')
    def validate_holed_distance(self):
        if self.holed and self.end_distance_to_hole not in (None, 0):
            raise ValueError(
                f"Holed shot must end at distance 0, got {self.end_distance_to_hole}"
            )
        return self

    @property
    def is_putt(self) -> bool:
        return self.category == ShotCategory.PUTT

    @property
    def distance_gained(self) -> Optional[int]:
        """Yards advanced toward the hole, when both distances are known."""
        if self.start_distance_to_hole is None or self.end_distance_to_hole is None:
            return None
        return self.start_distance_to_hole - self.end_distance_to_hole

    @property
    def is_success(self) -> bool:
        """Good or Acceptable outcome."""
        return self.result_zone in SUCCESS_ZONES

    @property
    def lateral_error(self) -> Optional[LateralMiss]:
        return self.details.lateral_error

    @property
    def distance_error(self) -> Optional[DistanceMiss]:
        return self.details.distance_error
