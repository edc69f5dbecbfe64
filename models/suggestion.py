from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from .base import ReadModel
from .shot import ShotCategory, normalize_lie


class WindDirection(str, Enum):
    INTO = "into"
    DOWN = "down"
    CROSS = "cross"
    CALM = "calm"


class WindConditions(BaseModel):
    speed: float = Field(0.0, ge=0)  # mph
    direction: WindDirection = WindDirection.CALM


class SuggestionContext(BaseModel):
    """Situational input for a club recommendation."""
    distance_to_pin: float = Field(..., ge=0)
    lie: Optional[str] = None
    shot_category: ShotCategory
    wind: Optional[WindConditions] = None

    @field_validator('lie', mode='before')
    @classmethod
    def _normalize_lie(cls, v):
        return normalize_lie(v)


class ClubSuggestion(ReadModel):
    club: str
    confidence: float
    average_distance: int
    success_rate: int  # percent
    sample_size: int
    reasoning: str
    source: str = "history"  # history | reference | basic


class WindAdjustment(ReadModel):
    club_adjustment: str
    distance_adjustment: float  # yards of carry gained (+) or lost (-)
