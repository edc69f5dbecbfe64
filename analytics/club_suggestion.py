"""Context-aware club ranking from historical or reference club stats."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from analytics.reference import DEFAULT_CLUB_REFERENCE, ClubPrior, ClubReference
from models import ClubSuggestion, Shot, ShotCategory, SuggestionContext, WindAdjustment
from models.suggestion import WindConditions, WindDirection


DISTANCE_WEIGHT = 0.6
ACCURACY_WEIGHT = 0.3
RELIABILITY_WEIGHT = 0.1
DISTANCE_TOLERANCE = 50      # yards off at which the distance match reaches 0
RELIABLE_SAMPLES = 20
MIN_CONFIDENCE = 0.1         # exclusive
MAX_SUGGESTIONS = 3
PERFECT_MATCH_YARDS = 10
BASIC_RANGE_YARDS = 30
BASIC_MIN_CONFIDENCE = 0.3

WIND_EFFECT_CAP = 2          # speed/10, i.e. 20 mph
INTO_WIND_YARDS = 10
DOWN_WIND_YARDS = 8

DIFFICULT_LIES = frozenset({"heavy_rough", "greenside_bunker"})
GOOD_LIES = frozenset({"tee_box", "fairway"})

MAX_CARRY = 400


def get_wind_adjustment(wind: Optional[WindConditions]) -> WindAdjustment:
    """Club and carry change for the given wind."""
    if wind is None or wind.direction == WindDirection.CALM:
        return WindAdjustment(club_adjustment="No adjustment needed", distance_adjustment=0)

    effect = min(wind.speed / 10, WIND_EFFECT_CAP)
    if wind.direction == WindDirection.INTO:
        return WindAdjustment(
            club_adjustment="Consider one more club",
            distance_adjustment=-effect * INTO_WIND_YARDS,
        )
    if wind.direction == WindDirection.DOWN:
        return WindAdjustment(
            club_adjustment="Consider one less club",
            distance_adjustment=effect * DOWN_WIND_YARDS,
        )
    return WindAdjustment(club_adjustment="Aim into the wind", distance_adjustment=0)


def club_priors_from_history(history: Iterable[Shot]) -> Dict[str, ClubPrior]:
    """Average carry and Good/Acceptable rate per club from real shots."""
    distances: Dict[str, List[int]] = {}
    outcomes: Dict[str, List[bool]] = {}
    for shot in history:
        gained = shot.distance_gained
        if not shot.club or gained is None or not 0 < gained < MAX_CARRY:
            continue
        distances.setdefault(shot.club, []).append(gained)
        outcomes.setdefault(shot.club, []).append(shot.is_success)

    return {
        club: ClubPrior(
            avg_distance=sum(values) / len(values),
            accuracy=sum(outcomes[club]) / len(outcomes[club]),
            samples=len(values),
        )
        for club, values in distances.items()
    }


class ClubSuggestionEngine:
    """Ranks candidate clubs for a shot context."""

    def __init__(self, reference: ClubReference = DEFAULT_CLUB_REFERENCE):
        self._reference = reference

    def suggest(
        self, context: SuggestionContext, history: Iterable[Shot] = ()
    ) -> List[ClubSuggestion]:
        """Top three clubs by score; historical stats are preferred over priors.

        Scoring uses the raw distance to the pin. Wind is reported on its own
        by ``get_wind_adjustment`` and never reorders the ranking.
        """
        stats = club_priors_from_history(history)
        source = "history"
        relevant = {
            club: prior for club, prior in stats.items()
            if self._reference.is_club_relevant(club, context.shot_category)
        }
        if not relevant:
            source = "reference"
            relevant = {
                club: prior for club, prior in self._reference.club_priors.items()
                if self._reference.is_club_relevant(club, context.shot_category)
            }

        suggestions = []
        for club in sorted(relevant):
            suggestion = self._score(club, relevant[club], context, source)
            if suggestion.confidence > MIN_CONFIDENCE:
                suggestions.append(suggestion)

        suggestions.sort(key=lambda s: (-s.confidence, s.club))
        return suggestions[:MAX_SUGGESTIONS]

    def recommended_club(
        self, context: SuggestionContext, history: Iterable[Shot] = ()
    ) -> Optional[str]:
        suggestions = self.suggest(context, history)
        return suggestions[0].club if suggestions else None

    def basic_suggestions(self, context: SuggestionContext) -> List[ClubSuggestion]:
        """Distance-table fallback, used when no shot data can be read at all."""
        if context.shot_category == ShotCategory.PUTT:
            return [ClubSuggestion(
                club="Putter",
                confidence=1.0,
                average_distance=round(context.distance_to_pin),
                success_rate=65,
                sample_size=50,
                reasoning="Only option for putting",
                source="basic",
            )]

        suggestions = []
        for distance, club, accuracy in self._reference.basic_distance_table:
            error = abs(distance - context.distance_to_pin)
            if error > BASIC_RANGE_YARDS:
                continue
            suggestions.append(ClubSuggestion(
                club=club,
                confidence=max(BASIC_MIN_CONFIDENCE, 1 - error / DISTANCE_TOLERANCE),
                average_distance=distance,
                success_rate=accuracy,
                sample_size=RELIABLE_SAMPLES,
                reasoning=f"Average distance {distance} yards",
                source="basic",
            ))
        suggestions.sort(key=lambda s: (-s.confidence, s.club))
        return suggestions[:MAX_SUGGESTIONS]

    def _score(
        self,
        club: str,
        prior: ClubPrior,
        context: SuggestionContext,
        source: str,
    ) -> ClubSuggestion:
        adjustment = self._reference.lie_adjustment(context.lie)
        adjusted_distance = prior.avg_distance * adjustment.distance
        adjusted_accuracy = prior.accuracy * adjustment.accuracy
        target = context.distance_to_pin

        distance_match = max(0.0, 1 - abs(adjusted_distance - target) / DISTANCE_TOLERANCE)
        reliability = min(1.0, prior.samples / RELIABLE_SAMPLES)
        confidence = (
            DISTANCE_WEIGHT * distance_match
            + ACCURACY_WEIGHT * adjusted_accuracy
            + RELIABILITY_WEIGHT * reliability
        )

        return ClubSuggestion(
            club=club,
            confidence=confidence,
            average_distance=round(adjusted_distance),
            success_rate=round(adjusted_accuracy * 100),
            sample_size=prior.samples,
            reasoning=_reasoning(adjusted_distance - target, adjusted_accuracy, context.lie),
            source=source,
        )


def _reasoning(distance_diff: float, accuracy: float, lie: Optional[str]) -> str:
    reasons = []
    if abs(distance_diff) <= PERFECT_MATCH_YARDS:
        reasons.append("Perfect distance match")
    elif distance_diff > 0:
        reasons.append(f"Usually flies {round(abs(distance_diff))} yards long")
    else:
        reasons.append(f"Usually comes up {round(abs(distance_diff))} yards short")

    if accuracy >= 0.8:
        reasons.append("high success rate")
    elif accuracy >= 0.7:
        reasons.append("good accuracy")
    elif accuracy >= 0.6:
        reasons.append("decent accuracy")
    else:
        reasons.append("lower accuracy")

    if lie in DIFFICULT_LIES:
        reasons.append("accounting for difficult lie")
    elif lie in GOOD_LIES:
        reasons.append("from good lie")

    return ", ".join(reasons)
