import pytest
from pydantic import ValidationError

from models import (
    ClubSuggestion,
    PressureContext,
    ResultZone,
    Round,
    RoundHole,
    Shot,
    ShotCategory,
    ShotIntent,
    SituationContext,
    SuggestionContext,
)
from models.intent import DistanceUnit
from models.shot import DistanceMiss, LateralMiss, normalize_lie


def _shot(**overrides) -> Shot:
    data = dict(hole_number=1, shot_number=1, category="tee")
    data.update(overrides)
    return Shot(**data)


# ================================================================
# Lie normalization
# ================================================================

@pytest.mark.parametrize("raw, expected", [
    ("Heavy rough", "heavy_rough"),
    ("  Tee Box ", "tee_box"),
    ("greenside-bunker", "greenside_bunker"),
    ("fairway", "fairway"),
    ("", None),
    (None, None),
])
def test_normalize_lie(raw, expected):
    assert normalize_lie(raw) == expected


def test_shot_normalizes_lies():
    shot = _shot(start_lie="Tee Box", end_lie="Heavy Rough")
    assert shot.start_lie == "tee_box"
    assert shot.end_lie == "heavy_rough"


def test_contexts_normalize_lies():
    ctx = SuggestionContext(distance_to_pin=150, lie="Light Rough", shot_category="approach")
    assert ctx.lie == "light_rough"
    situation = SituationContext(distance_to_pin=150, lie="Fairway Bunker", hole_number=3)
    assert situation.lie == "fairway_bunker"


# ================================================================
# Shot
# ================================================================

def test_result_zone_is_case_insensitive():
    assert _shot(result_zone="good").result_zone == ResultZone.GOOD
    assert _shot(result_zone="LOST BALL").result_zone == ResultZone.LOST_BALL


def test_unknown_result_zone_reads_as_none():
    assert _shot(result_zone="spectacular").result_zone is None


def test_holed_shot_defaults_end_distance_to_zero():
    shot = _shot(category="putt", start_distance_to_hole=8, holed=True)
    assert shot.end_distance_to_hole == 0


def test_holed_shot_with_distance_left_is_rejected():
    with pytest.raises(ValidationError):
        _shot(category="putt", start_distance_to_hole=8, end_distance_to_hole=3, holed=True)


def test_null_holed_reads_as_false():
    assert _shot(holed=None).holed is False


def test_shot_details_parse_miss_labels():
    shot = _shot(details={"lateral_error": "Far left", "distance_error": "Long"})
    assert shot.lateral_error == LateralMiss.FAR_LEFT
    assert shot.lateral_error.is_left
    assert shot.distance_error == DistanceMiss.LONG
    assert shot.distance_error.is_long


def test_shot_details_drop_unknown_labels():
    shot = _shot(details={"lateral_error": "sideways", "contact_quality": "Pure"})
    assert shot.lateral_error is None
    assert shot.details.is_pure_contact


def test_distance_gained():
    assert _shot(start_distance_to_hole=400, end_distance_to_hole=150).distance_gained == 250
    assert _shot(start_distance_to_hole=400).distance_gained is None


def test_is_success():
    assert _shot(result_zone="Acceptable").is_success
    assert not _shot(result_zone="Poor").is_success
    assert not _shot().is_success


def test_update_field_returns_error_message():
    shot = _shot()
    assert shot.update_field("hole_number", 19) is not None
    assert shot.hole_number == 1
    assert shot.update_field("club", "7 Iron") is None
    assert shot.club == "7 Iron"


def test_hole_number_bounds():
    with pytest.raises(ValidationError):
        _shot(hole_number=0)
    with pytest.raises(ValidationError):
        _shot(shot_number=0)


# ================================================================
# RoundHole / Round
# ================================================================

def test_round_hole_score_type():
    assert RoundHole(hole_number=1, par=4, gross_score=3).get_score_type() == "birdie"
    assert RoundHole(hole_number=1, par=5, gross_score=7).get_score_type() == "double bogey"
    assert RoundHole(hole_number=1, par=4).get_score_type() is None


def test_round_hole_default_par():
    assert RoundHole(hole_number=7).par == 4


def _round() -> Round:
    return Round(
        id="r1",
        holes=[
            RoundHole(hole_number=1, par=4, gross_score=5, putts=2, fir=True, gir=False),
            RoundHole(hole_number=2, par=3, gross_score=3, putts=2, fir=False, gir=True),
            RoundHole(hole_number=3, par=5, gross_score=None),
        ],
    )


def test_round_totals_treat_unscored_holes_as_zero():
    r = _round()
    assert r.calculate_total_score() == 8
    assert r.calculate_par_total() == 12
    assert r.holes_played() == 2


def test_round_stored_total_wins():
    r = _round()
    r.total_score = 90
    assert r.get_total_score() == 90


def test_round_fairways_ignore_par_threes():
    r = _round()
    assert r.get_fairways_hit() == 1
    assert r.get_total_gir() == 1
    assert r.get_total_putts() == 4


def test_round_score_to_par_uses_scored_holes():
    assert _round().score_to_par() == 1
    assert Round().score_to_par() is None


def test_round_get_hole():
    r = _round()
    assert r.get_hole(2).par == 3
    assert r.get_hole(18) is None


# ================================================================
# Contexts
# ================================================================

@pytest.mark.parametrize("raw, expected", [
    ("putting", ShotCategory.PUTT),
    ("short_game", ShotCategory.AROUND_GREEN),
    ("approach", ShotCategory.APPROACH),
])
def test_pressure_context_category_aliases(raw, expected):
    ctx = PressureContext(category=raw, distance_to_pin=10, hole_number=1)
    assert ctx.category == expected


def test_situation_score_to_par():
    ctx = SituationContext(distance_to_pin=150, hole_number=5, current_score=20, par_for_hole=4)
    assert ctx.score_to_par() == 4


def test_read_models_are_frozen():
    suggestion = ClubSuggestion(
        club="7 Iron", confidence=0.9, average_distance=155,
        success_rate=82, sample_size=55, reasoning="Perfect distance match",
    )
    with pytest.raises(ValidationError):
        suggestion.club = "8 Iron"


# ================================================================
# ShotIntent
# ================================================================

def test_intent_distance_in_yards():
    assert ShotIntent(distance=30, distance_unit=DistanceUnit.FEET).distance_in_yards() == 10
    assert ShotIntent(distance=152.4).distance_in_yards() == 152
    assert ShotIntent().distance_in_yards() is None


def test_intent_result_words():
    assert ShotIntent(result="lost").result_zone() == ResultZone.LOST_BALL
    assert ShotIntent(result="Acceptable").result_zone() == ResultZone.ACCEPTABLE
    assert ShotIntent(result="meh").result_zone() is None


def test_intent_to_shot():
    intent = ShotIntent(
        original_text="seven iron one fifty from the fairway, good",
        club="7 iron",
        distance=150,
        lie="Fairway",
        result="good",
        shot_shape="Draw",
        confidence=0.8,
    )
    shot = intent.to_shot(round_id="r1", hole_number=4, shot_number=2, category=ShotCategory.APPROACH)
    assert shot.club == "7 Iron"
    assert shot.start_lie == "fairway"
    assert shot.start_distance_to_hole == 150
    assert shot.result_zone == ResultZone.GOOD
    assert shot.details.shot_shape == "draw"
