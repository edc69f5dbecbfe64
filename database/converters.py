"""Conversion between asyncpg database rows and Pydantic domain models.

Centralizes all mapping logic between the shot-log schema and the models.
Lie and result labels are normalized by the models themselves, so rows
are passed through as stored.
"""

from typing import List, Optional

from models import Round, RoundHole, Shot, ShotDetails


def _str_id(value) -> Optional[str]:
    return str(value) if value is not None else None


# ================================================================
# Row -> Model (reads)
# ================================================================

def shot_details_from_row(row) -> ShotDetails:
    """Optional detail columns of a shots row -> ShotDetails."""
    return ShotDetails(
        shot_shape=row["shot_shape"],
        trajectory=row["trajectory"],
        contact_quality=row["contact_quality"],
        distance_error=row["distance_error"],
        lateral_error=row["lateral_error"],
    )


def shot_from_row(row) -> Shot:
    """shots row -> Shot model."""
    return Shot(
        id=_str_id(row["id"]),
        round_id=_str_id(row["round_id"]),
        hole_number=row["hole_number"],
        shot_number=row["shot_number"],
        category=row["shot_category"],
        club=row["club"],
        start_lie=row["start_lie"],
        start_distance_to_hole=row["start_distance_to_hole"],
        end_lie=row["end_lie"],
        end_distance_to_hole=row["end_distance_to_hole"],
        result_zone=row["result_zone"],
        penalty_strokes=row["penalty_strokes"],
        holed=row["holed"],
        details=shot_details_from_row(row),
        created_at=row["created_at"],
    )


def round_hole_from_row(row) -> RoundHole:
    """round_holes row -> RoundHole model. NULL putts/penalties read as 0."""
    return RoundHole(
        id=_str_id(row["id"]),
        round_id=_str_id(row["round_id"]),
        hole_number=row["hole_number"],
        par=row["par"],
        gross_score=row["gross_score"],
        putts=row["putts"] or 0,
        penalties=row["penalties"] or 0,
        fir=bool(row["fir"]),
        gir=bool(row["gir"]),
    )


def round_from_rows(round_row, hole_rows: list) -> Round:
    """rounds row + its round_holes rows -> Round model."""
    holes = sorted(
        (round_hole_from_row(r) for r in hole_rows),
        key=lambda h: h.hole_number,
    )
    return Round(
        id=_str_id(round_row["id"]),
        user_id=_str_id(round_row["user_id"]),
        course_id=_str_id(round_row["course_id"]),
        started_at=round_row["started_at"],
        status=round_row["status"] or "in_progress",
        holes=holes,
        total_score=round_row["total_score"],
        par_total=round_row["par_total"],
    )


# ================================================================
# Model -> Row (writes)
# ================================================================

def round_hole_to_row(hole: RoundHole) -> dict:
    """RoundHole -> dict of derived round_holes columns."""
    return {
        "gross_score": hole.gross_score,
        "putts": hole.putts,
        "penalties": hole.penalties,
        "fir": hole.fir,
        "gir": hole.gir,
    }


def shots_from_rows(rows: list) -> List[Shot]:
    return [shot_from_row(r) for r in rows]
