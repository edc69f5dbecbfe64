"""Hole aggregate recomputation, triggered by any change to a hole's shots."""

import asyncio
import logging
import weakref
from typing import Optional

from analytics.aggregates import compute_hole_aggregate
from analytics.sources import (
    CourseReference,
    NullCourseReference,
    RoundAggregateStore,
    ShotRepository,
)
from database.exceptions import NotFoundError, UpstreamUnavailableError
from models import RoundHole
from models.round_hole import DEFAULT_PAR

logger = logging.getLogger(__name__)


class HoleAggregateRecomputer:
    """Recomputes one hole's RoundHole row and then the round totals.

    Recomputes of different holes in the same round may interleave freely.
    Recomputes of the same hole, and every round-total rewrite, are
    serialized by in-process locks. The store's ``hole_lock`` is held from
    the shot read through the aggregate write, and the store row-locks the
    round for totals, so separate processes are serialized too.
    """

    def __init__(
        self,
        shots: ShotRepository,
        store: RoundAggregateStore,
        courses: Optional[CourseReference] = None,
    ):
        self._shots = shots
        self._store = store
        self._courses = courses or NullCourseReference()
        self._hole_locks: "weakref.WeakValueDictionary" = weakref.WeakValueDictionary()
        self._round_locks: "weakref.WeakValueDictionary" = weakref.WeakValueDictionary()

    def _lock(self, registry, key) -> asyncio.Lock:
        lock = registry.get(key)
        if lock is None:
            lock = asyncio.Lock()
            registry[key] = lock
        return lock

    async def _seed_par(self, course_id: Optional[str], hole_number: int) -> int:
        try:
            par = await self._courses.get_hole_par(course_id, hole_number)
        except UpstreamUnavailableError as exc:
            logger.warning(
                "par lookup failed for course %s hole %s, defaulting to %s: %s",
                course_id, hole_number, DEFAULT_PAR, exc,
            )
            return DEFAULT_PAR
        return par if par is not None else DEFAULT_PAR

    async def recompute_hole_aggregate(
        self, round_id: str, hole_number: int
    ) -> Optional[RoundHole]:
        """Recompute one hole. Returns None when the round does not exist."""
        try:
            round_ = await self._store.get_round(round_id)
            if round_ is None:
                logger.debug("round %s not found; skipping hole %s", round_id, hole_number)
                return None

            hole_lock = self._lock(self._hole_locks, (round_id, hole_number))
            async with hole_lock, self._store.hole_lock(round_id, hole_number):
                hole = round_.get_hole(hole_number)
                if hole is None:
                    par = await self._seed_par(round_.course_id, hole_number)
                    hole = await self._store.ensure_hole(round_id, hole_number, par)

                shots = await self._shots.fetch_for_hole(round_id, hole_number)
                aggregate = compute_hole_aggregate(
                    shots,
                    hole.par,
                    round_id=round_id,
                    hole_number=hole_number,
                    hole_id=hole.id,
                )
                saved = await self._store.upsert_hole(aggregate)

            round_lock = self._lock(self._round_locks, round_id)
            async with round_lock:
                await self._store.upsert_round_totals(round_id)
        except NotFoundError:
            logger.debug("round %s disappeared during recompute of hole %s", round_id, hole_number)
            return None

        logger.debug(
            "recomputed round %s hole %s: gross=%s putts=%s fir=%s gir=%s",
            round_id, hole_number, saved.gross_score, saved.putts, saved.fir, saved.gir,
        )
        return saved
