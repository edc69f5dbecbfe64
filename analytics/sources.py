"""Interfaces for the external collaborators the analytics layer consumes.

Any class with matching method signatures satisfies these protocols; the
asyncpg implementations live in ``database.repositories``.
"""

import logging
from datetime import datetime
from typing import AsyncContextManager, List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

from database.exceptions import UpstreamUnavailableError
from models import Round, RoundHole, Shot

logger = logging.getLogger(__name__)


class ShotRepository(Protocol):
    async def fetch_for_hole(self, round_id: str, hole_number: int) -> List[Shot]:
        """All shots recorded on one hole, ordered by shot number."""
        ...

    async def fetch_historical(
        self, user_id: str, round_limit: int, since: Optional[datetime] = None
    ) -> List[Shot]:
        """A bounded window of the user's most recent shots.

        Raises UpstreamUnavailableError when the store cannot be reached.
        """
        ...


class CourseReference(Protocol):
    async def get_hole_par(self, course_id: Optional[str], hole_number: int) -> Optional[int]:
        ...


class RoundAggregateStore(Protocol):
    async def get_round(self, round_id: str) -> Optional[Round]:
        ...

    async def ensure_hole(self, round_id: str, hole_number: int, par: int) -> RoundHole:
        """Insert-if-absent; returns the row that ends up stored."""
        ...

    def hole_lock(self, round_id: str, hole_number: int) -> AsyncContextManager[None]:
        """Cross-process lock held across a hole's read, compute and write."""
        ...

    async def upsert_hole(self, hole: RoundHole) -> RoundHole:
        ...

    async def upsert_round_totals(self, round_id: str) -> Round:
        """Rewrite par_total and total_score as sums over the round's holes."""
        ...


class RoundHistory(Protocol):
    async def recent_totals(self, user_id: Optional[str], limit: int) -> List[int]:
        ...


class NullCourseReference:
    """Knows no course data; every hole falls back to the default par."""

    async def get_hole_par(self, course_id: Optional[str], hole_number: int) -> Optional[int]:
        return None


class StaticRoundHistory:
    """Fixed round totals, for tests and offline use."""

    def __init__(self, totals: Sequence[int] = ()):
        self._totals = list(totals)

    async def recent_totals(self, user_id: Optional[str], limit: int) -> List[int]:
        return self._totals[:limit]


# ================================================================
# Live / fallback history strategy
# ================================================================

class HistorySnapshot(BaseModel):
    """Shots handed to the engines plus where they came from."""
    model_config = ConfigDict(frozen=True)

    shots: List[Shot]
    degraded: bool = False  # True when served from the fallback dataset


class StaticHistorySource:
    """Serves a fixed shot list regardless of user."""

    def __init__(self, shots: Sequence[Shot] = ()):
        self._shots = list(shots)

    async def fetch_historical(
        self, user_id: str, round_limit: int, since: Optional[datetime] = None
    ) -> List[Shot]:
        shots = self._shots
        if since is not None:
            shots = [s for s in shots if s.created_at is None or s.created_at >= since]
        return list(shots)


class FallbackHistorySource:
    """Reads history from a live source, substituting a fallback on failure.

    The fallback is used when the live source raises UpstreamUnavailableError
    or, with ``fallback_on_empty``, when it returns no shots.
    """

    def __init__(self, live, fallback, *, fallback_on_empty: bool = True):
        self._live = live
        self._fallback = fallback
        self._fallback_on_empty = fallback_on_empty

    async def load(
        self, user_id: str, round_limit: int, since: Optional[datetime] = None
    ) -> HistorySnapshot:
        try:
            shots = await self._live.fetch_historical(user_id, round_limit, since)
        except UpstreamUnavailableError as exc:
            logger.warning("history unavailable for user %s, using fallback: %s", user_id, exc)
            return await self._load_fallback(user_id, round_limit, since)

        if not shots and self._fallback_on_empty:
            logger.info("no history for user %s, using fallback dataset", user_id)
            return await self._load_fallback(user_id, round_limit, since)
        return HistorySnapshot(shots=shots)

    async def _load_fallback(self, user_id, round_limit, since) -> HistorySnapshot:
        shots = await self._fallback.fetch_historical(user_id, round_limit, None)
        return HistorySnapshot(shots=shots, degraded=True)
