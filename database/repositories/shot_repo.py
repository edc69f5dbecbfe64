"""Read access to the shots table."""

import asyncpg
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from config import Settings, get_settings
from models import Shot
from database.converters import shots_from_rows
from database.exceptions import UpstreamUnavailableError


class ShotRepositoryDB:
    """Async reads of shot rows, for recomputation and history analytics."""

    def __init__(self, pool: asyncpg.Pool, settings: Optional[Settings] = None):
        self._pool = pool
        self._settings = settings or get_settings()

    async def fetch_for_hole(self, round_id: str, hole_number: int) -> List[Shot]:
        """All shots recorded on one hole, ordered by shot number."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM shots
                   WHERE round_id = $1 AND hole_number = $2
                   ORDER BY shot_number""",
                UUID(round_id), hole_number,
            )
            return shots_from_rows(rows)

    async def fetch_historical(
        self, user_id: str, round_limit: int, since: Optional[datetime] = None
    ) -> List[Shot]:
        """Newest-first shots from the user's most recent rounds.

        Bounded by the round count, the ``since`` cutoff and a row cap.
        """
        limit = self._settings.history_limit(round_limit)
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """SELECT s.* FROM shots s
                       WHERE s.round_id IN (
                           SELECT r.id FROM rounds r
                           WHERE r.user_id = $1
                           ORDER BY r.started_at DESC NULLS LAST
                           LIMIT $2
                       )
                       AND ($3::timestamptz IS NULL OR s.created_at >= $3)
                       ORDER BY s.created_at DESC
                       LIMIT $4""",
                    UUID(user_id), round_limit, since, limit,
                )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise UpstreamUnavailableError(f"Shot history unavailable: {e}") from e
        return shots_from_rows(rows)
