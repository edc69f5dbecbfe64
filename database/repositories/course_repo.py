"""Course hole reference lookups."""

import asyncpg
from typing import Optional
from uuid import UUID

from database.exceptions import UpstreamUnavailableError


class CourseReferenceDB:
    """Par lookups against course_holes."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def get_hole_par(self, course_id: Optional[str], hole_number: int) -> Optional[int]:
        """Par for one hole, or None when the course or hole is unknown."""
        if not course_id:
            return None
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetchval(
                    """SELECT par FROM course_holes
                       WHERE course_id = $1 AND hole_number = $2""",
                    UUID(course_id), hole_number,
                )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise UpstreamUnavailableError(f"Course reference unavailable: {e}") from e
