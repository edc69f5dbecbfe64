"""Round and round_holes access: reads, hole seeding and aggregate writes."""

import asyncpg
from contextlib import asynccontextmanager
from typing import List, Optional
from uuid import UUID

from models import Round, RoundHole
from database.converters import round_from_rows, round_hole_from_row, round_hole_to_row
from database.exceptions import NotFoundError, PersistenceError, UpstreamUnavailableError


class RoundRepositoryDB:
    """Async access to rounds and their per-hole aggregates.

    ``hole_lock`` holds a transaction-scoped advisory lock per (round, hole)
    for the whole read-compute-write of a recompute, and round totals take a
    row lock on the round, so recomputes running in separate processes
    serialize the same way in-process recomputes do.
    """

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Private helpers
    # ================================================================

    async def _assemble_round(self, conn, round_row) -> Round:
        """Build a full Round model from a round row."""
        hole_rows = await conn.fetch(
            """SELECT * FROM round_holes
               WHERE round_id = $1 ORDER BY hole_number""",
            round_row["id"],
        )
        return round_from_rows(round_row, hole_rows)

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: str) -> Optional[Round]:
        """Get a round with its hole aggregates."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM rounds WHERE id = $1", UUID(round_id)
            )
            if not row:
                return None
            return await self._assemble_round(conn, row)

    async def get_rounds_for_user(
        self, user_id: str, *, limit: int = 20, offset: int = 0
    ) -> List[Round]:
        """Get a user's rounds ordered by start time DESC."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM rounds
                   WHERE user_id = $1
                   ORDER BY started_at DESC NULLS LAST
                   LIMIT $2 OFFSET $3""",
                UUID(user_id), limit, offset,
            )
            return [await self._assemble_round(conn, r) for r in rows]

    async def recent_totals(self, user_id: Optional[str], limit: int) -> List[int]:
        """Totals of the user's most recent completed rounds."""
        if not user_id:
            return []
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    """SELECT total_score FROM rounds
                       WHERE user_id = $1
                         AND status = 'completed'
                         AND total_score IS NOT NULL
                       ORDER BY started_at DESC NULLS LAST
                       LIMIT $2""",
                    UUID(user_id), limit,
                )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise UpstreamUnavailableError(f"Round totals unavailable: {e}") from e
        return [r["total_score"] for r in rows]

    # ================================================================
    # Aggregate writes
    # ================================================================

    async def ensure_hole(self, round_id: str, hole_number: int, par: int) -> RoundHole:
        """Insert the hole row if absent, keeping any existing par."""
        try:
            async with self._pool.acquire() as conn:
                await conn.execute(
                    """INSERT INTO round_holes (round_id, hole_number, par)
                       VALUES ($1, $2, $3)
                       ON CONFLICT (round_id, hole_number) DO NOTHING""",
                    UUID(round_id), hole_number, par,
                )
                row = await conn.fetchrow(
                    """SELECT * FROM round_holes
                       WHERE round_id = $1 AND hole_number = $2""",
                    UUID(round_id), hole_number,
                )
        except asyncpg.ForeignKeyViolationError as e:
            raise NotFoundError(f"Round {round_id} not found") from e
        except asyncpg.PostgresError as e:
            raise PersistenceError(f"Could not seed hole {hole_number}: {e}") from e
        return round_hole_from_row(row)

    @asynccontextmanager
    async def hole_lock(self, round_id: str, hole_number: int):
        """Hold the (round, hole) advisory lock until the block exits.

        The lock lives on its own connection and transaction, so the reads
        and writes inside the block may use any pooled connection.
        """
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                try:
                    await conn.execute(
                        "SELECT pg_advisory_xact_lock(hashtext($1::text), $2)",
                        round_id, hole_number,
                    )
                except asyncpg.PostgresError as e:
                    raise PersistenceError(
                        f"Could not lock round {round_id} hole {hole_number}: {e}"
                    ) from e
                yield

    async def upsert_hole(self, hole: RoundHole) -> RoundHole:
        """Write the derived columns of one hole. Par is never touched.

        Callers that read shots before writing should hold ``hole_lock``.
        """
        values = round_hole_to_row(hole)
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """UPDATE round_holes
                       SET gross_score = $3, putts = $4, penalties = $5,
                           fir = $6, gir = $7, updated_at = now()
                       WHERE round_id = $1 AND hole_number = $2
                       RETURNING *""",
                    UUID(hole.round_id), hole.hole_number,
                    values["gross_score"], values["putts"], values["penalties"],
                    values["fir"], values["gir"],
                )
        except asyncpg.PostgresError as e:
            raise PersistenceError(
                f"Could not write round {hole.round_id} hole {hole.hole_number}: {e}"
            ) from e
        if not row:
            raise NotFoundError(f"Round {hole.round_id} hole {hole.hole_number} not found")
        return round_hole_from_row(row)

    async def upsert_round_totals(self, round_id: str) -> Round:
        """Rewrite par_total and total_score as sums over the round's holes."""
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    locked = await conn.fetchrow(
                        "SELECT id FROM rounds WHERE id = $1 FOR UPDATE",
                        UUID(round_id),
                    )
                    if not locked:
                        raise NotFoundError(f"Round {round_id} not found")

                    row = await conn.fetchrow(
                        """UPDATE rounds SET
                               par_total = (SELECT COALESCE(SUM(par), 0)
                                            FROM round_holes WHERE round_id = $1),
                               total_score = (SELECT COALESCE(SUM(gross_score), 0)
                                              FROM round_holes WHERE round_id = $1),
                               updated_at = now()
                           WHERE id = $1
                           RETURNING *""",
                        UUID(round_id),
                    )
                    return await self._assemble_round(conn, row)
        except asyncpg.PostgresError as e:
            raise PersistenceError(f"Could not update totals for round {round_id}: {e}") from e
