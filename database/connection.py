import asyncpg
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class DatabasePool:
    """Owns the asyncpg connection pool for the analytics service."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30,
    ) -> None:
        """Create the pool once at app startup; later calls are no-ops."""
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(
            dsn=dsn,
            min_size=min_size,
            max_size=max_size,
            command_timeout=command_timeout,
        )
        logger.info("database pool ready (min=%s, max=%s)", min_size, max_size)

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the pool, raising if not initialized."""
        if self._pool is None:
            raise RuntimeError(
                "Database pool not initialized. Call await db.initialize() first."
            )
        return self._pool

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    async def health_check(self) -> bool:
        """Test connectivity with SELECT 1."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.warning("database health check failed: %s", exc)
            return False


# Module-level singleton for convenience
db = DatabasePool()
