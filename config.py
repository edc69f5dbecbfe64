"""Environment-driven settings for the analytics engine and its API."""

import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


class Settings(BaseModel):
    database_url: Optional[str] = None
    log_level: str = "INFO"
    # Historical queries are always bounded by both a day window and a row cap.
    history_round_limit: int = Field(10, ge=1)
    history_window_days: int = Field(90, ge=1)
    history_row_cap: int = Field(1000, ge=1)
    round_history_limit: int = Field(20, ge=1)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.environ.get("DATABASE_URL"),
            log_level=os.getenv("ANALYTICS_LOG_LEVEL", "INFO"),
            history_round_limit=_int_env("HISTORY_ROUND_LIMIT", 10),
            history_window_days=_int_env("HISTORY_WINDOW_DAYS", 90),
            history_row_cap=_int_env("HISTORY_ROW_CAP", 1000),
            round_history_limit=_int_env("ROUND_HISTORY_LIMIT", 20),
        )

    def history_limit(self, round_limit: Optional[int] = None) -> int:
        """Row cap for a history fetch: ~100 shots per round, never above the hard cap."""
        rounds = round_limit or self.history_round_limit
        return min(rounds * 100, self.history_row_cap)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings_cache() -> None:
    """Clear cached settings (for tests)."""
    get_settings.cache_clear()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
