"""Bundle of the asyncpg repositories sharing one pool."""

import asyncpg
from typing import Optional

from config import Settings
from database.repositories import CourseReferenceDB, RoundRepositoryDB, ShotRepositoryDB


class DatabaseManager:
    """Single access point for all repositories."""

    def __init__(self, pool: asyncpg.Pool, settings: Optional[Settings] = None):
        self.shots = ShotRepositoryDB(pool, settings)
        self.rounds = RoundRepositoryDB(pool)
        self.courses = CourseReferenceDB(pool)
