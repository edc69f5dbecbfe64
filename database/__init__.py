from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.repositories import CourseReferenceDB, RoundRepositoryDB, ShotRepositoryDB
from database.exceptions import (
    DatabaseError,
    NotFoundError,
    PersistenceError,
    UpstreamUnavailableError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "CourseReferenceDB",
    "RoundRepositoryDB",
    "ShotRepositoryDB",
    "DatabaseError",
    "NotFoundError",
    "PersistenceError",
    "UpstreamUnavailableError",
]
