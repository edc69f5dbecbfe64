from .course_repo import CourseReferenceDB
from .round_repo import RoundRepositoryDB
from .shot_repo import ShotRepositoryDB

__all__ = ["CourseReferenceDB", "RoundRepositoryDB", "ShotRepositoryDB"]
