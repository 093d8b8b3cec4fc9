"""Service orchestrators."""

from .course_file_service import CourseFileService
from .course_service import CourseService
from .enrollment_service import EnrollmentService
from .progress_service import ProgressService
from .scoreboard_service import ScoreboardService

__all__ = [
    "CourseFileService",
    "CourseService",
    "EnrollmentService",
    "ProgressService",
    "ScoreboardService",
]
