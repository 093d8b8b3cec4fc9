"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_course_file_service,
    get_course_file_storage,
    get_course_service,
    get_enrollment_service,
    get_progress_service,
    get_scoreboard_service,
    get_settings_dependency,
    get_viewer,
)

__all__ = [
    "get_course_file_service",
    "get_course_file_storage",
    "get_course_service",
    "get_enrollment_service",
    "get_progress_service",
    "get_scoreboard_service",
    "get_settings_dependency",
    "get_viewer",
]
