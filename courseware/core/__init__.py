"""
Core business logic module.

Contains the course domain rules: visibility, progress, scoreboard,
attachment quota and time-window helpers, plus the exception hierarchy.
Nothing here performs I/O.
"""

from courseware.core.exceptions import (
    CoursewareException,
    ValidationError,
    CourseNotFoundError,
    CourseEndedError,
    AlreadyEnrolledError,
    PermissionDeniedError,
    QuotaExceededError,
    UploadFailureError,
)

__all__ = [
    "CoursewareException",
    "ValidationError",
    "CourseNotFoundError",
    "CourseEndedError",
    "AlreadyEnrolledError",
    "PermissionDeniedError",
    "QuotaExceededError",
    "UploadFailureError",
]
