"""
Exception hierarchy for the courseware service.

Provides layered exception structure for course domain errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class CoursewareException(Exception):
    """Base exception for all courseware errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(CoursewareException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class CourseNotFoundError(CoursewareException):
    """
    Raised when a course cannot be found.

    Also raised when the course exists but the viewer holds no visibility
    grant, so callers cannot tell whether it exists.
    """

    def __init__(self, course_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["course_id"] = str(course_id)
        self.course_id = course_id
        super().__init__(f"Course not found: {course_id}", details)


class CourseEndedError(ValidationError):
    """Raised when enrolling into a course whose end time has passed."""

    def __init__(self, course_id: Any) -> None:
        super().__init__("Course has ended", field="end_at", details={"course_id": str(course_id)})


class AlreadyEnrolledError(CoursewareException):
    """Raised when the (course, user) enrollment already exists."""

    def __init__(self, course_id: Any, uid: int) -> None:
        super().__init__(
            "Already enrolled in this course",
            {"course_id": str(course_id), "uid": uid},
        )


class PermissionDeniedError(CoursewareException):
    """Raised when the viewer lacks a permission required by the operation."""

    def __init__(self, permission: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["permission"] = permission
        self.permission = permission
        super().__init__(f"Permission denied: {permission}", details)


class QuotaExceededError(CoursewareException):
    """
    Raised when an upload would break a course attachment ceiling.

    Attributes:
        kind: "count" when the attachment count ceiling is reached,
            "size" when the aggregate byte ceiling would be reached
    """

    COUNT = "count"
    SIZE = "size"

    def __init__(self, kind: str, limit: int, current: int) -> None:
        self.kind = kind
        super().__init__(
            f"File {kind} limit exceeded",
            {"kind": kind, "limit": limit, "current": current},
        )


class UploadFailureError(CoursewareException):
    """Raised when the blob write and its metadata lookup disagree."""

    def __init__(self, path: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["path"] = path
        super().__init__("File upload failed", details)

