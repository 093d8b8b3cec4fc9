"""
Course error handling utilities.

Provides a decorator for consistent error handling across course-related
API endpoints: domain exceptions are logged with their context and mapped
to HTTP status codes.

Dependencies: fastapi, courseware.core.exceptions, courseware.observability
System role: Domain error to HTTP translation
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from courseware.core.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    CoursewareException,
    PermissionDeniedError,
    QuotaExceededError,
    UploadFailureError,
    ValidationError,
)
from courseware.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

# Checked in order; subclasses must precede their bases.
ERROR_STATUS: tuple[tuple[type[CoursewareException], int], ...] = (
    (CourseNotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AlreadyEnrolledError, status.HTTP_409_CONFLICT),
    (QuotaExceededError, 413),
    (UploadFailureError, status.HTTP_502_BAD_GATEWAY),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
)


def status_for(exc: CoursewareException) -> int:
    """HTTP status of a domain error; unmapped errors are server errors."""
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def handle_course_errors(func: F) -> F:
    """
    Decorator to handle course-related errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with their details
    - Mapping domain exceptions to HTTP status codes
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except CoursewareException as e:
            code = status_for(e)
            log_exception_with_context(
                logger,
                "Course request rejected",
                e,
                level=logging.ERROR if code >= 500 else logging.WARNING,
                status_code=code,
            )
            raise HTTPException(
                status_code=code,
                detail={"error": e.message, "details": e.details},
            )

        except Exception as e:
            log_exception_with_context(logger, "Unexpected failure in course operation", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred during course operation",
            )

    return wrapper  # type: ignore
