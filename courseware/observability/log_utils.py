"""
Logging utilities for safe structured logging.

Dependencies: logging (stdlib), courseware.core.exceptions
System role: Logging helper functions
"""

import logging
from typing import Any
from uuid import UUID

from courseware.core.exceptions import CoursewareException

# LogRecord attributes that must not be overwritten through ``extra``
_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def safe_log_value(value: Any, max_length: int = 500) -> Any:
    """
    Make a value safe to attach to a log record.

    Numbers and booleans pass through; UUIDs become strings; collections
    are summarised; long strings are truncated.
    """
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"
    text = str(value)
    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def _context(context: dict[str, Any]) -> dict[str, Any]:
    return {
        (f"ctx_{key}" if key in _RESERVED else key): safe_log_value(val)
        for key, val in context.items()
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Keys clashing with LogRecord attributes (``name``, ``filename``...)
    are prefixed with ``ctx_``.
    """
    logger.log(level, message, extra=_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    level: int = logging.ERROR,
    **context: Any,
) -> None:
    """
    Log an exception with its details and the given context.

    Domain errors contribute their ``details``; a traceback is attached
    only at ERROR level and above.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        level: Log level
        **context: Additional context
    """
    merged: dict[str, Any] = {}
    if isinstance(exc, CoursewareException):
        merged.update(exc.details)
    merged.update(context)
    merged["error_type"] = type(exc).__name__
    merged["error_msg"] = str(exc)
    logger.log(level, message, extra=_context(merged), exc_info=exc if level >= logging.ERROR else None)
