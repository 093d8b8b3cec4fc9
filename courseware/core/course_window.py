"""
Course time window and content helpers.

Dependencies: courseware.core.exceptions
System role: Course lifecycle rules
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Sequence
from uuid import UUID

from courseware.core.exceptions import ValidationError

_FILE_LINK = re.compile(r'(\(|=")file://')


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by some drivers) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_not_started(begin_at: datetime, now: datetime) -> bool:
    return as_utc(now) < as_utc(begin_at)


def is_ongoing(begin_at: datetime, end_at: datetime, now: datetime) -> bool:
    now = as_utc(now)
    return as_utc(begin_at) <= now < as_utc(end_at)


def is_done(end_at: datetime, now: datetime) -> bool:
    return as_utc(end_at) <= as_utc(now)


def default_window(now: datetime, days: int) -> tuple[datetime, datetime]:
    """Window starting now and lasting ``days`` days."""
    now = as_utc(now)
    return now, now + timedelta(days=days)


def validate_window(begin_at: datetime, end_at: datetime) -> None:
    """
    Raises:
        ValidationError: If the window is empty or reversed
    """
    if as_utc(begin_at) >= as_utc(end_at):
        raise ValidationError("Course must end after it begins", field="end_at")


def parse_problem_ids(raw: str | Sequence[int] | None) -> list[int]:
    """
    Parse a problem id list.

    Accepts a comma-separated string (full-width commas too) or a
    sequence of ints. Blank and zero entries are dropped.

    Raises:
        ValidationError: If an entry is not a positive integer
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        parts = [p.strip() for p in raw.replace("，", ",").split(",")]
    else:
        parts = list(raw)

    pids = []
    for part in parts:
        if part == "" or part == 0:
            continue
        try:
            pid = int(part)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid problem id: {part!r}", field="pids")
        if isinstance(part, float) or pid < 0:
            raise ValidationError(f"Invalid problem id: {part!r}", field="pids")
        if pid:
            pids.append(pid)
    return pids


def rewrite_file_links(content: str, course_id: UUID) -> str:
    """Point file:// references in course content at the course file route."""
    return _FILE_LINK.sub(lambda m: f"{m.group(1)}./{course_id}/file/", content)
