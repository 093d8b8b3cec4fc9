"""
Permission names understood by the course service.

The host platform owns the permission taxonomy; these are the names it
forwards in the X-User-Permissions header for course operations.

Dependencies: None
System role: Permission vocabulary
"""

import enum


class Permission(str, enum.Enum):
    """Course-related permissions granted by the host platform."""

    VIEW_COURSE = "view_course"
    VIEW_HIDDEN_COURSE = "view_hidden_course"
    ATTEND_COURSE = "attend_course"
    CREATE_COURSE = "create_course"
    EDIT_COURSE = "edit_course"
    EDIT_COURSE_SELF = "edit_course_self"
    VIEW_SCOREBOARD = "view_course_scoreboard"
    VIEW_PROBLEM_HIDDEN = "view_problem_hidden"


def parse_permissions(raw: str | None) -> frozenset[Permission]:
    """
    Parse a comma-separated permission header value.

    Unknown names are ignored so the host can send permissions this
    service does not care about.
    """
    if not raw:
        return frozenset()
    known = {p.value: p for p in Permission}
    return frozenset(
        known[name.strip()] for name in raw.split(",") if name.strip() in known
    )
