"""
Course visibility rules.

A viewer sees a course when any access grant matches. Each grant is
expressed twice: as an in-memory predicate for single-course checks and
as a SQL clause for listing queries.

Dependencies: sqlalchemy, courseware.boundary.db.models
System role: Visibility query builder
"""

from dataclasses import dataclass, field
from typing import Callable

from sqlalchemy import ColumnElement, exists, false, func, not_, or_, true

from courseware.boundary.db.models import CourseGrantModel, CourseModel, GrantRole
from courseware.core.permissions import Permission


@dataclass(frozen=True)
class Viewer:
    """
    Identity of the user a query is evaluated for.

    Attributes:
        uid: User id
        groups: Names of the groups the user belongs to
        permissions: Permissions granted by the host
        group_filter: Optional single group the listing is restricted to
    """

    uid: int
    groups: frozenset[str] = field(default_factory=frozenset)
    permissions: frozenset[Permission] = field(default_factory=frozenset)
    group_filter: str | None = None

    def has_perm(self, permission: Permission) -> bool:
        return permission in self.permissions

    @property
    def can_view_hidden(self) -> bool:
        return self.has_perm(Permission.VIEW_HIDDEN_COURSE)


@dataclass(frozen=True)
class AccessGrant:
    """A single way a viewer can be entitled to see a course."""

    name: str
    matches: Callable[[CourseModel, Viewer], bool]
    clause: Callable[[Viewer], ColumnElement[bool]]


def _grant_exists(role: GrantRole, subjects: list[str]) -> ColumnElement[bool]:
    if not subjects:
        return false()
    return exists().where(
        CourseGrantModel.course_id == CourseModel.id,
        CourseGrantModel.role == role,
        CourseGrantModel.subject.in_(subjects),
    )


def _no_assigned_groups() -> ColumnElement[bool]:
    return not_(
        exists().where(
            CourseGrantModel.course_id == CourseModel.id,
            CourseGrantModel.role == GrantRole.ASSIGN,
        )
    )


def _group_filter_clause(viewer: Viewer) -> ColumnElement[bool]:
    if not viewer.group_filter:
        return false()
    return or_(
        _grant_exists(GrantRole.ASSIGN, [viewer.group_filter]),
        _grant_exists(GrantRole.CLASS, [viewer.group_filter]),
    )


# Evaluated in order; the first match wins.
ACCESS_GRANTS: tuple[AccessGrant, ...] = (
    AccessGrant(
        "owner",
        lambda course, viewer: course.owner == viewer.uid,
        lambda viewer: CourseModel.owner == viewer.uid,
    ),
    AccessGrant(
        "maintainer",
        lambda course, viewer: viewer.uid in course.maintainers,
        lambda viewer: _grant_exists(GrantRole.MAINTAINER, [str(viewer.uid)]),
    ),
    AccessGrant(
        "teacher",
        lambda course, viewer: viewer.uid in course.teachers,
        lambda viewer: _grant_exists(GrantRole.TEACHER, [str(viewer.uid)]),
    ),
    AccessGrant(
        "assigned_group",
        lambda course, viewer: not viewer.groups.isdisjoint(course.assign),
        lambda viewer: _grant_exists(GrantRole.ASSIGN, sorted(viewer.groups)),
    ),
    AccessGrant(
        "class_group",
        lambda course, viewer: not viewer.groups.isdisjoint(course.classes),
        lambda viewer: _grant_exists(GrantRole.CLASS, sorted(viewer.groups)),
    ),
    AccessGrant(
        "public",
        lambda course, viewer: not course.assign,
        lambda viewer: _no_assigned_groups(),
    ),
)


def matching_grant(course: CourseModel, viewer: Viewer) -> str | None:
    """
    Name of the first grant that lets the viewer see the course.

    Returns:
        str | None: Grant name, "hidden" for the permission bypass, or
            None when the course must be reported as not found
    """
    if viewer.can_view_hidden:
        return "hidden"
    for grant in ACCESS_GRANTS:
        if grant.matches(course, viewer):
            return grant.name
    return None


def can_view_course(course: CourseModel, viewer: Viewer) -> bool:
    return matching_grant(course, viewer) is not None


def build_visibility_filter(viewer: Viewer) -> ColumnElement[bool]:
    """
    Build the WHERE clause selecting courses the viewer may list.

    Viewers allowed to see hidden courses get every course unless they
    asked for a specific group, in which case the grants apply as usual.
    The group filter widens the listing only; single-course checks in
    ``matching_grant`` never consult it.
    """
    if viewer.can_view_hidden and not viewer.group_filter:
        return true()
    clauses = [grant.clause(viewer) for grant in ACCESS_GRANTS]
    clauses.append(_group_filter_clause(viewer))
    return or_(*clauses)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_title_filter(query: str | None) -> ColumnElement[bool] | None:
    """
    Case-insensitive title search.

    Queries of two or more characters match anywhere in the title; a
    single character only matches as the title prefix.
    """
    if not query:
        return None
    escaped = _escape_like(query.lower())
    pattern = f"%{escaped}%" if len(query) >= 2 else f"{escaped}%"
    return func.lower(CourseModel.title).like(pattern, escape="\\")


# Newest start first; creation time then id break ties.
LISTING_ORDER = (
    CourseModel.begin_at.desc(),
    CourseModel.created_at.desc(),
    CourseModel.id.desc(),
)
