"""
Course access checks shared by the service orchestrators.

Dependencies: courseware.boundary.db, courseware.core
System role: Course lookup with visibility and permission enforcement
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from courseware.boundary.db.CRUD.course_crud import course_crud
from courseware.boundary.db.models import CourseModel
from courseware.core.exceptions import CourseNotFoundError, PermissionDeniedError
from courseware.core.permissions import Permission
from courseware.core.visibility import Viewer, matching_grant

logger = logging.getLogger(__name__)


async def load_course(db: AsyncSession, domain_id: str, course_id: UUID) -> CourseModel:
    """
    Fetch a course of a domain.

    Raises:
        CourseNotFoundError: If the course does not exist
    """
    course = await course_crud.get(db, domain_id, course_id)
    if course is None:
        raise CourseNotFoundError(course_id)
    return course


async def load_visible_course(
    db: AsyncSession,
    domain_id: str,
    course_id: UUID,
    viewer: Viewer,
) -> CourseModel:
    """
    Fetch a course the viewer is allowed to see.

    Raises:
        CourseNotFoundError: If the course does not exist or no grant lets
            the viewer see it; callers cannot tell the two apart
    """
    course = await load_course(db, domain_id, course_id)
    grant = matching_grant(course, viewer)
    if grant is None:
        logger.info(
            "Course hidden from viewer",
            extra={"course_id": str(course_id), "uid": viewer.uid},
        )
        raise CourseNotFoundError(course_id)
    logger.debug(
        "Course visible",
        extra={"course_id": str(course_id), "uid": viewer.uid, "grant": grant},
    )
    return course


def require_perm(viewer: Viewer, permission: Permission) -> None:
    """
    Raises:
        PermissionDeniedError: If the viewer lacks ``permission``
    """
    if not viewer.has_perm(permission):
        raise PermissionDeniedError(permission.value, {"uid": viewer.uid})


def owns_course(course: CourseModel, viewer: Viewer) -> bool:
    """Owner or maintainer."""
    return course.owner == viewer.uid or viewer.uid in course.maintainers


def require_edit_permission(course: CourseModel, viewer: Viewer) -> None:
    """Owners need EDIT_COURSE_SELF, everyone else EDIT_COURSE."""
    if owns_course(course, viewer):
        require_perm(viewer, Permission.EDIT_COURSE_SELF)
    else:
        require_perm(viewer, Permission.EDIT_COURSE)


def require_file_permission(course: CourseModel, viewer: Viewer) -> None:
    """Owners and teachers need EDIT_COURSE_SELF, everyone else EDIT_COURSE."""
    if owns_course(course, viewer) or viewer.uid in course.teachers:
        require_perm(viewer, Permission.EDIT_COURSE_SELF)
    else:
        require_perm(viewer, Permission.EDIT_COURSE)
