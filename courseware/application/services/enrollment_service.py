"""
Enrollment service orchestrator.

Enrolls students into courses at most once and keeps the course's
attendance counter in step.

Dependencies: courseware.boundary.db.CRUD, courseware.core
System role: Enrollment controller
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from courseware.application.services.access import (
    load_course,
    load_visible_course,
    require_edit_permission,
    require_perm,
)
from courseware.application.services.progress_service import ProgressService
from courseware.boundary.db.base import utcnow
from courseware.boundary.db.CRUD.course_crud import course_crud
from courseware.boundary.db.CRUD.course_status_crud import course_status_crud
from courseware.boundary.db.models import CourseStatusModel
from courseware.core.course_window import as_utc, is_done
from courseware.core.exceptions import AlreadyEnrolledError, CourseEndedError
from courseware.core.permissions import Permission
from courseware.core.visibility import Viewer

logger = logging.getLogger(__name__)


def serialize_status(status: CourseStatusModel) -> dict[str, Any]:
    return {
        "course_id": status.course_id,
        "uid": status.uid,
        "enroll": status.enroll,
        "attend": status.attend,
        "start_at": as_utc(status.start_at) if status.start_at else None,
    }


class EnrollmentService:
    """Enrollment controller."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize enrollment service.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def enroll(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Enroll the viewer into a course.

        The status row is written with a conditional set-if-absent, so of
        several concurrent requests for the same user exactly one succeeds.
        The attendance counter is incremented afterwards in a separate
        write; if that write fails the counter lags until recounted.

        Returns:
            dict: course_id, uid, start_at

        Raises:
            CourseNotFoundError: If missing or not visible to the viewer
            PermissionDeniedError: Without ATTEND_COURSE
            CourseEndedError: If the course has already ended
            AlreadyEnrolledError: If the viewer is already enrolled
        """
        now = now or utcnow()
        course = await load_visible_course(self.db, domain_id, course_id, viewer)
        require_perm(viewer, Permission.ATTEND_COURSE)

        if is_done(course.end_at, now):
            logger.info(
                "Enrollment rejected, course ended",
                extra={"course_id": str(course_id), "uid": viewer.uid},
            )
            raise CourseEndedError(course_id)

        enrolled = await course_status_crud.set_attend_if_absent(
            self.db, domain_id, course_id, viewer.uid, now
        )
        if not enrolled:
            await self.db.rollback()
            logger.info(
                "Duplicate enrollment rejected",
                extra={"course_id": str(course_id), "uid": viewer.uid},
            )
            raise AlreadyEnrolledError(course_id, viewer.uid)
        await self.db.commit()

        await course_crud.inc_attend(self.db, course_id)
        await self.db.commit()

        logger.info(
            "Student enrolled",
            extra={"course_id": str(course_id), "uid": viewer.uid},
        )
        return {"course_id": course_id, "uid": viewer.uid, "start_at": as_utc(now)}

    async def get_status(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
    ) -> dict[str, Any]:
        """
        The viewer's enrollment status with effective progress.

        Returns:
            dict: status (None when not enrolled), progress, records

        Raises:
            CourseNotFoundError: If missing or not visible to the viewer
        """
        course = await load_visible_course(self.db, domain_id, course_id, viewer)
        status = await course_status_crud.get_status(self.db, course_id, viewer.uid)
        if status is None:
            return {"status": None, "progress": {}, "records": {}}

        progress, records = await ProgressService(self.db).progress_with_records(
            course, viewer.uid
        )
        return {
            "status": serialize_status(status),
            "progress": progress,
            "records": records,
        }

    async def list_enrolled_uids(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        limit: int = 100,
    ) -> list[int]:
        """Earliest enrolled students of a visible course."""
        await load_visible_course(self.db, domain_id, course_id, viewer)
        statuses = await course_status_crud.list_enrolled(
            self.db, course_id, limit=limit, students_only=True
        )
        return [s.uid for s in statuses]

    async def recount_attendance(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
    ) -> int:
        """
        Rebuild the attendance counter from the status rows.

        Returns:
            int: The corrected counter

        Raises:
            CourseNotFoundError: If the course does not exist
            PermissionDeniedError: Without the matching edit permission
        """
        course = await load_course(self.db, domain_id, course_id)
        require_edit_permission(course, viewer)
        previous = course.attend

        attend = await course_crud.recount_attend(self.db, course_id)
        await self.db.commit()

        if attend != previous:
            logger.warning(
                "Attendance counter corrected",
                extra={"course_id": str(course_id), "previous": previous, "attend": attend},
            )
        return attend
