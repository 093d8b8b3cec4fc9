"""
Course service orchestrator.

Coordinates course lifecycle operations: listing, detail, create, edit
and delete.

Dependencies: courseware.boundary.db.CRUD, courseware.core
System role: Course use case orchestration
"""

import logging
import re
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from courseware.application.services.access import (
    load_course,
    load_visible_course,
    require_edit_permission,
    require_perm,
)
from courseware.application.services.concurrency import run_independently
from courseware.application.services.enrollment_service import serialize_status
from courseware.application.services.progress_service import ProgressService
from courseware.boundary.aws.course_file_storage import S3CourseFileStorage
from courseware.boundary.db.base import utcnow
from courseware.boundary.db.CRUD.course_crud import course_crud
from courseware.boundary.db.CRUD.course_status_crud import course_status_crud
from courseware.boundary.db.CRUD.host_crud import group_crud, problem_crud
from courseware.boundary.db.models import CourseModel
from courseware.configs.limits import CourseLimitSettings
from courseware.core.attachments import file_key, sort_files
from courseware.core.course_window import (
    as_utc,
    default_window,
    is_done,
    is_not_started,
    parse_problem_ids,
    rewrite_file_links,
    validate_window,
)
from courseware.core.exceptions import ValidationError
from courseware.core.permissions import Permission
from courseware.core.visibility import (
    LISTING_ORDER,
    Viewer,
    build_title_filter,
    build_visibility_filter,
)
from courseware.models.common import page_count, page_offset

logger = logging.getLogger(__name__)

_NUMERIC = re.compile(r"-?\d+")


def course_state(course: CourseModel, now: datetime) -> str:
    if is_not_started(course.begin_at, now):
        return "not_started"
    if is_done(course.end_at, now):
        return "done"
    return "ongoing"


def serialize_course(course: CourseModel, now: datetime) -> dict[str, Any]:
    """Plain dict view of a course matching CourseResponse."""
    return {
        "id": course.id,
        "domain_id": course.domain_id,
        "title": course.title,
        "content": course.content,
        "owner": course.owner,
        "maintainers": course.maintainers,
        "teachers": course.teachers,
        "assign": course.assign,
        "classes": course.classes,
        "begin_at": as_utc(course.begin_at),
        "end_at": as_utc(course.end_at),
        "state": course_state(course, now),
        "attend": course.attend,
        "pids": list(course.pids),
        "files": sort_files(course.files),
        "created_at": course.created_at,
        "updated_at": course.updated_at,
    }


def serialize_problem(problem: Any) -> dict[str, Any]:
    return {"pid": problem.pid, "title": problem.title, "hidden": problem.hidden}


class CourseService:
    """Course service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        limits: CourseLimitSettings,
        storage: S3CourseFileStorage | None = None,
    ) -> None:
        """
        Initialize course service.

        Args:
            db: Async SQLAlchemy session
            limits: Course limit settings
            storage: Attachment storage, needed to delete courses
        """
        self.db = db
        self.limits = limits
        self.storage = storage

    async def list_courses(
        self,
        domain_id: str,
        viewer: Viewer,
        q: str | None = None,
        page: int = 1,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        List courses visible to the viewer, newest start first.

        Args:
            domain_id: Host domain
            viewer: Requesting user; ``group_filter`` narrows by group
            q: Optional title search
            page: 1-based page number

        Returns:
            dict: items, total, page, page_count, statuses, groups, group, q
        """
        now = now or utcnow()
        where = [build_visibility_filter(viewer)]
        title_filter = build_title_filter(q)
        if title_filter is not None:
            where.append(title_filter)

        page_size = self.limits.page_size
        courses, total = await course_crud.get_multi_visible(
            self.db,
            domain_id,
            where,
            order_by=LISTING_ORDER,
            limit=page_size,
            offset=page_offset(page, page_size),
        )

        statuses: dict[str, dict] = {}
        if viewer.uid > 0 and courses:
            rows = await course_status_crud.get_multi_for_user(
                self.db, viewer.uid, [c.id for c in courses]
            )
            statuses = {str(s.course_id): serialize_status(s) for s in rows}

        logger.info(
            "Courses listed",
            extra={
                "domain_id": domain_id,
                "uid": viewer.uid,
                "count": len(courses),
                "total": total,
                "group": viewer.group_filter,
            },
        )

        return {
            "items": [serialize_course(c, now) for c in courses],
            "total": total,
            "page": page,
            "page_count": page_count(total, page_size),
            "statuses": statuses,
            "groups": [g for g in sorted(viewer.groups) if not _NUMERIC.fullmatch(g)],
            "group": viewer.group_filter,
            "q": q,
        }

    async def get_course_detail(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Course page for a viewer: course, own status and progress,
        enrolled roster and problem summaries.

        Raises:
            CourseNotFoundError: If missing or not visible
        """
        now = now or utcnow()
        course = await load_visible_course(self.db, domain_id, course_id, viewer)

        status = await course_status_crud.get_status(self.db, course.id, viewer.uid)
        enrolled = await course_status_crud.list_enrolled(
            self.db, course.id, limit=self.limits.enrolled_sidebar_limit, students_only=True
        )
        problems = await problem_crud.get_list(self.db, domain_id, course.pids)

        progress: dict[int, dict] = {}
        records: dict[str, dict] = {}
        if status is not None:
            progress, records = await ProgressService(self.db).progress_with_records(
                course, viewer.uid
            )

        data = serialize_course(course, now)
        data["content"] = rewrite_file_links(course.content, course.id)
        return {
            "course": data,
            "status": serialize_status(status) if status else None,
            "enrolled_uids": [s.uid for s in enrolled],
            "problems": {pid: serialize_problem(p) for pid, p in problems.items()},
            "progress": progress,
            "records": records,
        }

    async def _validate_problems(
        self,
        domain_id: str,
        pids: Sequence[int],
        viewer: Viewer,
    ) -> None:
        if not pids:
            return
        found = await problem_crud.get_list(
            self.db,
            domain_id,
            pids,
            can_view_hidden=viewer.has_perm(Permission.VIEW_PROBLEM_HIDDEN),
            owner=viewer.uid,
        )
        missing = [pid for pid in pids if pid not in found]
        if missing:
            raise ValidationError(
                "Problems not found", field="pids", details={"missing": missing}
            )

    async def create_course(
        self,
        domain_id: str,
        viewer: Viewer,
        title: str,
        content: str = "",
        pids: str | Sequence[int] | None = None,
        begin_at: datetime | None = None,
        end_at: datetime | None = None,
        maintainers: Sequence[int] = (),
        teachers: Sequence[int] = (),
        assign: Sequence[str] = (),
        classes: Sequence[str] = (),
        now: datetime | None = None,
    ) -> UUID:
        """
        Create a course owned by the viewer.

        Returns:
            UUID: Created course ID

        Raises:
            PermissionDeniedError: Without CREATE_COURSE
            ValidationError: Bad window or unknown problems
        """
        require_perm(viewer, Permission.CREATE_COURSE)
        now = now or utcnow()

        begin_at = as_utc(begin_at or now)
        if end_at is None:
            _, end_at = default_window(begin_at, self.limits.default_duration_days)
        end_at = as_utc(end_at)
        validate_window(begin_at, end_at)

        problem_ids = parse_problem_ids(pids)
        await self._validate_problems(domain_id, problem_ids, viewer)

        course = await course_crud.add(
            self.db,
            domain_id=domain_id,
            title=title,
            content=content,
            owner=viewer.uid,
            begin_at=begin_at,
            end_at=end_at,
            pids=problem_ids,
            files=[],
            attend=0,
            maintainers=maintainers,
            teachers=teachers,
            assign=assign,
            classes=classes,
        )
        await self.db.commit()

        logger.info(
            "Course created",
            extra={"course_id": str(course.id), "domain_id": domain_id, "owner": viewer.uid},
        )
        return course.id

    async def get_course(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Course data for a viewer who may see it."""
        course = await load_visible_course(self.db, domain_id, course_id, viewer)
        return serialize_course(course, now or utcnow())

    async def update_course(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        now: datetime | None = None,
        **changes: Any,
    ) -> dict[str, Any]:
        """
        Update course fields; fields passed as None are left unchanged.

        Raises:
            CourseNotFoundError: If the course does not exist
            PermissionDeniedError: Without the matching edit permission
            ValidationError: Bad window or unknown problems
        """
        course = await load_course(self.db, domain_id, course_id)
        require_edit_permission(course, viewer)

        changes = {k: v for k, v in changes.items() if v is not None}
        grant_changes = {
            role: changes.pop(role)
            for role in ("maintainers", "teachers", "assign", "classes")
            if role in changes
        }

        begin_at = as_utc(changes.get("begin_at", course.begin_at))
        end_at = as_utc(changes.get("end_at", course.end_at))
        validate_window(begin_at, end_at)
        if "begin_at" in changes or "end_at" in changes:
            changes["begin_at"], changes["end_at"] = begin_at, end_at

        if "pids" in changes:
            changes["pids"] = parse_problem_ids(changes["pids"])
            await self._validate_problems(domain_id, changes["pids"], viewer)

        course = await course_crud.edit(self.db, course, **grant_changes, **changes)
        await self.db.commit()

        logger.info(
            "Course updated",
            extra={
                "course_id": str(course_id),
                "updates": sorted([*changes, *grant_changes]),
            },
        )
        return serialize_course(course, now or utcnow())

    async def delete_course(self, domain_id: str, course_id: UUID, viewer: Viewer) -> None:
        """
        Delete a course with its enrollments, journal and attachments.

        Database rows and stored files are removed concurrently.

        Raises:
            CourseNotFoundError: If the course does not exist
            PermissionDeniedError: Without the matching edit permission
        """
        course = await load_course(self.db, domain_id, course_id)
        require_edit_permission(course, viewer)
        keys = [file_key(domain_id, course_id, f["name"]) for f in course.files]

        steps = [("delete_rows", self._delete_rows(course_id))]
        if keys:
            if self.storage is None:
                raise RuntimeError("Attachment storage is required to delete course files")
            steps.append(("delete_blobs", self.storage.delete(keys, viewer.uid)))
        await run_independently(*steps)

        logger.info(
            "Course deleted",
            extra={"course_id": str(course_id), "file_count": len(keys)},
        )

    async def _delete_rows(self, course_id: UUID) -> None:
        await course_crud.delete_cascade(self.db, course_id)
        await self.db.commit()

    async def list_assignable_groups(self, domain_id: str, viewer: Viewer) -> list[str]:
        """All group names of the domain, for the course edit form."""
        require_perm(viewer, Permission.CREATE_COURSE)
        return await group_crud.list_groups(self.db, domain_id)
