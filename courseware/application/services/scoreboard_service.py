"""
Scoreboard service.

Builds the course scoreboard from enrolled students' journals and lists
submission records on the course's problems.

Dependencies: courseware.boundary.db.CRUD, courseware.core.scoreboard
System role: Scoreboard aggregator orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from courseware.application.services.access import load_visible_course, require_perm
from courseware.application.services.course_service import serialize_problem
from courseware.application.services.progress_service import serialize_record
from courseware.boundary.db.CRUD.course_status_crud import course_status_crud
from courseware.boundary.db.CRUD.host_crud import problem_crud, record_crud
from courseware.boundary.db.CRUD.journal_crud import journal_crud
from courseware.configs.limits import CourseLimitSettings
from courseware.core.permissions import Permission
from courseware.core.scoreboard import build_scoreboard
from courseware.core.visibility import Viewer
from courseware.models.common import page_count, page_offset

logger = logging.getLogger(__name__)


class ScoreboardService:
    """Scoreboard aggregator orchestrator."""

    def __init__(self, db: AsyncSession, limits: CourseLimitSettings) -> None:
        self.db = db
        self.limits = limits

    async def get_scoreboard(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        page: int = 1,
    ) -> dict[str, Any]:
        """
        One page of enrolled students ranked by total score.

        The page is cut from the enrollment listing (earliest first) and
        ranked within itself; ties keep enrollment order.

        Raises:
            CourseNotFoundError: If missing or not visible to the viewer
            PermissionDeniedError: Without VIEW_SCOREBOARD
        """
        course = await load_visible_course(self.db, domain_id, course_id, viewer)
        require_perm(viewer, Permission.VIEW_SCOREBOARD)

        page_size = self.limits.page_size
        statuses = await course_status_crud.list_enrolled(
            self.db, course_id, limit=page_size, offset=page_offset(page, page_size)
        )
        total = await course_status_crud.count_enrolled(self.db, course_id)

        uids = [s.uid for s in statuses]
        journals = await journal_crud.list_for_users(self.db, course_id, uids)
        rows = build_scoreboard(((uid, journals[uid]) for uid in uids), course.pids)
        problems = await problem_crud.get_list(self.db, domain_id, course.pids)

        logger.info(
            "Scoreboard built",
            extra={"course_id": str(course_id), "rows": len(rows), "page": page},
        )
        return {
            "course_id": course_id,
            "pids": list(dict.fromkeys(course.pids)),
            "problems": {pid: serialize_problem(p) for pid, p in problems.items()},
            "rows": [
                {"uid": r.uid, "scores": r.scores, "total_score": r.total_score}
                for r in rows
            ],
            "page": page,
            "page_count": page_count(total, page_size),
        }

    async def list_records(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        page: int = 1,
    ) -> dict[str, Any]:
        """
        Submissions on the course's problems, newest first.

        Viewers without scoreboard permission only see their own records.

        Raises:
            CourseNotFoundError: If missing or not visible to the viewer
        """
        course = await load_visible_course(self.db, domain_id, course_id, viewer)
        own_only = not viewer.has_perm(Permission.VIEW_SCOREBOARD)

        page_size = self.limits.page_size
        records, total = await record_crud.list_for_problems(
            self.db,
            domain_id,
            course.pids,
            uid=viewer.uid if own_only else None,
            limit=page_size,
            offset=page_offset(page, page_size),
        )
        return {
            "course_id": course_id,
            "items": [serialize_record(r) for r in records],
            "page": page,
            "page_count": page_count(total, page_size),
        }
