"""
Progress ledger service.

Appends judged attempts to a student's course journal and derives the
effective per-problem progress from it.

Dependencies: courseware.boundary.db.CRUD, courseware.core.progress
System role: Progress ledger orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from courseware.application.services.access import load_course
from courseware.boundary.db.CRUD.host_crud import record_crud
from courseware.boundary.db.CRUD.journal_crud import journal_crud
from courseware.boundary.db.models import CourseModel
from courseware.core.progress import JournalEntry, effective_progress

logger = logging.getLogger(__name__)


def serialize_entry(entry: JournalEntry) -> dict[str, Any]:
    return {"pid": entry.pid, "rid": entry.rid, "score": entry.score, "status": entry.status}


def serialize_record(record: Any) -> dict[str, Any]:
    return {
        "id": record.id,
        "pid": record.pid,
        "uid": record.uid,
        "score": record.score,
        "status": record.status,
        "lang": record.lang,
        "created_at": record.created_at,
    }


class ProgressService:
    """Progress ledger orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def append_entry(
        self,
        domain_id: str,
        course_id: UUID,
        uid: int,
        pid: int,
        rid: UUID,
        score: float,
        status: int,
    ) -> dict[str, Any]:
        """
        Append one judged attempt to a student's journal.

        The entry is stored whatever the course's current problem list is;
        attempts on problems outside it are simply ignored when progress
        is derived.

        Returns:
            dict: seq, course_id, uid, pid

        Raises:
            CourseNotFoundError: If the course does not exist
        """
        await load_course(self.db, domain_id, course_id)
        row = await journal_crud.append(
            self.db, course_id, uid, pid, rid, score, status
        )
        await self.db.commit()

        logger.info(
            "Journal entry appended",
            extra={
                "course_id": str(course_id),
                "uid": uid,
                "pid": pid,
                "seq": row.seq,
                "score": score,
            },
        )
        return {"seq": row.seq, "course_id": course_id, "uid": uid, "pid": pid}

    async def current_progress(
        self,
        course: CourseModel,
        uid: int,
    ) -> dict[int, JournalEntry]:
        """Effective entry per problem of the course for one student."""
        journals = await journal_crud.list_for_users(self.db, course.id, [uid])
        return effective_progress(journals[uid], course.pids)

    async def progress_with_records(
        self,
        course: CourseModel,
        uid: int,
    ) -> tuple[dict[int, dict[str, Any]], dict[str, dict[str, Any]]]:
        """
        Effective progress of a student plus the submission records it
        points at.

        Returns:
            tuple: (entries keyed by pid, records keyed by record id string)
        """
        progress = await self.current_progress(course, uid)
        records = await record_crud.get_list(
            self.db, course.domain_id, [e.rid for e in progress.values()]
        )
        return (
            {pid: serialize_entry(e) for pid, e in progress.items()},
            {str(rid): serialize_record(r) for rid, r in records.items()},
        )
