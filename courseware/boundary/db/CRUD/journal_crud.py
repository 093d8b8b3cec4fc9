"""
Course journal CRUD operations.

Append-only access to the progress journal.

Dependencies: sqlalchemy, courseware.boundary.db.models, courseware.core.progress
System role: Progress ledger persistence operations
"""

from collections import defaultdict
from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.boundary.db.models import CourseJournalModel
from courseware.boundary.db.CRUD.base_crud import BaseCRUD
from courseware.core.progress import JournalEntry


class JournalCRUD(BaseCRUD[CourseJournalModel]):
    """
    Append and read operations for CourseJournalModel.

    Rows are never updated; they only leave with their course.
    """

    def __init__(self) -> None:
        """Initialize JournalCRUD with CourseJournalModel."""
        super().__init__(CourseJournalModel)

    async def append(
        self,
        session: AsyncSession,
        course_id: UUID,
        uid: int,
        pid: int,
        rid: UUID,
        score: float,
        status: int,
    ) -> CourseJournalModel:
        """Append one judged attempt; ``seq`` is assigned by the database."""
        return await self.create(
            session,
            course_id=course_id,
            uid=uid,
            pid=pid,
            rid=rid,
            score=score,
            status=status,
        )

    async def list_for_users(
        self,
        session: AsyncSession,
        course_id: UUID,
        uids: Sequence[int],
    ) -> dict[int, list[JournalEntry]]:
        """
        Journals of several students in append order.

        Returns:
            dict mapping uid to its entries; students without entries map
            to an empty list
        """
        journals: dict[int, list[JournalEntry]] = defaultdict(list)
        if not uids:
            return {}
        stmt = (
            select(CourseJournalModel)
            .where(
                CourseJournalModel.course_id == course_id,
                CourseJournalModel.uid.in_(uids),
            )
            .order_by(CourseJournalModel.seq.asc())
        )
        result = await session.execute(stmt)
        for row in result.scalars():
            journals[row.uid].append(
                JournalEntry(pid=row.pid, rid=row.rid, score=row.score, status=row.status)
            )
        return {uid: journals.get(uid, []) for uid in uids}


journal_crud = JournalCRUD()
