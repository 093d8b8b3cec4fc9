"""
Course status CRUD operations.

Per-(course, user) enrollment rows, including the conditional
set-if-absent write that makes enrollment happen at most once.

Dependencies: sqlalchemy, courseware.boundary.db.models
System role: Enrollment persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.boundary.db.models import CourseStatusModel
from courseware.boundary.db.CRUD.base_crud import BaseCRUD


class CourseStatusCRUD(BaseCRUD[CourseStatusModel]):
    """CRUD operations for CourseStatusModel."""

    def __init__(self) -> None:
        """Initialize CourseStatusCRUD with CourseStatusModel."""
        super().__init__(CourseStatusModel)

    async def get_status(
        self,
        session: AsyncSession,
        course_id: UUID,
        uid: int,
    ) -> CourseStatusModel | None:
        """Status row of one user in one course, None if absent."""
        stmt = select(CourseStatusModel).where(
            CourseStatusModel.course_id == course_id,
            CourseStatusModel.uid == uid,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_multi_for_user(
        self,
        session: AsyncSession,
        uid: int,
        course_ids: Sequence[UUID],
    ) -> Sequence[CourseStatusModel]:
        """Status rows of a user across several courses."""
        if not course_ids:
            return []
        return await self.get_multi(
            session,
            CourseStatusModel.uid == uid,
            CourseStatusModel.course_id.in_(course_ids),
        )

    async def list_enrolled(
        self,
        session: AsyncSession,
        course_id: UUID,
        limit: int | None = None,
        offset: int = 0,
        students_only: bool = False,
    ) -> Sequence[CourseStatusModel]:
        """
        Enrolled students in enrollment order (earliest first, then uid).

        This order is the scoreboard tie-break, so it must stay stable.

        Args:
            students_only: Leave out the guest (0) and system (1) accounts
        """
        where = [CourseStatusModel.course_id == course_id, CourseStatusModel.attend == 1]
        if students_only:
            where.append(CourseStatusModel.uid > 1)
        return await self.get_multi(
            session,
            *where,
            order_by=(CourseStatusModel.start_at.asc(), CourseStatusModel.uid.asc()),
            limit=limit,
            offset=offset,
        )

    async def count_enrolled(self, session: AsyncSession, course_id: UUID) -> int:
        return await self.count(
            session,
            CourseStatusModel.course_id == course_id,
            CourseStatusModel.attend == 1,
        )

    async def set_attend_if_absent(
        self,
        session: AsyncSession,
        domain_id: str,
        course_id: UUID,
        uid: int,
        start_at: datetime,
    ) -> bool:
        """
        Mark the user as attending unless they already are.

        An existing row without attendance is flipped with a conditional
        UPDATE; otherwise a new row is inserted and the (course_id, uid)
        unique constraint decides between concurrent inserts.

        Returns:
            True if this call performed the enrollment, False if the user
            was already enrolled (the session is rolled back in that case)
        """
        stmt = (
            update(CourseStatusModel)
            .where(
                CourseStatusModel.course_id == course_id,
                CourseStatusModel.uid == uid,
                CourseStatusModel.attend != 1,
            )
            .values(attend=1, enroll=1, start_at=start_at)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount:
            return True

        existing = await self.get_status(session, course_id, uid)
        if existing is not None:
            return False
        return await self.insert_attended(session, domain_id, course_id, uid, start_at)

    async def insert_attended(
        self,
        session: AsyncSession,
        domain_id: str,
        course_id: UUID,
        uid: int,
        start_at: datetime,
    ) -> bool:
        """
        Insert an attending status row.

        Returns:
            False when the unique constraint rejected the row
        """
        session.add(
            CourseStatusModel(
                domain_id=domain_id,
                course_id=course_id,
                uid=uid,
                enroll=1,
                attend=1,
                start_at=start_at,
            )
        )
        try:
            await session.flush()
        except IntegrityError:
            await session.rollback()
            return False
        return True


course_status_crud = CourseStatusCRUD()
