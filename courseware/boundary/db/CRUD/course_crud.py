"""
Course CRUD operations.

Provides Create, Read, Update, Delete operations for CourseModel with
grant management, visibility-filtered listing and the attendance counter.

Dependencies: sqlalchemy, courseware.boundary.db.models
System role: Course persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.boundary.db.models import (
    CourseGrantModel,
    CourseJournalModel,
    CourseModel,
    CourseStatusModel,
    GrantRole,
)
from courseware.boundary.db.CRUD.base_crud import BaseCRUD


def _grant_rows(
    maintainers: Sequence[int] = (),
    teachers: Sequence[int] = (),
    assign: Sequence[str] = (),
    classes: Sequence[str] = (),
) -> list[CourseGrantModel]:
    grants = []
    for role, subjects in (
        (GrantRole.MAINTAINER, [str(uid) for uid in maintainers]),
        (GrantRole.TEACHER, [str(uid) for uid in teachers]),
        (GrantRole.ASSIGN, list(assign)),
        (GrantRole.CLASS, list(classes)),
    ):
        for subject in dict.fromkeys(subjects):
            grants.append(CourseGrantModel(role=role, subject=subject))
    return grants


class CourseCRUD(BaseCRUD[CourseModel]):
    """
    CRUD operations for CourseModel.

    Courses are always addressed by (domain_id, id); a course of another
    domain is treated as missing.
    """

    def __init__(self) -> None:
        """Initialize CourseCRUD with CourseModel."""
        super().__init__(CourseModel)

    async def add(
        self,
        session: AsyncSession,
        *,
        maintainers: Sequence[int] = (),
        teachers: Sequence[int] = (),
        assign: Sequence[str] = (),
        classes: Sequence[str] = (),
        **fields: Any,
    ) -> CourseModel:
        """
        Create a course together with its access grants.

        Args:
            session: Async database session
            maintainers, teachers: User ids
            assign, classes: Group names
            **fields: CourseModel column values

        Returns:
            CourseModel: Created course with grants loaded
        """
        course = CourseModel(
            grants=_grant_rows(maintainers, teachers, assign, classes),
            **fields,
        )
        session.add(course)
        await session.flush()
        await session.refresh(course)
        return course

    async def get(
        self,
        session: AsyncSession,
        domain_id: str,
        course_id: UUID,
    ) -> CourseModel | None:
        """
        Retrieve a course of a domain.

        Returns:
            CourseModel with grants loaded, None if not found
        """
        stmt = select(CourseModel).where(
            CourseModel.domain_id == domain_id,
            CourseModel.id == course_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_multi_visible(
        self,
        session: AsyncSession,
        domain_id: str,
        where: Sequence[ColumnElement[bool]],
        order_by: Sequence[Any],
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[Sequence[CourseModel], int]:
        """
        List courses of a domain matching ``where`` with the total count.

        Returns:
            tuple: (page of courses, total matching count)
        """
        clauses = (CourseModel.domain_id == domain_id, *where)
        courses = await self.get_multi(
            session, *clauses, order_by=order_by, limit=limit, offset=offset
        )
        total = await self.count(session, *clauses)
        return courses, total

    async def edit(
        self,
        session: AsyncSession,
        course: CourseModel,
        *,
        maintainers: Sequence[int] | None = None,
        teachers: Sequence[int] | None = None,
        assign: Sequence[str] | None = None,
        classes: Sequence[str] | None = None,
        **fields: Any,
    ) -> CourseModel:
        """
        Update course columns and replace the given grant roles.

        Roles passed as None keep their current grants.
        """
        for name, value in fields.items():
            setattr(course, name, value)

        replaced = {
            GrantRole.MAINTAINER: maintainers,
            GrantRole.TEACHER: teachers,
            GrantRole.ASSIGN: assign,
            GrantRole.CLASS: classes,
        }
        # Reuse unchanged rows so the unique constraint never sees a
        # delete and re-insert of the same grant in one flush.
        current = {(g.role, g.subject): g for g in course.grants}
        keep = [g for g in course.grants if replaced[g.role] is None]
        fresh = _grant_rows(
            maintainers or (), teachers or (), assign or (), classes or ()
        )
        course.grants = keep + [
            current.get((g.role, g.subject), g)
            for g in fresh
            if replaced[g.role] is not None
        ]

        await session.flush()
        await session.refresh(course)
        return course

    async def set_files(
        self,
        session: AsyncSession,
        course_id: UUID,
        files: list[dict[str, Any]],
    ) -> bool:
        """Overwrite the attachment list of a course."""
        return await self.update_by_id(session, course_id, files=files)

    async def inc_attend(self, session: AsyncSession, course_id: UUID, delta: int = 1) -> None:
        """Atomically add ``delta`` to the attendance counter."""
        stmt = (
            update(CourseModel)
            .where(CourseModel.id == course_id)
            .values(attend=CourseModel.attend + delta)
        )
        await session.execute(stmt)

    async def recount_attend(self, session: AsyncSession, course_id: UUID) -> int:
        """Recompute the attendance counter from status rows and store it."""
        count_stmt = select(func.count()).select_from(CourseStatusModel).where(
            CourseStatusModel.course_id == course_id,
            CourseStatusModel.attend == 1,
        )
        attend = (await session.execute(count_stmt)).scalar_one()
        await self.update_by_id(session, course_id, attend=attend)
        return attend

    async def delete_cascade(self, session: AsyncSession, course_id: UUID) -> bool:
        """
        Delete a course with its grants, statuses and journal.

        Child rows are removed explicitly so the cascade does not depend on
        the backend enforcing foreign keys.

        Returns:
            True if the course existed
        """
        for model in (CourseJournalModel, CourseStatusModel, CourseGrantModel):
            await session.execute(delete(model).where(model.course_id == course_id))
        return await self.delete_by_id(session, course_id)


course_crud = CourseCRUD()
