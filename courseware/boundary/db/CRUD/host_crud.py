"""
Read operations on host-owned collections.

Group memberships, the problem catalog and submission records are owned
by the host platform; the course service only reads them.

Dependencies: sqlalchemy, courseware.boundary.db.models
System role: Identity, problem and record lookups
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.boundary.db.models import GroupMembershipModel, ProblemModel, RecordModel
from courseware.boundary.db.CRUD.base_crud import BaseCRUD


class GroupCRUD(BaseCRUD[GroupMembershipModel]):
    """Group membership lookups."""

    def __init__(self) -> None:
        super().__init__(GroupMembershipModel)

    async def list_groups(
        self,
        session: AsyncSession,
        domain_id: str,
        uid: int | None = None,
    ) -> list[str]:
        """
        Group names of a domain, or only those ``uid`` belongs to.

        Returns:
            list[str]: Distinct names, sorted
        """
        stmt = select(GroupMembershipModel.name).where(
            GroupMembershipModel.domain_id == domain_id
        )
        if uid is not None:
            stmt = stmt.where(GroupMembershipModel.uid == uid)
        result = await session.execute(stmt.distinct().order_by(GroupMembershipModel.name))
        return list(result.scalars().all())


class ProblemCRUD(BaseCRUD[ProblemModel]):
    """Problem catalog lookups."""

    def __init__(self) -> None:
        super().__init__(ProblemModel)

    async def get_list(
        self,
        session: AsyncSession,
        domain_id: str,
        pids: Sequence[int],
        can_view_hidden: bool = True,
        owner: int | None = None,
    ) -> dict[int, ProblemModel]:
        """
        Resolve problem ids to catalog entries.

        Hidden problems are only returned when ``can_view_hidden`` is set
        or they belong to ``owner``.

        Returns:
            dict mapping pid to problem; unknown or invisible pids are absent
        """
        if not pids:
            return {}
        stmt = select(ProblemModel).where(
            ProblemModel.domain_id == domain_id,
            ProblemModel.pid.in_(list(pids)),
        )
        if not can_view_hidden:
            visible = ProblemModel.hidden.is_(False)
            if owner is not None:
                visible = or_(visible, ProblemModel.owner == owner)
            stmt = stmt.where(visible)
        result = await session.execute(stmt)
        return {p.pid: p for p in result.scalars()}


class RecordCRUD(BaseCRUD[RecordModel]):
    """Submission record lookups."""

    def __init__(self) -> None:
        super().__init__(RecordModel)

    async def get_list(
        self,
        session: AsyncSession,
        domain_id: str,
        rids: Sequence[UUID],
    ) -> dict[UUID, RecordModel]:
        """Resolve record ids; unknown ids are absent from the result."""
        if not rids:
            return {}
        records = await self.get_multi(
            session,
            RecordModel.domain_id == domain_id,
            RecordModel.id.in_(list(rids)),
        )
        return {r.id: r for r in records}

    async def list_for_problems(
        self,
        session: AsyncSession,
        domain_id: str,
        pids: Sequence[int],
        uid: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[Sequence[RecordModel], int]:
        """
        Records on a problem set, newest first, optionally for one user.

        Returns:
            tuple: (page of records, total matching count)
        """
        if not pids:
            return [], 0
        where = [RecordModel.domain_id == domain_id, RecordModel.pid.in_(list(pids))]
        if uid is not None:
            where.append(RecordModel.uid == uid)
        records = await self.get_multi(
            session,
            *where,
            order_by=(RecordModel.created_at.desc(), RecordModel.id.desc()),
            limit=limit,
            offset=offset,
        )
        total = await self.count(session, *where)
        return records, total


group_crud = GroupCRUD()
problem_crud = ProblemCRUD()
record_crud = RecordCRUD()
