"""
Base CRUD operations for SQLAlchemy models.

Generic insert, filtered read, count, update and delete shared by the
course, enrollment, journal and host lookup CRUD classes.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic CRUD over one model.

    Methods flush but never commit; the calling service owns the
    transaction.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **kwargs: Any) -> ModelT:
        """
        Insert a row and load server-side defaults back.

        Args:
            session: Async database session
            **kwargs: Column values

        Returns:
            The flushed instance (ids and timestamps populated)
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        session: AsyncSession,
        *where: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        """
        Rows matching every ``where`` clause.

        Args:
            session: Async database session
            *where: Filter clauses, AND-ed together
            order_by: Sort expressions
            limit: Page size, None for no limit
            offset: Rows to skip

        Returns:
            Sequence of model instances
        """
        stmt = select(self.model).where(*where).order_by(*order_by).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count(self, session: AsyncSession, *where: ColumnElement[bool]) -> int:
        """Number of rows matching every ``where`` clause."""
        stmt = select(func.count()).select_from(self.model).where(*where)
        result = await session.execute(stmt)
        return result.scalar_one()

    async def update_by_id(
        self,
        session: AsyncSession,
        id: UUID,
        **kwargs: Any,
    ) -> bool:
        """
        Set columns on one row with a single UPDATE statement.

        Returns:
            False when no row has that id
        """
        stmt = update(self.model).where(self.model.id == id).values(**kwargs)
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete one row.

        Returns:
            False when no row has that id
        """
        stmt = delete(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.rowcount > 0
