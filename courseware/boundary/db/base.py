"""
SQLAlchemy declarative base and common mixins.

Every course table registers on ``Base``; mixins supply UUID keys and
audit timestamps.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Declarative base; ``Base.metadata`` drives table creation."""

    pass


class UUIDMixin:
    """
    UUID v4 primary key.

    Uses the generic ``Uuid`` type: native UUID on PostgreSQL, CHAR(32)
    on SQLite.

    Attributes:
        id: Primary key generated client-side on insert
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


class TimestampMixin:
    """
    Creation and last-update timestamps in UTC.

    Attributes:
        created_at: Set on insert, also the listing tie-break for courses
        updated_at: Refreshed by the ORM on every update
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
