"""
Host platform ORM models read by the course service.

Group memberships, the problem catalog and submission records belong to
the host platform. They are mapped here so the course service can query
them; this service never writes them outside of tests and seeding.

Dependencies: sqlalchemy, courseware.boundary.db.base
System role: Read models for host-owned collections
"""

from sqlalchemy import Boolean, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from courseware.boundary.db.base import Base, UUIDMixin, TimestampMixin


class GroupMembershipModel(Base, UUIDMixin):
    """Membership of one user in one named group of a domain."""

    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("domain_id", "name", "uid", name="uq_group_member"),
    )

    domain_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    uid: Mapped[int] = mapped_column(Integer, nullable=False, index=True)


class ProblemModel(Base, UUIDMixin):
    """Problem catalog entry addressed by its numeric id inside a domain."""

    __tablename__ = "problems"
    __table_args__ = (
        UniqueConstraint("domain_id", "pid", name="uq_problem_domain_pid"),
    )

    domain_id: Mapped[str] = mapped_column(String(64), nullable=False)
    pid: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    owner: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hidden: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class RecordModel(Base, UUIDMixin, TimestampMixin):
    """Judged submission record."""

    __tablename__ = "records"

    domain_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    pid: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    uid: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lang: Mapped[str] = mapped_column(String(32), nullable=False, default="")
