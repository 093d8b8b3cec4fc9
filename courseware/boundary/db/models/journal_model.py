"""
Course journal ORM model.

Append-only per-student log of judged submissions inside a course.
The auto-increment ``seq`` column is the append order.

Dependencies: sqlalchemy, courseware.boundary.db.base
System role: Progress ledger persistence
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from courseware.boundary.db.base import Base, utcnow


class CourseJournalModel(Base):
    """
    One judged attempt of a student on a course problem.

    Rows are only ever inserted. A later row for the same (course, uid,
    pid) supersedes earlier ones for progress and scoreboard purposes.

    Attributes:
        seq: Monotonic append position
        course_id: Parent course
        uid: Student user id
        pid: Problem id
        rid: Submission record id
        score: Judged score
        status: Judge status code
        created_at: Append time
    """

    __tablename__ = "course_journal"
    __table_args__ = (
        Index("ix_course_journal_course_uid", "course_id", "uid"),
    )

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    uid: Mapped[int] = mapped_column(Integer, nullable=False)
    pid: Mapped[int] = mapped_column(Integer, nullable=False)
    rid: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    score: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
