"""
Course status ORM model.

Per-(course, user) enrollment row. The UNIQUE constraint on
(course_id, uid) is what makes enrollment a set-if-absent operation.

Dependencies: sqlalchemy, courseware.boundary.db.base
System role: Enrollment persistence
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from courseware.boundary.db.base import Base, UUIDMixin, TimestampMixin


class CourseStatusModel(Base, UUIDMixin, TimestampMixin):
    """
    Enrollment status of one user in one course.

    Attributes:
        domain_id: Host domain
        course_id: Parent course
        uid: Student user id
        enroll: 1 once the student joined
        attend: 1 once the student is counted in the course roster
        start_at: Enrollment timestamp

    Constraints:
        (course_id, uid): UNIQUE; at most one status per student and course
    """

    __tablename__ = "course_status"
    __table_args__ = (
        UniqueConstraint("course_id", "uid", name="uq_course_status_course_uid"),
    )

    domain_id: Mapped[str] = mapped_column(String(64), nullable=False)
    course_id: Mapped[UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    uid: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    enroll: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attend: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    start_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )
