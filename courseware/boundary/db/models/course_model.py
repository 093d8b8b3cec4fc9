"""
Course ORM model.

Represents a course: a bounded time window bundling a description,
problems, file attachments and a roster of enrolled students.

Dependencies: sqlalchemy, courseware.boundary.db.base
System role: Course persistence
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courseware.boundary.db.base import Base, UUIDMixin, TimestampMixin
from courseware.boundary.db.models.course_grant_model import GrantRole


class CourseModel(Base, UUIDMixin, TimestampMixin):
    """
    Course ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        domain_id: Host domain the course lives in
        title: Course title (255 char limit)
        content: Rich-text introduction, may embed file:// references
        owner: Creator user id
        begin_at: Start of the course window (UTC)
        end_at: End of the course window (UTC), always after begin_at
        attend: Cached number of enrolled students
        pids: Ordered problem id list
        files: Attachment list of {name, size, last_modified, etag}
        grants: Maintainer/teacher/group rows (see CourseGrantModel)

    Relationships:
        grants: One-to-many with CourseGrantModel (cascade delete)
    """

    __tablename__ = "courses"

    domain_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    begin_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    attend: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Enrolled student count (cached aggregate, may lag)",
    )

    pids: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Ordered problem ids",
    )

    files: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Attachment metadata entries",
    )

    # Relationships
    grants = relationship(
        "CourseGrantModel",
        back_populates="course",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def _subjects(self, role: GrantRole) -> list[str]:
        return [g.subject for g in self.grants if g.role == role]

    @property
    def maintainers(self) -> list[int]:
        return [int(s) for s in self._subjects(GrantRole.MAINTAINER)]

    @property
    def teachers(self) -> list[int]:
        return [int(s) for s in self._subjects(GrantRole.TEACHER)]

    @property
    def assign(self) -> list[str]:
        return self._subjects(GrantRole.ASSIGN)

    @property
    def classes(self) -> list[str]:
        return self._subjects(GrantRole.CLASS)
