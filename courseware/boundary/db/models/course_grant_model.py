"""
Course grant ORM model.

One row per (course, role, subject) access grant: maintainers and
teachers by user id, assigned groups and legacy classes by group name.
Keeping grants relational lets visibility be expressed as EXISTS
subqueries that work on every backend.

Dependencies: sqlalchemy, courseware.boundary.db.base
System role: Course access grant persistence
"""

import enum
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courseware.boundary.db.base import Base, UUIDMixin


class GrantRole(str, enum.Enum):
    """
    Kinds of course access grant.

    MAINTAINER: user id allowed to edit the course
    TEACHER: user id teaching the course (may manage files)
    ASSIGN: group name the course is assigned to
    CLASS: legacy class name, treated like an assigned group
    """

    MAINTAINER = "maintainer"
    TEACHER = "teacher"
    ASSIGN = "assign"
    CLASS = "class"


class CourseGrantModel(Base, UUIDMixin):
    """
    Access grant row linking a course to a user id or group name.

    Constraints:
        (course_id, role, subject): UNIQUE
    """

    __tablename__ = "course_grants"
    __table_args__ = (
        UniqueConstraint("course_id", "role", "subject", name="uq_course_grant"),
    )

    course_id: Mapped[UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[GrantRole] = mapped_column(
        Enum(GrantRole, native_enum=False),
        nullable=False,
    )
    subject: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="User id (as text) or group name",
    )

    course = relationship("CourseModel", back_populates="grants")
