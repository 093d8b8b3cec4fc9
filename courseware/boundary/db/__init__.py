"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - CourseModel, CourseStatusModel, CourseJournalModel, CourseGrantModel: Course entities
  - course_crud, course_status_crud, journal_crud: CRUD operation singletons

Dependencies: sqlalchemy, courseware.configs
System role: Database adapter providing persistent storage for courses,
enrollments and the progress journal.
"""

from courseware.boundary.db.base import Base, TimestampMixin, UUIDMixin
from courseware.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from courseware.boundary.db.models import (
    CourseGrantModel,
    CourseJournalModel,
    CourseModel,
    CourseStatusModel,
    GrantRole,
)
from courseware.boundary.db.CRUD import (
    BaseCRUD,
    course_crud,
    course_status_crud,
    journal_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "CourseModel",
    "CourseGrantModel",
    "CourseStatusModel",
    "CourseJournalModel",
    "GrantRole",
    # CRUD
    "BaseCRUD",
    "course_crud",
    "course_status_crud",
    "journal_crud",
]
