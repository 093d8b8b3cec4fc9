"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from courseware.boundary.db.CRUD import course_crud, course_status_crud

    course = await course_crud.get(db, domain_id, course_id)
"""

from courseware.boundary.db.CRUD.base_crud import BaseCRUD
from courseware.boundary.db.CRUD.course_crud import CourseCRUD, course_crud
from courseware.boundary.db.CRUD.course_status_crud import CourseStatusCRUD, course_status_crud
from courseware.boundary.db.CRUD.journal_crud import JournalCRUD, journal_crud
from courseware.boundary.db.CRUD.host_crud import (
    GroupCRUD,
    ProblemCRUD,
    RecordCRUD,
    group_crud,
    problem_crud,
    record_crud,
)

__all__ = [
    "BaseCRUD",
    "CourseCRUD",
    "course_crud",
    "CourseStatusCRUD",
    "course_status_crud",
    "JournalCRUD",
    "journal_crud",
    "GroupCRUD",
    "group_crud",
    "ProblemCRUD",
    "problem_crud",
    "RecordCRUD",
    "record_crud",
]
