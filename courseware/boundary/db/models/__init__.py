"""
Database models package.

Exports:
  - CourseModel: Course ORM model
  - CourseGrantModel, GrantRole: Course access grants
  - CourseStatusModel: Per-student enrollment status
  - CourseJournalModel: Append-only progress journal
  - GroupMembershipModel, ProblemModel, RecordModel: Host-owned read models

Dependencies: sqlalchemy, courseware.boundary.db.base
System role: Database model definitions for domain entities
"""

from courseware.boundary.db.models.course_grant_model import CourseGrantModel, GrantRole
from courseware.boundary.db.models.course_model import CourseModel
from courseware.boundary.db.models.course_status_model import CourseStatusModel
from courseware.boundary.db.models.journal_model import CourseJournalModel
from courseware.boundary.db.models.host_models import (
    GroupMembershipModel,
    ProblemModel,
    RecordModel,
)

__all__ = [
    "CourseModel",
    "CourseGrantModel",
    "GrantRole",
    "CourseStatusModel",
    "CourseJournalModel",
    "GroupMembershipModel",
    "ProblemModel",
    "RecordModel",
]
