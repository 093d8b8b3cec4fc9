"""
Enrollment and progress schemas.

Dependencies: pydantic
System role: Enrollment and progress API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CourseStatusResponse(BaseModel):
    """Enrollment status of one user in one course."""

    course_id: uuid.UUID
    uid: int
    enroll: int
    attend: int
    start_at: datetime | None


class EnrollResponse(BaseModel):
    """Result of a successful enrollment."""

    course_id: uuid.UUID
    uid: int
    start_at: datetime


class ProgressEntryResponse(BaseModel):
    """Effective journal entry of a problem."""

    pid: int
    rid: uuid.UUID
    score: float
    status: int


class JournalAppendRequest(BaseModel):
    """Judge callback payload appending one attempt to a student journal."""

    uid: int = Field(..., ge=0, description="Student user id")
    pid: int = Field(..., gt=0, description="Problem id")
    rid: uuid.UUID = Field(..., description="Submission record id")
    score: float = Field(0, ge=0, description="Judged score")
    status: int = Field(0, description="Judge status code")


class JournalAppendResponse(BaseModel):
    """Position assigned to an appended journal entry."""

    seq: int
    course_id: uuid.UUID
    uid: int
    pid: int


class EnrolledListResponse(BaseModel):
    """Earliest enrolled students of a course."""

    course_id: uuid.UUID
    uids: list[int]


class AttendanceResponse(BaseModel):
    """Attendance counter after a recount."""

    course_id: uuid.UUID
    attend: int
