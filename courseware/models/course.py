"""
Course domain models and schemas.

Request/response schemas for course operations.

Dependencies: pydantic
System role: Course API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from courseware.models.enrollment import CourseStatusResponse, ProgressEntryResponse
from courseware.models.file import AttachmentResponse

CourseState = Literal["not_started", "ongoing", "done"]


class CreateCourseRequest(BaseModel):
    """Request schema for creating a new course."""

    title: str = Field(..., min_length=1, max_length=255, description="Course title")
    content: str = Field("", max_length=65536, description="Course introduction (rich text)")
    pids: str | list[int] = Field(
        default="",
        description="Problem ids, as a list or a comma-separated string",
    )
    begin_at: datetime | None = Field(None, description="Start of the course (defaults to now)")
    end_at: datetime | None = Field(None, description="End of the course (defaults to begin + 30 days)")
    maintainers: list[int] = Field(default_factory=list, description="Maintainer user ids")
    teachers: list[int] = Field(default_factory=list, description="Teacher user ids")
    assign: list[str] = Field(default_factory=list, description="Assigned groups; empty means public")
    classes: list[str] = Field(default_factory=list, description="Legacy class names")


class UpdateCourseRequest(BaseModel):
    """Request schema for updating a course; omitted fields stay unchanged."""

    title: str | None = Field(None, min_length=1, max_length=255, description="Course title")
    content: str | None = Field(None, max_length=65536, description="Course introduction")
    pids: str | list[int] | None = Field(None, description="Problem ids")
    begin_at: datetime | None = None
    end_at: datetime | None = None
    maintainers: list[int] | None = None
    teachers: list[int] | None = None
    assign: list[str] | None = None
    classes: list[str] | None = None


class CourseResponse(BaseModel):
    """Response schema for course operations."""

    id: uuid.UUID
    domain_id: str
    title: str
    content: str
    owner: int
    maintainers: list[int]
    teachers: list[int]
    assign: list[str]
    classes: list[str]
    begin_at: datetime
    end_at: datetime
    state: CourseState
    attend: int
    pids: list[int]
    files: list[AttachmentResponse]
    created_at: datetime
    updated_at: datetime


class CourseListResponse(BaseModel):
    """Page of visible courses with the viewer's enrollment state."""

    items: list[CourseResponse]
    total: int
    page: int
    page_count: int
    statuses: dict[str, CourseStatusResponse] = Field(
        default_factory=dict,
        description="Viewer status keyed by course id",
    )
    groups: list[str] = Field(default_factory=list, description="Viewer's named groups")
    group: str | None = None
    q: str | None = None


class AssignableGroupsResponse(BaseModel):
    """Group names offered by the course edit form."""

    groups: list[str]


class ProblemSummary(BaseModel):
    """Problem catalog entry as shown in a course."""

    pid: int
    title: str
    hidden: bool


class RecordSummary(BaseModel):
    """Submission record summary."""

    id: uuid.UUID
    pid: int
    uid: int
    score: float
    status: int
    lang: str
    created_at: datetime


class CourseDetailResponse(BaseModel):
    """Course page payload for one viewer."""

    course: CourseResponse
    status: CourseStatusResponse | None
    enrolled_uids: list[int]
    problems: dict[int, ProblemSummary]
    progress: dict[int, ProgressEntryResponse]
    records: dict[str, RecordSummary]


class ViewerStatusResponse(BaseModel):
    """The viewer's enrollment in one course with effective progress."""

    status: CourseStatusResponse | None
    progress: dict[int, ProgressEntryResponse] = Field(default_factory=dict)
    records: dict[str, RecordSummary] = Field(default_factory=dict)
