"""
Scoreboard and records schemas.

Dependencies: pydantic
System role: Scoreboard API contracts
"""

import uuid

from pydantic import BaseModel

from courseware.models.course import ProblemSummary, RecordSummary


class ScoreboardRowResponse(BaseModel):
    """Per-problem and total score of one student."""

    uid: int
    scores: dict[int, float]
    total_score: float


class ScoreboardResponse(BaseModel):
    """Scoreboard page of a course."""

    course_id: uuid.UUID
    pids: list[int]
    problems: dict[int, ProblemSummary]
    rows: list[ScoreboardRowResponse]
    page: int
    page_count: int


class RecordListResponse(BaseModel):
    """Submission records on a course's problems."""

    course_id: uuid.UUID
    items: list[RecordSummary]
    page: int
    page_count: int
