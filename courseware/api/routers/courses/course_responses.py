"""
Course response mapping utilities.

Transforms service dictionaries into Pydantic response models.
Centralizes response construction logic.

Dependencies: courseware.models
System role: Course response transformation
"""

from typing import Any

from courseware.models.course import (
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
)
from courseware.models.enrollment import CourseStatusResponse, EnrollResponse
from courseware.models.file import FileListResponse
from courseware.models.scoreboard import RecordListResponse, ScoreboardResponse


def map_course_to_response(course_data: dict[str, Any]) -> CourseResponse:
    """
    Transform course data dictionary into CourseResponse.

    Args:
        course_data: Dictionary produced by ``serialize_course``

    Returns:
        CourseResponse: Pydantic model for API response
    """
    return CourseResponse(**course_data)


def map_course_list_to_response(listing: dict[str, Any]) -> CourseListResponse:
    """Transform a listing page into CourseListResponse."""
    return CourseListResponse(**listing)


def map_course_detail_to_response(detail: dict[str, Any]) -> CourseDetailResponse:
    return CourseDetailResponse(**detail)


def map_status_to_response(status_data: dict[str, Any] | None) -> CourseStatusResponse | None:
    return CourseStatusResponse(**status_data) if status_data else None


def map_enrollment_to_response(enrollment: dict[str, Any]) -> EnrollResponse:
    return EnrollResponse(**enrollment)


def map_files_to_response(usage: dict[str, Any]) -> FileListResponse:
    """Transform attachment usage into FileListResponse."""
    return FileListResponse(**usage)


def map_scoreboard_to_response(board: dict[str, Any]) -> ScoreboardResponse:
    return ScoreboardResponse(**board)


def map_records_to_response(records: dict[str, Any]) -> RecordListResponse:
    return RecordListResponse(**records)
