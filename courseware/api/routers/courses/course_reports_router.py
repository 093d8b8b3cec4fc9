"""
Course scoreboard and records endpoints.

Routes (under /domains/{domain_id}/courses):
- GET /{id}/scoreboard - Enrolled students ranked by total score
- GET /{id}/records - Submissions on the course's problems

Dependencies: courseware.application.services, courseware.models
System role: Course reporting HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from courseware.api.deps import get_scoreboard_service, get_viewer
from courseware.application.services import ScoreboardService
from courseware.core.visibility import Viewer
from courseware.models.scoreboard import RecordListResponse, ScoreboardResponse

from .course_error_handling import handle_course_errors
from .course_responses import map_records_to_response, map_scoreboard_to_response

router = APIRouter(prefix="/domains/{domain_id}/courses", tags=["course-reports"])


@router.get("/{course_id}/scoreboard", response_model=ScoreboardResponse)
@handle_course_errors
async def get_scoreboard(
    domain_id: str,
    course_id: UUID,
    page: int = Query(1, ge=1),
    viewer: Viewer = Depends(get_viewer),
    scoreboard_service: ScoreboardService = Depends(get_scoreboard_service),
) -> ScoreboardResponse:
    """
    Scoreboard page of a course.

    Raises:
        HTTPException(403): Missing scoreboard permission
        HTTPException(404): Course missing or not visible
    """
    board = await scoreboard_service.get_scoreboard(domain_id, course_id, viewer, page=page)
    return map_scoreboard_to_response(board)


@router.get("/{course_id}/records", response_model=RecordListResponse)
@handle_course_errors
async def list_records(
    domain_id: str,
    course_id: UUID,
    page: int = Query(1, ge=1),
    viewer: Viewer = Depends(get_viewer),
    scoreboard_service: ScoreboardService = Depends(get_scoreboard_service),
) -> RecordListResponse:
    """Submissions on the course's problems; without scoreboard permission only the viewer's own."""
    records = await scoreboard_service.list_records(domain_id, course_id, viewer, page=page)
    return map_records_to_response(records)
