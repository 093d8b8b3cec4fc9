"""
Course API endpoints.

Routes (under /domains/{domain_id}/courses):
- POST / - Create course
- GET / - List visible courses
- GET /groups - Groups a course can be assigned to
- GET /{id} - Course detail for the viewer
- PUT /{id} - Update course
- DELETE /{id} - Delete course with enrollments, journal and files
- POST /{id}/enroll - Enroll the viewer
- GET /{id}/status - Viewer's enrollment status and progress
- GET /{id}/enrolled - Earliest enrolled students
- POST /{id}/attendance/recount - Rebuild the attendance counter
- POST /{id}/journal - Judge callback appending a journal entry

Dependencies: courseware.application.services, courseware.models
System role: Course management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from courseware.api.deps import (
    get_course_service,
    get_enrollment_service,
    get_progress_service,
    get_settings_dependency,
    get_viewer,
)
from courseware.application.services import (
    CourseService,
    EnrollmentService,
    ProgressService,
)
from courseware.configs import Settings
from courseware.core.visibility import Viewer
from courseware.models.course import (
    AssignableGroupsResponse,
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
    CreateCourseRequest,
    UpdateCourseRequest,
    ViewerStatusResponse,
)
from courseware.models.enrollment import (
    AttendanceResponse,
    EnrolledListResponse,
    EnrollResponse,
    JournalAppendRequest,
    JournalAppendResponse,
)

from .course_error_handling import handle_course_errors
from .course_responses import (
    map_course_detail_to_response,
    map_course_list_to_response,
    map_course_to_response,
    map_enrollment_to_response,
)
from .course_validators import validate_course_creation, validate_course_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/domains/{domain_id}/courses", tags=["courses"])


@router.post("", response_model=CourseResponse, status_code=201)
@handle_course_errors
async def create_course(
    domain_id: str,
    request: CreateCourseRequest,
    viewer: Viewer = Depends(get_viewer),
    course_service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """
    Create a course owned by the viewer.

    Raises:
        HTTPException(400): Invalid title, window or problem list
        HTTPException(403): Missing create permission
    """
    validate_course_creation(request)

    logger.info(
        "Creating new course",
        extra={"domain_id": domain_id, "course_title": request.title, "uid": viewer.uid},
    )

    course_id = await course_service.create_course(
        domain_id,
        viewer,
        title=request.title,
        content=request.content,
        pids=request.pids,
        begin_at=request.begin_at,
        end_at=request.end_at,
        maintainers=request.maintainers,
        teachers=request.teachers,
        assign=request.assign,
        classes=request.classes,
    )
    course_data = await course_service.get_course(domain_id, course_id, viewer)
    return map_course_to_response(course_data)


@router.get("", response_model=CourseListResponse)
@handle_course_errors
async def list_courses(
    domain_id: str,
    q: str | None = Query(None, max_length=255, description="Title search"),
    page: int = Query(1, ge=1),
    viewer: Viewer = Depends(get_viewer),
    course_service: CourseService = Depends(get_course_service),
) -> CourseListResponse:
    """
    List courses visible to the viewer, newest start first.

    The ``group`` query parameter narrows the listing to one group.
    """
    listing = await course_service.list_courses(domain_id, viewer, q=q, page=page)
    return map_course_list_to_response(listing)


@router.get("/groups", response_model=AssignableGroupsResponse)
@handle_course_errors
async def list_assignable_groups(
    domain_id: str,
    viewer: Viewer = Depends(get_viewer),
    course_service: CourseService = Depends(get_course_service),
) -> AssignableGroupsResponse:
    """
    Every group of the domain, for the course edit form.

    Raises:
        HTTPException(403): Missing create permission
    """
    groups = await course_service.list_assignable_groups(domain_id, viewer)
    return AssignableGroupsResponse(groups=groups)


@router.get("/{course_id}", response_model=CourseDetailResponse)
@handle_course_errors
async def get_course_detail(
    domain_id: str,
    course_id: UUID,
    viewer: Viewer = Depends(get_viewer),
    course_service: CourseService = Depends(get_course_service),
) -> CourseDetailResponse:
    """
    Course page for the viewer.

    Raises:
        HTTPException(404): Course missing or not visible
    """
    detail = await course_service.get_course_detail(domain_id, course_id, viewer)
    return map_course_detail_to_response(detail)


@router.put("/{course_id}", response_model=CourseResponse)
@handle_course_errors
async def update_course(
    domain_id: str,
    course_id: UUID,
    request: UpdateCourseRequest,
    viewer: Viewer = Depends(get_viewer),
    course_service: CourseService = Depends(get_course_service),
) -> CourseResponse:
    """
    Update course fields; omitted fields stay unchanged.

    Raises:
        HTTPException(400): Nothing to update or invalid values
        HTTPException(403): Missing edit permission
        HTTPException(404): Course not found
    """
    validate_course_update(request)

    course_data = await course_service.update_course(
        domain_id,
        course_id,
        viewer,
        **request.model_dump(exclude_none=True),
    )
    return map_course_to_response(course_data)


@router.delete("/{course_id}", status_code=204)
@handle_course_errors
async def delete_course(
    domain_id: str,
    course_id: UUID,
    viewer: Viewer = Depends(get_viewer),
    course_service: CourseService = Depends(get_course_service),
) -> None:
    """
    Delete a course with its enrollments, journal and attachments.

    Raises:
        HTTPException(403): Missing edit permission
        HTTPException(404): Course not found
    """
    await course_service.delete_course(domain_id, course_id, viewer)


@router.post("/{course_id}/enroll", response_model=EnrollResponse, status_code=201)
@handle_course_errors
async def enroll(
    domain_id: str,
    course_id: UUID,
    viewer: Viewer = Depends(get_viewer),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrollResponse:
    """
    Enroll the viewer into a course.

    Raises:
        HTTPException(400): Course has ended
        HTTPException(403): Missing attend permission
        HTTPException(404): Course missing or not visible
        HTTPException(409): Already enrolled
    """
    enrollment = await enrollment_service.enroll(domain_id, course_id, viewer)
    return map_enrollment_to_response(enrollment)


@router.get("/{course_id}/status", response_model=ViewerStatusResponse)
@handle_course_errors
async def get_status(
    domain_id: str,
    course_id: UUID,
    viewer: Viewer = Depends(get_viewer),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> ViewerStatusResponse:
    """The viewer's enrollment and effective progress."""
    status_data = await enrollment_service.get_status(domain_id, course_id, viewer)
    return ViewerStatusResponse(**status_data)


@router.get("/{course_id}/enrolled", response_model=EnrolledListResponse)
@handle_course_errors
async def list_enrolled(
    domain_id: str,
    course_id: UUID,
    viewer: Viewer = Depends(get_viewer),
    settings: Settings = Depends(get_settings_dependency),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> EnrolledListResponse:
    uids = await enrollment_service.list_enrolled_uids(
        domain_id, course_id, viewer, limit=settings.limits.enrolled_sidebar_limit
    )
    return EnrolledListResponse(course_id=course_id, uids=uids)


@router.post("/{course_id}/attendance/recount", response_model=AttendanceResponse)
@handle_course_errors
async def recount_attendance(
    domain_id: str,
    course_id: UUID,
    viewer: Viewer = Depends(get_viewer),
    enrollment_service: EnrollmentService = Depends(get_enrollment_service),
) -> AttendanceResponse:
    """
    Rebuild the attendance counter from enrollment rows.

    Raises:
        HTTPException(403): Missing edit permission
        HTTPException(404): Course not found
    """
    attend = await enrollment_service.recount_attendance(domain_id, course_id, viewer)
    return AttendanceResponse(course_id=course_id, attend=attend)


@router.post("/{course_id}/journal", response_model=JournalAppendResponse, status_code=201)
@handle_course_errors
async def append_journal_entry(
    domain_id: str,
    course_id: UUID,
    request: JournalAppendRequest,
    progress_service: ProgressService = Depends(get_progress_service),
) -> JournalAppendResponse:
    """
    Judge callback: append one judged attempt to a student's journal.

    Only reachable from the host network; the gateway does not route it.

    Raises:
        HTTPException(404): Course not found
    """
    appended = await progress_service.append_entry(
        domain_id,
        course_id,
        uid=request.uid,
        pid=request.pid,
        rid=request.rid,
        score=request.score,
        status=request.status,
    )
    return JournalAppendResponse(**appended)
