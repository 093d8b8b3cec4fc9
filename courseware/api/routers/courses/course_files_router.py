"""
Course attachment endpoints.

Routes (under /domains/{domain_id}/courses):
- GET /{id}/files - List attachments with usage
- POST /{id}/files - Upload an attachment (multipart)
- POST /{id}/files/delete - Delete attachments by name
- GET /{id}/file/{filename} - Redirect to a signed download link

Dependencies: courseware.application.services, courseware.models
System role: Course file HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import RedirectResponse

from courseware.api.deps import get_course_file_service, get_viewer
from courseware.api.routers.router_utils import cleanup_temp_file, spool_upload
from courseware.application.services import CourseFileService
from courseware.core.attachments import validate_filename
from courseware.core.visibility import Viewer
from courseware.models.file import AttachmentResponse, DeleteFilesRequest, FileListResponse

from .course_error_handling import handle_course_errors
from .course_responses import map_files_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/domains/{domain_id}/courses", tags=["course-files"])


@router.get("/{course_id}/files", response_model=FileListResponse)
@handle_course_errors
async def list_files(
    domain_id: str,
    course_id: UUID,
    viewer: Viewer = Depends(get_viewer),
    file_service: CourseFileService = Depends(get_course_file_service),
) -> FileListResponse:
    """
    List course attachments with count and size usage.

    Raises:
        HTTPException(403): Missing file management permission
        HTTPException(404): Course not found
    """
    usage = await file_service.list_files(domain_id, course_id, viewer)
    return map_files_to_response(usage)


@router.post("/{course_id}/files", response_model=AttachmentResponse, status_code=201)
@handle_course_errors
async def upload_file(
    domain_id: str,
    course_id: UUID,
    file: UploadFile = File(...),
    filename: str | None = Form(None, description="Stored name, defaults to the upload's name"),
    viewer: Viewer = Depends(get_viewer),
    file_service: CourseFileService = Depends(get_course_file_service),
) -> AttachmentResponse:
    """
    Upload a course attachment via multipart form.

    The file is spooled to a temp location, checked against the course
    ceilings and stored; the temp file is always removed.

    Raises:
        HTTPException(400): Invalid file name
        HTTPException(403): Missing file management permission
        HTTPException(404): Course not found
        HTTPException(413): Attachment count or size ceiling reached
        HTTPException(502): Stored file could not be verified
    """
    name = filename or file.filename or ""
    validate_filename(name)

    logger.info(
        "Course file upload received",
        extra={"course_id": str(course_id), "file_name": name, "uid": viewer.uid},
    )

    local_path, size = await spool_upload(file, name)
    try:
        entry = await file_service.upload_file(
            domain_id, course_id, viewer, name, local_path, size
        )
    finally:
        cleanup_temp_file(local_path)
    return AttachmentResponse(**entry)


@router.post("/{course_id}/files/delete", response_model=FileListResponse)
@handle_course_errors
async def delete_files(
    domain_id: str,
    course_id: UUID,
    request: DeleteFilesRequest,
    viewer: Viewer = Depends(get_viewer),
    file_service: CourseFileService = Depends(get_course_file_service),
) -> FileListResponse:
    """
    Delete attachments by name.

    Raises:
        HTTPException(403): Missing file management permission
        HTTPException(404): Course not found
    """
    usage = await file_service.delete_files(domain_id, course_id, viewer, request.files)
    return map_files_to_response(usage)


@router.get("/{course_id}/file/{filename}")
@handle_course_errors
async def download_file(
    domain_id: str,
    course_id: UUID,
    filename: str,
    inline: bool = False,
    viewer: Viewer = Depends(get_viewer),
    file_service: CourseFileService = Depends(get_course_file_service),
) -> RedirectResponse:
    """
    Redirect to a signed link for an attachment.

    Course content links ``file://name`` resolve to this route.

    Raises:
        HTTPException(404): Course not visible or no such attachment
    """
    url = await file_service.download_link(
        domain_id, course_id, viewer, filename, inline=inline
    )
    return RedirectResponse(url, status_code=302)
