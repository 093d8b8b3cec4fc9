"""
Course attachment service.

Manages course files: list, upload under the count and size ceilings,
delete and signed downloads. Attachment metadata lives on the course row;
blobs live in object storage.

Dependencies: courseware.boundary.aws, courseware.boundary.db.CRUD, courseware.core
System role: Attachment quota manager
"""

import logging
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from courseware.application.services.access import (
    load_course,
    load_visible_course,
    require_file_permission,
)
from courseware.application.services.concurrency import run_independently
from courseware.boundary.aws.course_file_storage import S3CourseFileStorage
from courseware.boundary.db.CRUD.course_crud import course_crud
from courseware.configs.limits import CourseLimitSettings
from courseware.core.attachments import (
    check_attachment_quota,
    file_key,
    remove_file_entries,
    sort_files,
    total_size,
    upsert_file_entry,
    validate_filename,
)
from courseware.core.exceptions import CourseNotFoundError, UploadFailureError
from courseware.core.visibility import Viewer

logger = logging.getLogger(__name__)


class CourseFileService:
    """Attachment quota manager."""

    def __init__(
        self,
        db: AsyncSession,
        storage: S3CourseFileStorage,
        limits: CourseLimitSettings,
    ) -> None:
        """
        Initialize course file service.

        Args:
            db: Async SQLAlchemy session
            storage: Blob store for attachments
            limits: Attachment ceilings
        """
        self.db = db
        self.storage = storage
        self.limits = limits

    def _usage(self, files: Sequence[dict[str, Any]]) -> dict[str, Any]:
        return {
            "files": sort_files(files),
            "count": len(files),
            "total_size": total_size(files),
            "max_files": self.limits.max_files,
            "max_total_bytes": self.limits.max_total_bytes,
        }

    async def list_files(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
    ) -> dict[str, Any]:
        """
        Attachments of a course with current usage.

        Raises:
            CourseNotFoundError: If the course does not exist
            PermissionDeniedError: Without file management permission
        """
        course = await load_course(self.db, domain_id, course_id)
        require_file_permission(course, viewer)
        return self._usage(course.files)

    async def upload_file(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        filename: str,
        local_path: str,
        size: int,
    ) -> dict[str, Any]:
        """
        Store a file and record it on the course.

        Both ceilings are checked against the current list before anything
        is written. Concurrent uploads may each pass the check and overshoot
        the ceilings; the limits are soft.

        Args:
            domain_id: Host domain
            course_id: Target course
            viewer: Uploading user
            filename: Attachment name, unique within the course
            local_path: Spooled upload on local disk
            size: Upload size in bytes

        Returns:
            dict: The stored attachment entry

        Raises:
            CourseNotFoundError: If the course does not exist
            PermissionDeniedError: Without file management permission
            ValidationError: If the name is not a plain file name
            QuotaExceededError: If the count or size ceiling is reached
            UploadFailureError: If the stored blob cannot be found afterwards
        """
        course = await load_course(self.db, domain_id, course_id)
        require_file_permission(course, viewer)
        validate_filename(filename)
        check_attachment_quota(
            course.files, size, self.limits.max_files, self.limits.max_total_bytes
        )

        key = file_key(domain_id, course_id, filename)
        await self.storage.put(key, local_path, viewer.uid)
        meta = await self.storage.get_meta(key)
        if meta is None:
            logger.error(
                "Stored course file has no metadata",
                extra={"course_id": str(course_id), "s3_key": key},
            )
            raise UploadFailureError(key)

        entry = {"name": filename, **meta}
        await course_crud.set_files(self.db, course_id, upsert_file_entry(course.files, entry))
        await self.db.commit()

        logger.info(
            "Course file uploaded",
            extra={
                "course_id": str(course_id),
                "file_name": filename,
                "size": meta.get("size"),
                "uid": viewer.uid,
            },
        )
        return entry

    async def delete_files(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        names: Sequence[str],
    ) -> dict[str, Any]:
        """
        Delete attachments by name.

        Blob deletion and the metadata update run concurrently and
        independently; a failure of either is logged and re-raised once
        both have settled.

        Returns:
            dict: Remaining attachments with usage

        Raises:
            CourseNotFoundError: If the course does not exist
            PermissionDeniedError: Without file management permission
        """
        course = await load_course(self.db, domain_id, course_id)
        require_file_permission(course, viewer)
        for name in names:
            validate_filename(name)

        remaining = remove_file_entries(course.files, names)
        keys = [file_key(domain_id, course_id, name) for name in names]

        await run_independently(
            ("delete_blobs", self.storage.delete(keys, viewer.uid)),
            ("update_metadata", self._store_files(course_id, remaining)),
        )

        logger.info(
            "Course files deleted",
            extra={"course_id": str(course_id), "count": len(keys), "uid": viewer.uid},
        )
        return self._usage(remaining)

    async def _store_files(self, course_id: UUID, files: list[dict[str, Any]]) -> None:
        await course_crud.set_files(self.db, course_id, files)
        await self.db.commit()

    async def download_link(
        self,
        domain_id: str,
        course_id: UUID,
        viewer: Viewer,
        filename: str,
        inline: bool = False,
    ) -> str:
        """
        Signed link to an attachment of a course the viewer can see.

        Args:
            inline: When True the link carries no
                content-disposition, so browsers display inline

        Raises:
            CourseNotFoundError: If the course is not visible or has no
                such attachment
        """
        course = await load_visible_course(self.db, domain_id, course_id, viewer)
        if not any(f["name"] == filename for f in course.files):
            raise CourseNotFoundError(course_id, {"filename": filename})

        key = file_key(domain_id, course_id, filename)
        return await self.storage.sign_download_link(
            key, None if inline else filename
        )
