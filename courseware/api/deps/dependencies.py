"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: courseware.configs, courseware.application, courseware.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends, Header, Query
from sqlalchemy.ext.asyncio import AsyncSession

from courseware.configs import Settings, get_settings
from courseware.boundary.db import get_async_db
from courseware.boundary.aws.course_file_storage import S3CourseFileStorage
from courseware.boundary.db.CRUD.host_crud import group_crud
from courseware.application.services import (
    CourseFileService,
    CourseService,
    EnrollmentService,
    ProgressService,
    ScoreboardService,
)
from courseware.core.permissions import Permission, parse_permissions
from courseware.core.visibility import Viewer


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._course_file_storage = None

    @property
    def course_file_storage(self) -> S3CourseFileStorage:
        """Get cached course attachment storage."""
        if self._course_file_storage is None:
            settings = get_settings()
            self._course_file_storage = S3CourseFileStorage(
                bucket=settings.course_files.bucket,
                region=settings.course_files.region,
                endpoint_url=settings.course_files.endpoint_url,
                presigned_url_expiry=settings.course_files.presigned_url_expiry,
            )
        return self._course_file_storage

    def clear(self) -> None:
        """Clear all cached instances."""
        self._course_file_storage = None


# Global service cache
_service_cache = ServiceCache()

def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


async def get_viewer(
    domain_id: str,
    x_user_id: int = Header(0, ge=0, description="Authenticated user id, 0 for guests"),
    x_user_permissions: str | None = Header(None, description="Comma-separated permissions"),
    group: str | None = Query(None, description="Restrict listings to one group"),
    db: AsyncSession = Depends(get_async_db),
) -> Viewer:
    """
    Build the requesting viewer from gateway headers.

    The host gateway authenticates the user and forwards identity and
    permissions. Viewers who may see hidden courses are treated as members
    of every group of the domain.

    Args:
        domain_id: Domain path parameter
        x_user_id: User id header
        x_user_permissions: Permission header
        group: Optional group filter query parameter
        db: Async database session (injected via Depends)

    Returns:
        Viewer: Identity, groups and permissions of the caller
    """
    permissions = parse_permissions(x_user_permissions)
    if Permission.VIEW_HIDDEN_COURSE in permissions:
        groups = await group_crud.list_groups(db, domain_id)
    else:
        groups = await group_crud.list_groups(db, domain_id, uid=x_user_id)
    return Viewer(
        uid=x_user_id,
        groups=frozenset(groups),
        permissions=permissions,
        group_filter=group or None,
    )


def get_course_file_storage() -> S3CourseFileStorage:
    """
    Get S3 storage for course attachments.

    Returns:
        S3CourseFileStorage: Cached storage client
    """
    cache = get_service_cache()
    return cache.course_file_storage


def get_course_service(
    db: AsyncSession = Depends(get_async_db),
    storage: S3CourseFileStorage = Depends(get_course_file_storage),
    settings: Settings = Depends(get_settings_dependency),
) -> CourseService:
    """
    Get course service instance.

    Args:
        db: Async database session (injected via Depends)
        storage: Attachment storage, used when deleting courses
        settings: Application settings

    Returns:
        CourseService: Course service instance
    """
    return CourseService(db=db, limits=settings.limits, storage=storage)


def get_enrollment_service(db: AsyncSession = Depends(get_async_db)) -> EnrollmentService:
    """
    Get enrollment service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        EnrollmentService: Enrollment service instance
    """
    return EnrollmentService(db=db)


def get_progress_service(db: AsyncSession = Depends(get_async_db)) -> ProgressService:
    return ProgressService(db=db)


def get_course_file_service(
    db: AsyncSession = Depends(get_async_db),
    storage: S3CourseFileStorage = Depends(get_course_file_storage),
    settings: Settings = Depends(get_settings_dependency),
) -> CourseFileService:
    """
    Get course file service instance.

    Args:
        db: Async database session (injected via Depends)
        storage: Attachment storage (injected via Depends)
        settings: Application settings

    Returns:
        CourseFileService: Attachment service with configured ceilings
    """
    return CourseFileService(db=db, storage=storage, limits=settings.limits)


def get_scoreboard_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> ScoreboardService:
    return ScoreboardService(db=db, limits=settings.limits)
