"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database sessions, course seeding helpers,
viewer builders, storage mocks and temp file cleanup
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import tempfile
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Sequence
from unittest.mock import AsyncMock

import pytest

from courseware.core.permissions import Permission
from courseware.core.visibility import Viewer

DOMAIN = "system"
NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

ALL_PERMISSIONS = frozenset(Permission)
STUDENT_PERMISSIONS = frozenset({Permission.VIEW_COURSE, Permission.ATTEND_COURSE})


def make_viewer(
    uid: int = 10,
    groups: Sequence[str] = (),
    permissions: Sequence[Permission] | frozenset = STUDENT_PERMISSIONS,
    group_filter: str | None = None,
) -> Viewer:
    """Build a viewer for service and router tests."""
    return Viewer(
        uid=uid,
        groups=frozenset(groups),
        permissions=frozenset(permissions),
        group_filter=group_filter,
    )


@pytest.fixture
async def db_session():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from courseware.boundary.db.base import Base

    # Import all models to register them with Base.metadata
    import courseware.boundary.db.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def make_course(db_session):
    """
    Factory fixture creating committed courses.

    Returns:
        Callable: async (**overrides) -> CourseModel
    """
    from courseware.boundary.db.CRUD.course_crud import course_crud

    async def _make(
        title: str = "Algorithms",
        owner: int = 1,
        begin_at: datetime = NOW - timedelta(days=1),
        end_at: datetime = NOW + timedelta(days=30),
        pids: Sequence[int] = (),
        files: Sequence[dict[str, Any]] = (),
        maintainers: Sequence[int] = (),
        teachers: Sequence[int] = (),
        assign: Sequence[str] = (),
        classes: Sequence[str] = (),
        domain_id: str = DOMAIN,
        content: str = "",
    ):
        course = await course_crud.add(
            db_session,
            domain_id=domain_id,
            title=title,
            content=content,
            owner=owner,
            begin_at=begin_at,
            end_at=end_at,
            pids=list(pids),
            files=[dict(f) for f in files],
            attend=0,
            maintainers=maintainers,
            teachers=teachers,
            assign=assign,
            classes=classes,
        )
        await db_session.commit()
        return course

    return _make


@pytest.fixture
def add_problems(db_session):
    """Factory fixture seeding the host problem catalog."""
    from courseware.boundary.db.models import ProblemModel

    async def _add(*pids: int, hidden: bool = False, owner: int = 0, domain_id: str = DOMAIN):
        for pid in pids:
            db_session.add(
                ProblemModel(
                    domain_id=domain_id,
                    pid=pid,
                    title=f"Problem {pid}",
                    owner=owner,
                    hidden=hidden,
                )
            )
        await db_session.commit()

    return _add


@pytest.fixture
def add_group_member(db_session):
    """Factory fixture seeding host group memberships."""
    from courseware.boundary.db.models import GroupMembershipModel

    async def _add(name: str, uid: int, domain_id: str = DOMAIN):
        db_session.add(GroupMembershipModel(domain_id=domain_id, name=name, uid=uid))
        await db_session.commit()

    return _add


@pytest.fixture
def mock_storage():
    """
    Create mock S3CourseFileStorage for testing.

    Returns:
        AsyncMock: Storage whose get_meta reports a 10 byte object
    """
    from courseware.boundary.aws.course_file_storage import S3CourseFileStorage

    storage = AsyncMock(spec=S3CourseFileStorage)
    storage.put = AsyncMock(return_value=None)
    storage.get_meta = AsyncMock(
        return_value={
            "size": 10,
            "last_modified": "2024-01-15T12:00:00+00:00",
            "etag": "d41d8cd98f00b204e9800998ecf8427e",
        }
    )
    storage.delete = AsyncMock(return_value=None)
    storage.sign_download_link = AsyncMock(return_value="https://files.example.com/signed")
    return storage


@pytest.fixture
def limits():
    """Course limits with the production defaults."""
    from courseware.configs.limits import CourseLimitSettings

    return CourseLimitSettings()


@pytest.fixture
def temp_file():
    """
    Create a temporary file for testing file uploads.

    Yields:
        Path: Path to temporary file
    """
    with tempfile.NamedTemporaryFile(suffix=".txt", delete=False) as f:
        temp_path = Path(f.name)
        f.write(b"test content")

    yield temp_path

    if temp_path.exists():
        temp_path.unlink()


@pytest.fixture
def course_id():
    """Generate a test course ID."""
    return uuid.uuid4()
