"""
Test suite for CourseService.

System role: Verification of course lifecycle, listing and detail
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from conftest import ALL_PERMISSIONS, DOMAIN, NOW, make_viewer
from courseware.application.services.course_service import CourseService
from courseware.application.services.enrollment_service import EnrollmentService
from courseware.boundary.db.CRUD.course_crud import course_crud
from courseware.boundary.db.CRUD.journal_crud import journal_crud
from courseware.boundary.db.models import CourseJournalModel, CourseStatusModel
from courseware.configs.limits import CourseLimitSettings
from courseware.core.exceptions import (
    CourseNotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from courseware.core.permissions import Permission

CREATOR = make_viewer(
    uid=1,
    permissions=[Permission.CREATE_COURSE, Permission.EDIT_COURSE_SELF, Permission.VIEW_COURSE],
)
ADMIN = make_viewer(uid=99, permissions=ALL_PERMISSIONS)


@pytest.fixture
def course_service(db_session, limits, mock_storage) -> CourseService:
    return CourseService(db=db_session, limits=limits, storage=mock_storage)


class TestCreateAndUpdate:
    """Test suite for course creation and editing."""

    @pytest.mark.asyncio
    async def test_create_uses_default_window_and_parses_pids(
        self, db_session, add_problems, course_service
    ) -> None:
        # Arrange
        await add_problems(1, 2)

        # Act
        course_id = await course_service.create_course(
            DOMAIN, CREATOR, title="Graphs", pids="2，1", assign=["class-a"], now=NOW
        )

        # Assert
        course = await course_crud.get(db_session, DOMAIN, course_id)
        assert course.owner == 1
        assert course.pids == [2, 1]
        assert course.assign == ["class-a"]
        assert course.attend == 0
        assert course.end_at - course.begin_at == timedelta(days=30)

    @pytest.mark.asyncio
    async def test_create_requires_permission(self, course_service) -> None:
        with pytest.raises(PermissionDeniedError):
            await course_service.create_course(DOMAIN, make_viewer(uid=10), title="x", now=NOW)

    @pytest.mark.asyncio
    async def test_create_rejects_reversed_window(self, course_service) -> None:
        with pytest.raises(ValidationError):
            await course_service.create_course(
                DOMAIN, CREATOR, title="x", begin_at=NOW, end_at=NOW - timedelta(hours=1), now=NOW
            )

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_or_hidden_problems(
        self, add_problems, course_service
    ) -> None:
        await add_problems(1)
        await add_problems(2, hidden=True, owner=50)

        with pytest.raises(ValidationError) as exc_info:
            await course_service.create_course(DOMAIN, CREATOR, title="x", pids="1,2,3", now=NOW)

        assert exc_info.value.details["missing"] == [2, 3]

    @pytest.mark.asyncio
    async def test_update_replaces_fields_and_grants(
        self, db_session, make_course, course_service
    ) -> None:
        # Arrange
        course = await make_course(owner=1, maintainers=[2], assign=["class-a"])

        # Act
        data = await course_service.update_course(
            DOMAIN, course.id, CREATOR, now=NOW, title="Renamed", assign=["class-b"]
        )

        # Assert
        assert data["title"] == "Renamed"
        assert data["assign"] == ["class-b"]
        assert data["maintainers"] == [2]

    @pytest.mark.asyncio
    async def test_update_by_non_owner_needs_edit_course(
        self, make_course, course_service
    ) -> None:
        course = await make_course(owner=1)
        editor = make_viewer(uid=5, permissions=[Permission.EDIT_COURSE_SELF])

        with pytest.raises(PermissionDeniedError):
            await course_service.update_course(DOMAIN, course.id, editor, title="x")

    @pytest.mark.asyncio
    async def test_assignable_groups_lists_every_domain_group(
        self, add_group_member, course_service
    ) -> None:
        await add_group_member("class-b", 10)
        await add_group_member("class-a", 20)
        await add_group_member("class-a", 30)
        await add_group_member("elsewhere", 10, domain_id="other")

        groups = await course_service.list_assignable_groups(DOMAIN, CREATOR)

        assert groups == ["class-a", "class-b"]

    @pytest.mark.asyncio
    async def test_assignable_groups_require_create_permission(self, course_service) -> None:
        with pytest.raises(PermissionDeniedError):
            await course_service.list_assignable_groups(DOMAIN, make_viewer(uid=10))

    @pytest.mark.asyncio
    async def test_update_validates_combined_window(self, make_course, course_service) -> None:
        course = await make_course(owner=1, begin_at=NOW, end_at=NOW + timedelta(days=1))

        with pytest.raises(ValidationError):
            await course_service.update_course(
                DOMAIN, course.id, CREATOR, begin_at=NOW + timedelta(days=2)
            )


class TestListAndDetail:
    """Test suite for listing and course detail."""

    @pytest.mark.asyncio
    async def test_listing_filters_paginates_and_reports_status(
        self, db_session, make_course
    ) -> None:
        # Arrange
        public = [
            await make_course(title=f"Public {day}", begin_at=NOW - timedelta(days=day))
            for day in range(3)
        ]
        hidden = await make_course(title="Hidden", assign=["class-a"])
        viewer = make_viewer(uid=10, groups=["class-b", "2024"])
        await EnrollmentService(db_session).enroll(DOMAIN, public[2].id, viewer, now=NOW)
        service = CourseService(db_session, CourseLimitSettings(page_size=2))

        # Act
        first = await service.list_courses(DOMAIN, viewer, page=1, now=NOW)
        second = await service.list_courses(DOMAIN, viewer, page=2, now=NOW)

        # Assert
        titles = [c["title"] for c in first["items"] + second["items"]]
        assert hidden.title not in titles
        assert titles == ["Public 0", "Public 1", "Public 2"]
        assert (first["total"], first["page_count"]) == (3, 2)
        assert first["groups"] == ["class-b"]
        assert first["statuses"] == {}
        assert list(second["statuses"]) == [str(public[2].id)]

    @pytest.mark.asyncio
    async def test_listing_title_search(self, make_course, course_service) -> None:
        await make_course(title="Graph Theory")
        await make_course(title="Number Theory")

        result = await course_service.list_courses(DOMAIN, make_viewer(uid=0), q="graph", now=NOW)

        assert [c["title"] for c in result["items"]] == ["Graph Theory"]
        assert result["statuses"] == {}

    @pytest.mark.asyncio
    async def test_detail_rewrites_links_and_includes_roster(
        self, make_course, add_problems, course_service
    ) -> None:
        # Arrange
        await add_problems(1)
        course = await make_course(pids=[1], content="see [notes](file://notes.pdf)")
        viewer = make_viewer(uid=10)
        await EnrollmentService(course_service.db).enroll(DOMAIN, course.id, viewer, now=NOW)

        # Act
        detail = await course_service.get_course_detail(DOMAIN, course.id, viewer, now=NOW)

        # Assert
        assert detail["course"]["content"] == f"see [notes](./{course.id}/file/notes.pdf)"
        assert detail["course"]["state"] == "ongoing"
        assert detail["status"]["uid"] == 10
        assert detail["enrolled_uids"] == [10]
        assert detail["problems"][1]["title"] == "Problem 1"
        assert detail["progress"] == {}

    @pytest.mark.asyncio
    async def test_detail_of_invisible_course_is_not_found(
        self, make_course, course_service
    ) -> None:
        course = await make_course(assign=["class-a"])

        with pytest.raises(CourseNotFoundError):
            await course_service.get_course_detail(DOMAIN, course.id, make_viewer(uid=10))

    @pytest.mark.asyncio
    async def test_group_filter_does_not_open_detail_to_outsider(
        self, make_course, course_service
    ) -> None:
        course = await make_course(assign=["secret"])
        outsider = make_viewer(uid=99, groups=["other"], group_filter="secret")

        with pytest.raises(CourseNotFoundError):
            await course_service.get_course_detail(DOMAIN, course.id, outsider, now=NOW)

    @pytest.mark.asyncio
    async def test_group_filter_still_narrows_listing(self, make_course, course_service) -> None:
        await make_course(title="Secret", assign=["secret"])
        await make_course(title="Other", assign=["other"])

        result = await course_service.list_courses(
            DOMAIN, make_viewer(uid=10, permissions=ALL_PERMISSIONS, group_filter="secret"), now=NOW
        )

        assert [c["title"] for c in result["items"]] == ["Secret"]

    @pytest.mark.asyncio
    async def test_course_state_labels(self, make_course, course_service) -> None:
        upcoming = await make_course(begin_at=NOW + timedelta(days=1), end_at=NOW + timedelta(days=2))
        finished = await make_course(
            begin_at=datetime(2023, 1, 1, tzinfo=timezone.utc),
            end_at=datetime(2023, 2, 1, tzinfo=timezone.utc),
        )

        assert (await course_service.get_course(DOMAIN, upcoming.id, ADMIN, now=NOW))["state"] == "not_started"
        assert (await course_service.get_course(DOMAIN, finished.id, ADMIN, now=NOW))["state"] == "done"


class TestDeleteCourse:
    """Test suite for CourseService.delete_course()."""

    @pytest.mark.asyncio
    async def test_delete_cascades_rows_and_blobs(
        self, db_session, make_course, mock_storage, course_service
    ) -> None:
        # Arrange
        course = await make_course(owner=1, files=[{"name": "a.txt", "size": 1}])
        course_id = course.id
        await EnrollmentService(db_session).enroll(DOMAIN, course_id, make_viewer(uid=10), now=NOW)
        await journal_crud.append(db_session, course_id, 10, 1, uuid.uuid4(), 10, 1)
        await db_session.commit()

        # Act
        await course_service.delete_course(DOMAIN, course_id, CREATOR)

        # Assert
        assert await course_crud.get(db_session, DOMAIN, course_id) is None
        for model in (CourseStatusModel, CourseJournalModel):
            count = await db_session.execute(
                select(func.count()).select_from(model).where(model.course_id == course_id)
            )
            assert count.scalar_one() == 0
        mock_storage.delete.assert_awaited_once_with([f"course/{DOMAIN}/{course_id}/a.txt"], 1)

    @pytest.mark.asyncio
    async def test_delete_missing_course(self, course_service) -> None:
        with pytest.raises(CourseNotFoundError):
            await course_service.delete_course(DOMAIN, uuid.uuid4(), ADMIN)
