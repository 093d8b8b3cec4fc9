"""
Test suite for ScoreboardService and ProgressService.

System role: Verification of scoreboard aggregation over stored journals
"""

import uuid
from datetime import timedelta

import pytest

from conftest import DOMAIN, NOW, make_viewer
from courseware.application.services.progress_service import ProgressService
from courseware.application.services.scoreboard_service import ScoreboardService
from courseware.boundary.db.CRUD.course_crud import course_crud
from courseware.boundary.db.CRUD.course_status_crud import course_status_crud
from courseware.boundary.db.models import RecordModel
from courseware.configs.limits import CourseLimitSettings
from courseware.core.exceptions import CourseNotFoundError, PermissionDeniedError
from courseware.core.permissions import Permission

JUDGE = make_viewer(uid=1, permissions=[Permission.VIEW_COURSE, Permission.VIEW_SCOREBOARD])


@pytest.fixture
def scoreboard_service(db_session, limits) -> ScoreboardService:
    return ScoreboardService(db=db_session, limits=limits)


@pytest.fixture
def progress_service(db_session) -> ProgressService:
    return ProgressService(db=db_session)


@pytest.fixture
def enroll_students(db_session):
    """Enroll uids in the given order, one minute apart."""

    async def _enroll(course_id, *uids: int) -> None:
        for offset, uid in enumerate(uids):
            await course_status_crud.insert_attended(
                db_session, DOMAIN, course_id, uid, NOW + timedelta(minutes=offset)
            )
        await db_session.commit()

    return _enroll


class TestScoreboard:
    """Test suite for ScoreboardService.get_scoreboard()."""

    @pytest.mark.asyncio
    async def test_rows_ranked_by_total_with_enrollment_tie_break(
        self, make_course, enroll_students, progress_service, scoreboard_service
    ) -> None:
        # Arrange
        course = await make_course(pids=[1, 2])
        await enroll_students(course.id, 30, 10, 20)
        for uid, pid, score in ((10, 1, 50), (20, 1, 100), (30, 2, 50), (20, 2, 0)):
            await progress_service.append_entry(DOMAIN, course.id, uid, pid, uuid.uuid4(), score, 1)

        # Act
        board = await scoreboard_service.get_scoreboard(DOMAIN, course.id, JUDGE)

        # Assert
        assert [(r["uid"], r["total_score"]) for r in board["rows"]] == [
            (20, 100),
            (30, 50),
            (10, 50),
        ]
        assert board["rows"][1]["scores"] == {1: 0, 2: 50}
        assert board["pids"] == [1, 2]
        assert board["page_count"] == 1

    @pytest.mark.asyncio
    async def test_removing_a_problem_lowers_totals(
        self, db_session, make_course, enroll_students, progress_service, scoreboard_service
    ) -> None:
        # Arrange
        course = await make_course(pids=[1, 2])
        await enroll_students(course.id, 10)
        await progress_service.append_entry(DOMAIN, course.id, 10, 1, uuid.uuid4(), 40, 1)
        await progress_service.append_entry(DOMAIN, course.id, 10, 2, uuid.uuid4(), 60, 1)

        # Act
        await course_crud.edit(db_session, course, pids=[1])
        await db_session.commit()
        board = await scoreboard_service.get_scoreboard(DOMAIN, course.id, JUDGE)

        # Assert
        assert board["rows"] == [{"uid": 10, "scores": {1: 40}, "total_score": 40}]

    @pytest.mark.asyncio
    async def test_empty_problem_list_and_empty_roster(
        self, make_course, enroll_students, scoreboard_service
    ) -> None:
        no_problems = await make_course(pids=[])
        await enroll_students(no_problems.id, 10)
        nobody = await make_course(pids=[1])

        zero = await scoreboard_service.get_scoreboard(DOMAIN, no_problems.id, JUDGE)
        empty = await scoreboard_service.get_scoreboard(DOMAIN, nobody.id, JUDGE)

        assert zero["rows"] == [{"uid": 10, "scores": {}, "total_score": 0}]
        assert empty["rows"] == []

    @pytest.mark.asyncio
    async def test_scoreboard_paginates_enrollment_listing(
        self, db_session, make_course, enroll_students
    ) -> None:
        course = await make_course(pids=[1])
        await enroll_students(course.id, 1, 2, 3)
        service = ScoreboardService(db=db_session, limits=CourseLimitSettings(page_size=2))

        second = await service.get_scoreboard(DOMAIN, course.id, JUDGE, page=2)

        assert [r["uid"] for r in second["rows"]] == [3]
        assert second["page_count"] == 2

    @pytest.mark.asyncio
    async def test_scoreboard_requires_permission(self, make_course, scoreboard_service) -> None:
        course = await make_course()

        with pytest.raises(PermissionDeniedError):
            await scoreboard_service.get_scoreboard(DOMAIN, course.id, make_viewer(uid=10))

    @pytest.mark.asyncio
    async def test_journal_append_needs_existing_course(self, progress_service) -> None:
        with pytest.raises(CourseNotFoundError):
            await progress_service.append_entry(DOMAIN, uuid.uuid4(), 10, 1, uuid.uuid4(), 1, 1)


class TestRecords:
    """Test suite for ScoreboardService.list_records()."""

    @pytest.fixture
    async def seeded(self, db_session, make_course):
        course = await make_course(pids=[1, 2])
        for uid, pid, minutes in ((10, 1, 0), (20, 2, 1), (10, 2, 2), (10, 3, 3)):
            db_session.add(
                RecordModel(
                    domain_id=DOMAIN,
                    pid=pid,
                    uid=uid,
                    score=0,
                    status=1,
                    lang="cc",
                    created_at=NOW + timedelta(minutes=minutes),
                )
            )
        await db_session.commit()
        return course

    @pytest.mark.asyncio
    async def test_records_on_course_problems_newest_first(
        self, seeded, scoreboard_service
    ) -> None:
        result = await scoreboard_service.list_records(DOMAIN, seeded.id, JUDGE)

        assert [(r["uid"], r["pid"]) for r in result["items"]] == [(10, 2), (20, 2), (10, 1)]

    @pytest.mark.asyncio
    async def test_students_only_see_their_own_records(
        self, seeded, scoreboard_service
    ) -> None:
        result = await scoreboard_service.list_records(DOMAIN, seeded.id, make_viewer(uid=20))

        assert [(r["uid"], r["pid"]) for r in result["items"]] == [(20, 2)]
