"""
Test suite for course visibility rules.

Covers the in-memory grant predicates, the SQL listing filter (which must
agree with them), title search and listing order.

System role: Verification of the visibility query builder
"""

from datetime import timedelta

import pytest

from conftest import ALL_PERMISSIONS, DOMAIN, NOW, make_viewer
from courseware.boundary.db.CRUD.course_crud import course_crud
from courseware.boundary.db.models import CourseGrantModel, CourseModel, GrantRole
from courseware.core.permissions import Permission
from courseware.core.visibility import (
    LISTING_ORDER,
    build_title_filter,
    build_visibility_filter,
    can_view_course,
    matching_grant,
)


def transient_course(owner: int = 1, **grants: list) -> CourseModel:
    """Unsaved course with the given grant lists."""
    roles = {
        "maintainers": GrantRole.MAINTAINER,
        "teachers": GrantRole.TEACHER,
        "assign": GrantRole.ASSIGN,
        "classes": GrantRole.CLASS,
    }
    rows = [
        CourseGrantModel(role=roles[key], subject=str(subject))
        for key, subjects in grants.items()
        for subject in subjects
    ]
    return CourseModel(owner=owner, grants=rows)


class TestMatchingGrant:
    """Test suite for single-course visibility checks."""

    def test_owner_sees_course_assigned_elsewhere(self) -> None:
        course = transient_course(owner=7, assign=["class-a"])
        assert matching_grant(course, make_viewer(uid=7)) == "owner"

    def test_maintainer_and_teacher_see_course(self) -> None:
        course = transient_course(maintainers=[8], teachers=[9], assign=["class-a"])

        assert matching_grant(course, make_viewer(uid=8)) == "maintainer"
        assert matching_grant(course, make_viewer(uid=9)) == "teacher"

    def test_assigned_group_member_sees_course(self) -> None:
        course = transient_course(assign=["class-a", "class-b"])
        viewer = make_viewer(uid=20, groups=["class-b"])

        assert matching_grant(course, viewer) == "assigned_group"

    def test_legacy_class_membership_grants_access(self) -> None:
        course = transient_course(assign=["class-a"], classes=["legacy"])
        viewer = make_viewer(uid=20, groups=["legacy"])

        assert matching_grant(course, viewer) == "class_group"

    def test_course_without_assigned_groups_is_public(self) -> None:
        course = transient_course()
        assert matching_grant(course, make_viewer(uid=0)) == "public"

    def test_outsider_cannot_see_assigned_course(self) -> None:
        course = transient_course(assign=["class-a"])
        viewer = make_viewer(uid=20, groups=["class-z"])

        assert matching_grant(course, viewer) is None
        assert can_view_course(course, viewer) is False

    def test_group_filter_does_not_grant_access(self) -> None:
        course = transient_course(assign=["class-a"])
        viewer = make_viewer(uid=20, groups=["class-z"], group_filter="class-a")

        assert matching_grant(course, viewer) is None
        assert can_view_course(course, viewer) is False

    def test_hidden_permission_bypasses_grants(self) -> None:
        course = transient_course(assign=["class-a"])
        viewer = make_viewer(uid=20, permissions=[Permission.VIEW_HIDDEN_COURSE])

        assert matching_grant(course, viewer) == "hidden"


class TestVisibilityFilter:
    """Test suite for the SQL listing filter against SQLite."""

    @pytest.fixture
    async def courses(self, make_course):
        return {
            "public": await make_course(title="public"),
            "owned": await make_course(title="owned", owner=10, assign=["class-z"]),
            "maintained": await make_course(title="maintained", maintainers=[10], assign=["class-z"]),
            "taught": await make_course(title="taught", teachers=[10], assign=["class-z"]),
            "assigned": await make_course(title="assigned", assign=["class-a"]),
            "legacy": await make_course(title="legacy", assign=["class-z"], classes=["class-a"]),
            "other": await make_course(title="other", assign=["class-z"]),
            "foreign": await make_course(title="foreign", domain_id="elsewhere"),
        }

    async def _visible_titles(self, db_session, viewer) -> set[str]:
        found, total = await course_crud.get_multi_visible(
            db_session, DOMAIN, [build_visibility_filter(viewer)], order_by=LISTING_ORDER
        )
        assert total == len(found)
        return {c.title for c in found}

    @pytest.mark.asyncio
    async def test_filter_selects_granted_courses(self, db_session, courses) -> None:
        # Arrange
        viewer = make_viewer(uid=10, groups=["class-a"])

        # Act
        titles = await self._visible_titles(db_session, viewer)

        # Assert
        assert titles == {"public", "owned", "maintained", "taught", "assigned", "legacy"}

    @pytest.mark.asyncio
    async def test_filter_agrees_with_in_memory_check(self, db_session, courses) -> None:
        for viewer in (
            make_viewer(uid=10, groups=["class-a"]),
            make_viewer(uid=99),
            make_viewer(uid=99, group_filter="class-z"),
        ):
            titles = await self._visible_titles(db_session, viewer)
            expected = {
                c.title
                for c in courses.values()
                if c.domain_id == DOMAIN and can_view_course(c, viewer)
            }
            assert titles == expected

    @pytest.mark.asyncio
    async def test_guest_only_sees_public_courses(self, db_session, courses) -> None:
        titles = await self._visible_titles(db_session, make_viewer(uid=0))
        assert titles == {"public"}

    @pytest.mark.asyncio
    async def test_hidden_viewer_sees_whole_domain(self, db_session, courses) -> None:
        viewer = make_viewer(uid=99, permissions=ALL_PERMISSIONS)
        titles = await self._visible_titles(db_session, viewer)

        assert titles == {c.title for c in courses.values() if c.domain_id == DOMAIN}

    @pytest.mark.asyncio
    async def test_hidden_viewer_with_group_filter_uses_grants(self, db_session, courses) -> None:
        viewer = make_viewer(uid=99, permissions=ALL_PERMISSIONS, group_filter="class-a")
        titles = await self._visible_titles(db_session, viewer)

        assert titles == {"public", "assigned", "legacy"}


class TestTitleSearchAndOrder:
    """Test suite for title search and listing order."""

    def test_empty_query_adds_no_filter(self) -> None:
        assert build_title_filter(None) is None
        assert build_title_filter("") is None

    @pytest.mark.asyncio
    async def test_single_character_matches_prefix_only(self, db_session, make_course) -> None:
        await make_course(title="Graph Theory")
        await make_course(title="Dynamic Programming")

        found, _ = await course_crud.get_multi_visible(
            db_session, DOMAIN, [build_title_filter("g")], order_by=LISTING_ORDER
        )

        assert [c.title for c in found] == ["Graph Theory"]

    @pytest.mark.asyncio
    async def test_longer_query_matches_anywhere_case_insensitive(
        self, db_session, make_course
    ) -> None:
        await make_course(title="Graph Theory")
        await make_course(title="Dynamic Programming")

        found, _ = await course_crud.get_multi_visible(
            db_session, DOMAIN, [build_title_filter("GRAM")], order_by=LISTING_ORDER
        )

        assert [c.title for c in found] == ["Dynamic Programming"]

    @pytest.mark.asyncio
    async def test_like_wildcards_are_literal(self, db_session, make_course) -> None:
        await make_course(title="100% Practice")
        await make_course(title="1000 Problems")

        found, _ = await course_crud.get_multi_visible(
            db_session, DOMAIN, [build_title_filter("0%")], order_by=LISTING_ORDER
        )

        assert [c.title for c in found] == ["100% Practice"]

    @pytest.mark.asyncio
    async def test_listing_is_newest_start_first(self, db_session, make_course) -> None:
        await make_course(title="old", begin_at=NOW - timedelta(days=10))
        await make_course(title="new", begin_at=NOW)
        await make_course(title="mid", begin_at=NOW - timedelta(days=5))

        found, total = await course_crud.get_multi_visible(
            db_session, DOMAIN, [], order_by=LISTING_ORDER
        )

        assert total == 3
        assert [c.title for c in found] == ["new", "mid", "old"]
