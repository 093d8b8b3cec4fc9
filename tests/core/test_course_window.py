"""
Test suite for course window, problem list and content helpers.

System role: Verification of course lifecycle rules
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from courseware.core.course_window import (
    as_utc,
    default_window,
    is_done,
    is_not_started,
    is_ongoing,
    parse_problem_ids,
    rewrite_file_links,
    validate_window,
)
from courseware.core.exceptions import ValidationError
from courseware.core.permissions import Permission, parse_permissions

BEGIN = datetime(2024, 1, 1, tzinfo=timezone.utc)
END = datetime(2024, 1, 31, tzinfo=timezone.utc)


class TestCourseState:
    """Test suite for window state helpers."""

    def test_before_begin_is_not_started(self) -> None:
        now = BEGIN - timedelta(seconds=1)
        assert is_not_started(BEGIN, now)
        assert not is_ongoing(BEGIN, END, now)

    def test_inside_window_is_ongoing(self) -> None:
        assert is_ongoing(BEGIN, END, BEGIN)
        assert not is_done(END, BEGIN)

    def test_end_instant_counts_as_done(self) -> None:
        assert is_done(END, END)
        assert not is_ongoing(BEGIN, END, END)

    def test_naive_values_are_treated_as_utc(self) -> None:
        naive_end = datetime(2024, 1, 31)
        assert as_utc(naive_end) == END
        assert is_done(naive_end, datetime(2024, 2, 1, tzinfo=timezone.utc))

    def test_default_window_lasts_given_days(self) -> None:
        begin, end = default_window(BEGIN, 30)
        assert (begin, end) == (BEGIN, BEGIN + timedelta(days=30))

    def test_reversed_or_empty_window_is_rejected(self) -> None:
        validate_window(BEGIN, END)
        for begin, end in ((END, BEGIN), (BEGIN, BEGIN)):
            with pytest.raises(ValidationError):
                validate_window(begin, end)


class TestParseProblemIds:
    """Test suite for parse_problem_ids()."""

    def test_comma_separated_string(self) -> None:
        assert parse_problem_ids("1, 2,3") == [1, 2, 3]

    def test_full_width_commas_and_blank_entries(self) -> None:
        assert parse_problem_ids("1，2,,0, 4") == [1, 2, 4]

    def test_list_input_and_none(self) -> None:
        assert parse_problem_ids([5, 0, 6]) == [5, 6]
        assert parse_problem_ids(None) == []
        assert parse_problem_ids("") == []

    @pytest.mark.parametrize("raw", ["1,abc", "1,-2", "1.5"])
    def test_invalid_entries_are_rejected(self, raw: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_problem_ids(raw)

        assert exc_info.value.details["field"] == "pids"


class TestContentAndPermissions:
    """Test suite for content link rewriting and permission parsing."""

    def test_file_links_point_to_course_route(self) -> None:
        course_id = uuid.uuid4()
        content = '![img](file://a.png) <a href="file://b.pdf">b</a> file://c.txt'

        rewritten = rewrite_file_links(content, course_id)

        assert f"(./{course_id}/file/a.png)" in rewritten
        assert f'href="./{course_id}/file/b.pdf"' in rewritten
        assert rewritten.endswith(" file://c.txt")

    def test_parse_permissions_ignores_unknown_names(self) -> None:
        parsed = parse_permissions("view_course, attend_course,root")
        assert parsed == frozenset({Permission.VIEW_COURSE, Permission.ATTEND_COURSE})
        assert parse_permissions(None) == frozenset()
