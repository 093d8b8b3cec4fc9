"""
Test suite for structured logging helpers and correlation IDs.

System role: Verification of observability utilities
"""

import logging
import uuid

import pytest

from courseware.core.exceptions import CourseNotFoundError
from courseware.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from courseware.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from courseware.observability.logger import CorrelationIdFilter

logger = logging.getLogger("courseware.tests.log_utils")


class TestSafeLogValue:
    """Test suite for safe_log_value()."""

    def test_scalars_pass_through(self) -> None:
        assert safe_log_value(3) == 3
        assert safe_log_value(None) is None
        assert safe_log_value(True) is True

    def test_collections_are_summarised(self) -> None:
        assert safe_log_value([1, 2, 3]) == "list(3 items)"
        assert safe_log_value({"a": 1}) == "dict(1 keys)"

    def test_long_strings_are_truncated(self) -> None:
        value = safe_log_value("x" * 20, max_length=5)
        assert value.startswith("xxxxx... (truncated")

    def test_uuid_becomes_string(self) -> None:
        value = uuid.uuid4()
        assert safe_log_value(value) == str(value)


class TestLogWithContext:
    """Test suite for log_with_context() and log_exception_with_context()."""

    def test_reserved_keys_are_prefixed(self, caplog: pytest.LogCaptureFixture) -> None:
        # Arrange
        caplog.set_level(logging.INFO, logger=logger.name)

        # Act
        log_with_context(logger, logging.INFO, "File stored", filename="a.txt", size=3)

        # Assert
        record = caplog.records[-1]
        assert record.ctx_filename == "a.txt"
        assert record.size == 3
        assert record.filename.endswith(".py")

    def test_domain_error_details_are_attached(self, caplog: pytest.LogCaptureFixture) -> None:
        # Arrange
        caplog.set_level(logging.WARNING, logger=logger.name)
        course_id = uuid.uuid4()

        # Act
        log_exception_with_context(
            logger,
            "Course request rejected",
            CourseNotFoundError(course_id),
            level=logging.WARNING,
            status_code=404,
        )

        # Assert
        record = caplog.records[-1]
        assert record.course_id == str(course_id)
        assert record.status_code == 404
        assert record.error_type == "CourseNotFoundError"
        assert record.exc_info is None

    def test_error_level_attaches_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.ERROR, logger=logger.name)

        log_exception_with_context(logger, "Unexpected failure", RuntimeError("boom"))

        assert caplog.records[-1].exc_info is not None


class TestCorrelationId:
    """Test suite for correlation ID propagation."""

    def test_set_get_clear(self) -> None:
        generated = set_correlation_id()
        assert get_correlation_id() == generated

        set_correlation_id("req-1")
        assert get_correlation_id() == "req-1"

        clear_correlation_id()
        assert get_correlation_id() == ""

    def test_filter_injects_current_id(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)

        set_correlation_id("req-2")
        CorrelationIdFilter().filter(record)
        clear_correlation_id()

        assert record.correlation_id == "req-2"

    def test_filter_uses_placeholder_outside_requests(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
        clear_correlation_id()

        CorrelationIdFilter().filter(record)

        assert record.correlation_id == "-"
