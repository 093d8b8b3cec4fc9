"""
Course validation utilities.

Request checks not covered by Pydantic models. Problem id parsing and
window ordering are enforced by the service layer.

Dependencies: courseware.models.course, courseware.core.exceptions
System role: Course request validation
"""

from courseware.core.exceptions import ValidationError
from courseware.models.course import CreateCourseRequest, UpdateCourseRequest


def _check_title(title: str) -> None:
    if not title.strip():
        raise ValidationError("Course title cannot be empty or whitespace-only", field="title")


def _check_people(maintainers: list[int] | None, teachers: list[int] | None) -> None:
    for field, uids in (("maintainers", maintainers), ("teachers", teachers)):
        if uids and any(uid <= 0 for uid in uids):
            raise ValidationError("User ids must be positive", field=field)


def validate_course_creation(request: CreateCourseRequest) -> None:
    """
    Validate course creation request.

    Raises:
        ValidationError: If the title is blank or a user id is not positive
    """
    _check_title(request.title)
    _check_people(request.maintainers, request.teachers)


def validate_course_update(request: UpdateCourseRequest) -> None:
    """
    Validate course update request.

    Raises:
        ValidationError: If nothing is being changed, the title is blank
            or a user id is not positive
    """
    if not request.model_dump(exclude_none=True):
        raise ValidationError("At least one field must be provided for update")

    if request.title is not None:
        _check_title(request.title)
    _check_people(request.maintainers, request.teachers)
