"""
Course attachment rules.

Quota checks, file name validation and blob key layout for course
attachments. Counts and sizes are always derived from the current
attachment list; nothing is cached.

Dependencies: courseware.core.exceptions
System role: Attachment quota manager (pure part)
"""

from typing import Any, Iterable, Sequence
from uuid import UUID

from courseware.core.exceptions import QuotaExceededError, ValidationError

MAX_FILENAME_LENGTH = 255


def total_size(files: Iterable[dict[str, Any]]) -> int:
    """Sum of declared sizes; entries without a size count as zero."""
    return sum(f.get("size") or 0 for f in files)


def check_attachment_quota(
    files: Sequence[dict[str, Any]],
    incoming_size: int,
    max_files: int,
    max_total_bytes: int,
) -> None:
    """
    Reject an upload that would break a course ceiling.

    Args:
        files: Current attachment entries
        incoming_size: Size of the file about to be stored
        max_files: Attachment count ceiling
        max_total_bytes: Aggregate size ceiling

    Raises:
        QuotaExceededError: kind "count" when the list is already full,
            kind "size" when the new total would reach the byte ceiling
    """
    if len(files) >= max_files:
        raise QuotaExceededError(QuotaExceededError.COUNT, max_files, len(files))
    new_total = total_size(files) + incoming_size
    if new_total >= max_total_bytes:
        raise QuotaExceededError(QuotaExceededError.SIZE, max_total_bytes, new_total)


def validate_filename(filename: str) -> None:
    """
    Validate an attachment name.

    Raises:
        ValidationError: If the name is empty, too long or not a plain name
    """
    if not filename or not filename.strip() or len(filename) > MAX_FILENAME_LENGTH:
        raise ValidationError("Invalid filename length", field="filename")

    # Block path traversal attacks
    if filename in (".", "..") or "/" in filename or "\\" in filename:
        raise ValidationError("Invalid filename: path traversal detected", field="filename")

    if any(ord(c) < 32 for c in filename):
        raise ValidationError("Invalid filename: control characters", field="filename")


def file_key(domain_id: str, course_id: UUID, filename: str) -> str:
    """Blob key of a course attachment: course/{domain}/{course}/{name}."""
    return f"course/{domain_id}/{course_id}/{filename}"


def sort_files(files: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Attachment entries ordered by name for display."""
    return sorted(files, key=lambda f: f["name"])


def upsert_file_entry(
    files: Sequence[dict[str, Any]],
    entry: dict[str, Any],
) -> list[dict[str, Any]]:
    """
    Return a new list with ``entry`` added.

    An existing entry with the same name is replaced in place; otherwise the
    entry is appended so the remaining order is untouched.
    """
    updated = [dict(f) for f in files]
    for index, existing in enumerate(updated):
        if existing["name"] == entry["name"]:
            updated[index] = entry
            return updated
    updated.append(entry)
    return updated


def remove_file_entries(
    files: Sequence[dict[str, Any]],
    names: Iterable[str],
) -> list[dict[str, Any]]:
    """Return a new list without the named entries, order preserved."""
    doomed = set(names)
    return [dict(f) for f in files if f["name"] not in doomed]
