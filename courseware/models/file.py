"""
Course attachment schemas.

Dependencies: pydantic
System role: Course file API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field


class AttachmentResponse(BaseModel):
    """Metadata of one course attachment."""

    name: str
    size: int = 0
    last_modified: datetime | None = None
    etag: str | None = None


class FileListResponse(BaseModel):
    """Attachment list with current usage against the ceilings."""

    files: list[AttachmentResponse]
    count: int
    total_size: int
    max_files: int
    max_total_bytes: int


class DeleteFilesRequest(BaseModel):
    """Names of attachments to delete."""

    files: list[str] = Field(..., min_length=1, description="Attachment names")
