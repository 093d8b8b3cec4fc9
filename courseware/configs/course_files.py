"""
Course file bucket configuration.

Settings for the blob bucket holding course attachments and for
presigned download link generation.

Dependencies: pydantic_settings
System role: Course attachment storage configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CourseFileStorageSettings(BaseSettings):
    """Settings for course attachment bucket operations."""

    model_config = SettingsConfigDict(
        env_prefix="COURSE_FILES_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="courseware-dev-files",
        description="S3 bucket for course attachments",
    )
    region: str = Field(
        default="ap-southeast-2",
        description="AWS region for S3 bucket",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Custom S3 endpoint (MinIO or other S3-compatible stores)",
    )
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned download URL expiry in seconds (default 1 hour)",
    )
