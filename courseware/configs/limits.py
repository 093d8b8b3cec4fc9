"""
Course limit settings.

Attachment quota ceilings and listing defaults for courses.

Dependencies: pydantic_settings
System role: Quota and pagination configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CourseLimitSettings(BaseSettings):
    """Per-course ceilings and listing sizes."""

    model_config = SettingsConfigDict(
        env_prefix="COURSE_LIMIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_files: int = Field(
        default=100,
        ge=0,
        description="Maximum number of attachments per course",
    )
    max_total_bytes: int = Field(
        default=128 * 1024 * 1024,
        ge=0,
        description="Aggregate attachment size ceiling per course in bytes",
    )
    default_duration_days: int = Field(
        default=30,
        gt=0,
        description="Course duration used when no end time is given",
    )
    enrolled_sidebar_limit: int = Field(
        default=100,
        gt=0,
        description="Enrolled users shown on the course detail page",
    )
    page_size: int = Field(default=20, gt=0, description="Default page size for listings")
