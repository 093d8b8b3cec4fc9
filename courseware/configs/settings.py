"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from courseware.configs.base import BaseSettings
from courseware.configs.database import DatabaseSettings
from courseware.configs.course_files import CourseFileStorageSettings
from courseware.configs.limits import CourseLimitSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    course_files: CourseFileStorageSettings = CourseFileStorageSettings()
    limits: CourseLimitSettings = CourseLimitSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from courseware.configs import get_settings
        settings = get_settings()
    """
    return Settings()
