"""
AWS boundary modules.

Exports: S3CourseFileStorage
"""

from .course_file_storage import S3CourseFileStorage

__all__ = ["S3CourseFileStorage"]
