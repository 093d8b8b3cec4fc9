"""
Courses router package.

Exports the router for course management, attachment and report endpoints.
"""

from fastapi import APIRouter

from .course_files_router import router as course_files_router
from .course_reports_router import router as course_reports_router
from .courses_router import router as courses_router

router = APIRouter()
router.include_router(courses_router)
router.include_router(course_files_router)
router.include_router(course_reports_router)

__all__ = ["router"]
