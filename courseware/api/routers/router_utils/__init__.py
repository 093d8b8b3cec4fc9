"""
Router utility functions.

Contains helper functions extracted from router endpoints to keep them clean.
"""

from courseware.api.routers.router_utils.upload_utils import (
    cleanup_temp_file,
    spool_upload,
)

__all__ = [
    "cleanup_temp_file",
    "spool_upload",
]
