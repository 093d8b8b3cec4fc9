"""
Upload spooling helpers.

Multipart uploads are written to a private temp directory so the blob
store can read them from disk, and removed once the request is done.

Dependencies: fastapi
System role: Temporary upload file handling
"""

import logging
import shutil
import tempfile
from pathlib import Path

from fastapi import UploadFile

logger = logging.getLogger(__name__)

TEMP_PREFIX = "courseware_"


async def spool_upload(file: UploadFile, filename: str) -> tuple[str, int]:
    """
    Copy an uploaded file into a fresh temp directory.

    Args:
        file: Multipart upload
        filename: Name to store it under (already validated)

    Returns:
        tuple: (local path, size in bytes)
    """
    temp_dir = tempfile.mkdtemp(prefix=TEMP_PREFIX)
    temp_path = Path(temp_dir) / filename
    try:
        with open(temp_path, "wb") as out:
            while chunk := await file.read(1024 * 1024):
                out.write(chunk)
    except Exception:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise

    size = temp_path.stat().st_size
    logger.debug(
        "Upload spooled",
        extra={"temp_path": str(temp_path), "size": size},
    )
    return str(temp_path), size


def cleanup_temp_file(file_path: str) -> None:
    """
    Safely remove a spooled file and its temp directory.

    Args:
        file_path: Path returned by ``spool_upload``
    """
    try:
        path = Path(file_path)
        parent_dir = path.parent

        if path.exists():
            path.unlink()

        if parent_dir.exists() and parent_dir.name.startswith(TEMP_PREFIX):
            shutil.rmtree(parent_dir, ignore_errors=True)
            logger.debug("Cleaned up temp directory", extra={"temp_dir": str(parent_dir)})

    except OSError as e:
        logger.warning(
            "Failed to cleanup temp file",
            extra={"file_path": file_path, "error": str(e)},
        )
