"""
S3 storage for course attachments.

Stores, inspects, deletes and signs download links for course files.
boto3 is synchronous, so every call is pushed to a worker thread.

Dependencies: boto3
System role: Blob store adapter for course attachments
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Sequence
from urllib.parse import quote

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# delete_objects accepts at most this many keys per call
_DELETE_BATCH = 1000
_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


class S3CourseFileStorage:
    """Blob store for course attachments backed by one S3 bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "ap-southeast-2",
        endpoint_url: str | None = None,
        presigned_url_expiry: int = 3600,
        s3_client: Any | None = None,
    ) -> None:
        """
        Initialize storage for the attachment bucket.

        Args:
            bucket: S3 bucket name for course files
            region: AWS region for the bucket
            endpoint_url: Optional S3-compatible endpoint
            presigned_url_expiry: Download link lifetime in seconds
            s3_client: Pre-built boto3 client (tests)
        """
        if not bucket:
            raise ValueError("bucket is required")
        self._bucket = bucket
        self._expiry = presigned_url_expiry
        self._s3_client = s3_client or boto3.client(
            "s3", region_name=region, endpoint_url=endpoint_url
        )

    async def put(self, key: str, local_path: str, actor_id: int) -> None:
        """
        Upload a local file to ``key``.

        Raises:
            ClientError: If the upload fails
        """
        await asyncio.to_thread(
            self._s3_client.upload_file,
            Filename=local_path,
            Bucket=self._bucket,
            Key=key,
            ExtraArgs={"Metadata": {"owner": str(actor_id)}},
        )
        logger.info("Stored course file", extra={"s3_key": key, "actor_id": actor_id})

    async def get_meta(self, key: str) -> dict[str, Any] | None:
        """
        Read size, modification time and fingerprint of a stored file.

        Returns:
            dict with size, last_modified and etag, or None if absent

        Raises:
            ClientError: For failures other than a missing object
        """
        try:
            head = await asyncio.to_thread(
                self._s3_client.head_object, Bucket=self._bucket, Key=key
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_CODES:
                return None
            raise
        last_modified: datetime | None = head.get("LastModified")
        return {
            "size": head.get("ContentLength", 0),
            "last_modified": last_modified.isoformat() if last_modified else None,
            "etag": (head.get("ETag") or "").strip('"'),
        }

    async def delete(self, keys: Sequence[str], actor_id: int) -> None:
        """
        Delete stored files; missing keys are ignored by S3.

        Raises:
            ClientError: If a batch request fails
        """
        keys = list(keys)
        for start in range(0, len(keys), _DELETE_BATCH):
            batch = keys[start:start + _DELETE_BATCH]
            response = await asyncio.to_thread(
                self._s3_client.delete_objects,
                Bucket=self._bucket,
                Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
            )
            for error in response.get("Errors", []):
                logger.warning(
                    "Failed to delete course file",
                    extra={"s3_key": error.get("Key"), "error": error.get("Message")},
                )
        if keys:
            logger.info(
                "Deleted course files",
                extra={"count": len(keys), "actor_id": actor_id},
            )

    async def sign_download_link(self, key: str, filename: str | None = None) -> str:
        """
        Presigned GET link for a stored file.

        Args:
            key: Object key
            filename: When given, the browser is told to save the file
                under this name; otherwise no disposition is set

        Returns:
            str: Presigned URL
        """
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": key}
        if filename:
            params["ResponseContentDisposition"] = (
                f"attachment; filename*=UTF-8''{quote(filename)}"
            )
        return await asyncio.to_thread(
            self._s3_client.generate_presigned_url,
            ClientMethod="get_object",
            Params=params,
            ExpiresIn=self._expiry,
        )
