"""S3-compatible storage adapter (AWS S3, MinIO, etc.)."""

import asyncio
import logging
from functools import partial
from uuid import UUID

import boto3
from botocore.exceptions import ClientError

from app.ports.storage import StoragePort

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
}


class S3StorageAdapter(StoragePort):
    """Store uploaded images in S3-compatible object storage."""

    def __init__(
        self,
        endpoint_url: str,
        access_key: str,
        secret_key: str,
        bucket: str,
    ) -> None:
        self._client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
        )
        self._bucket = bucket
        self._public = f"{endpoint_url.rstrip('/')}/{bucket}"
        self._ensure_bucket()
        logger.info("S3Storage initialized: bucket=%s, endpoint=%s", bucket, endpoint_url)

    def _ensure_bucket(self) -> None:
        """Create the bucket if it doesn't exist."""
        try:
            self._client.head_bucket(Bucket=self._bucket)
        except ClientError:
            self._client.create_bucket(Bucket=self._bucket)
            logger.info("Created S3 bucket: %s", self._bucket)

    async def save(self, file_id: UUID, content: bytes, extension: str) -> str:
        """Upload an image to S3. Returns its public URL."""
        key = f"images/{file_id}.{extension}"
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            partial(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=CONTENT_TYPES.get(extension, "application/octet-stream"),
            ),
        )
        logger.info("Uploaded to S3: %s (%d bytes)", key, len(content))
        return f"{self._public}/{key}"

    async def delete(self, url: str) -> None:
        """Delete an object from S3 by its public URL."""
        if not url.startswith(self._public + "/"):
            logger.warning("Not an S3 asset of bucket %s: %s", self._bucket, url)
            return
        key = url[len(self._public) + 1:]
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            partial(self._client.delete_object, Bucket=self._bucket, Key=key),
        )
        logger.info("Deleted from S3: %s", key)
