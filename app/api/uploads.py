"""Validation and persistence of uploaded images."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional
from uuid import uuid4

from fastapi import HTTPException, UploadFile, status

from app.config import settings
from app.ports.storage import StoragePort

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
}


@dataclass(frozen=True)
class ImageUpload:
    content: bytes
    extension: str


async def read_image(upload: UploadFile) -> ImageUpload:
    """Read and validate an uploaded image without storing it."""
    extension = ALLOWED_IMAGE_TYPES.get(upload.content_type or "")
    if extension is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only JPG, JPEG, PNG, and GIF files are allowed",
        )

    content = await upload.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File exceeds {settings.max_upload_bytes // (1024 * 1024)} MB limit",
        )
    return ImageUpload(content=content, extension=extension)


@asynccontextmanager
async def staged_image(
    storage: StoragePort, image: Optional[ImageUpload]
) -> AsyncIterator[Optional[str]]:
    """
    Store an image for the duration of a unit of work and yield its URL.

    If the block raises, the stored file is deleted again before the error
    propagates, so a failed request never leaves an unreferenced upload.
    Yields None when there is no image.
    """
    if image is None:
        yield None
        return

    url = await storage.save(uuid4(), image.content, image.extension)
    try:
        yield url
    except Exception:
        logger.info("Discarding upload %s after failed request", url)
        await storage.delete(url)
        raise
