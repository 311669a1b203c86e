"""Local filesystem storage adapter."""

import logging
from pathlib import Path
from uuid import UUID

import aiofiles
import aiofiles.os

from app.ports.storage import StoragePort

logger = logging.getLogger(__name__)


class LocalStorageAdapter(StoragePort):
    """Store uploaded images on the local filesystem, served under `public_base_url`."""

    def __init__(self, base_path: str, public_base_url: str) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)
        self._public = public_base_url.rstrip("/")
        logger.info("LocalStorage initialized at: %s", self._base.resolve())

    async def save(self, file_id: UUID, content: bytes, extension: str) -> str:
        """Save file to local disk. Returns its public URL."""
        filename = f"{file_id}.{extension}"
        async with aiofiles.open(self._base / filename, "wb") as f:
            await f.write(content)
        logger.info("Saved file: %s (%d bytes)", filename, len(content))
        return f"{self._public}/{filename}"

    async def delete(self, url: str) -> None:
        """Delete a previously saved file; unknown URLs are ignored."""
        if not url.startswith(self._public + "/"):
            logger.warning("Not a locally stored asset: %s", url)
            return
        target = self._base / url[len(self._public) + 1:]
        if target.exists():
            await aiofiles.os.remove(str(target))
            logger.info("Deleted file: %s", target.name)
        else:
            logger.warning("File not found for deletion: %s", url)
