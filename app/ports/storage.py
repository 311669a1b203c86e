"""Storage port: where uploaded cover images and profile photos live."""

from abc import ABC, abstractmethod
from uuid import UUID


class StoragePort(ABC):
    """Abstraction over binary asset storage."""

    @abstractmethod
    async def save(self, file_id: UUID, content: bytes, extension: str) -> str:
        """Persist content and return the public URL it is served from."""
        ...

    @abstractmethod
    async def delete(self, url: str) -> None:
        """Remove an asset previously returned by save()."""
        ...
