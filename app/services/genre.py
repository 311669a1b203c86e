"""Genre management service."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import Book, Genre

logger = logging.getLogger(__name__)


class GenreService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get(self, genre_id: UUID) -> Genre:
        genre = await self._session.get(Genre, genre_id)
        if not genre:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Genre not found")
        return genre

    async def _ensure_unique(self, name: str, exclude_id: UUID | None = None) -> None:
        stmt = select(Genre.id).where(func.lower(Genre.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Genre.id != exclude_id)
        if (await self._session.execute(stmt)).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Genre already exists",
            )

    async def create(self, name: str) -> Genre:
        name = name.strip()
        await self._ensure_unique(name)
        genre = Genre(name=name)
        self._session.add(genre)
        await self._session.flush()
        logger.info("Created genre %s (%s)", genre.name, genre.id)
        return genre

    async def list_all(self) -> list[Genre]:
        result = await self._session.execute(select(Genre).order_by(Genre.name))
        return list(result.scalars().all())

    async def update(self, genre_id: UUID, name: str) -> Genre:
        genre = await self._get(genre_id)
        name = name.strip()
        await self._ensure_unique(name, exclude_id=genre_id)
        genre.name = name
        await self._session.flush()
        return genre

    async def delete(self, genre_id: UUID) -> None:
        """Delete a genre. Refused with 409 while books still reference it."""
        genre = await self._get(genre_id)
        in_use = await self._session.scalar(
            select(func.count(Book.id)).where(Book.genre_id == genre_id)
        )
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Genre is used by {in_use} book(s)",
            )
        await self._session.delete(genre)
        await self._session.flush()
        logger.info("Deleted genre %s", genre_id)
