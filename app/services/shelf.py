"""Shelf service: placing books on a user's shelves and tracking page progress."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import Book, Shelf

logger = logging.getLogger(__name__)


class ShelfService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get_owned(self, shelf_id: UUID, user_id: UUID) -> Shelf:
        result = await self._session.execute(
            select(Shelf)
            .where(Shelf.id == shelf_id, Shelf.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        shelf = result.scalar_one_or_none()
        if not shelf:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Shelf entry not found",
            )
        return shelf

    async def add_or_move(
        self, user_id: UUID, book_id: UUID, shelf_type: str
    ) -> tuple[Shelf, bool]:
        """
        Put a book on one of the user's shelves.

        A book already shelved by the user is moved instead; moving it back to
        want-to-read clears its progress. Returns (entry, created).
        """
        if not await self._session.get(Book, book_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")

        result = await self._session.execute(
            select(Shelf).where(Shelf.user_id == user_id, Shelf.book_id == book_id)
        )
        shelf = result.scalar_one_or_none()
        created = shelf is None

        if created:
            shelf = Shelf(user_id=user_id, book_id=book_id, shelf_type=shelf_type)
            self._session.add(shelf)
        else:
            shelf.shelf_type = shelf_type
            if shelf_type == "wantToRead":
                shelf.pages_read = 0

        await self._session.flush()
        logger.info(
            "User %s %s book %s on %s",
            user_id,
            "shelved" if created else "moved",
            book_id,
            shelf_type,
        )
        return await self._get_owned(shelf.id, user_id), created

    async def list_for_user(self, user_id: UUID) -> list[Shelf]:
        result = await self._session.execute(
            select(Shelf)
            .where(Shelf.user_id == user_id)
            .order_by(Shelf.created_at.desc(), Shelf.id)
        )
        return list(result.scalars().all())

    async def update_progress(
        self,
        shelf_id: UUID,
        user_id: UUID,
        pages_read: int,
        total_pages: Optional[int] = None,
    ) -> Shelf:
        """Record pages read; finishing a currently-reading book moves it to read."""
        shelf = await self._get_owned(shelf_id, user_id)
        if total_pages is not None:
            shelf.total_pages = total_pages

        if shelf.total_pages and pages_read > shelf.total_pages:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Pages read cannot exceed total pages",
            )

        shelf.pages_read = pages_read
        if (
            shelf.total_pages
            and pages_read == shelf.total_pages
            and shelf.shelf_type == "currentlyReading"
        ):
            shelf.shelf_type = "read"
            logger.info("Shelf %s finished, moved to read", shelf_id)

        await self._session.flush()
        return await self._get_owned(shelf_id, user_id)

    async def remove(self, shelf_id: UUID, user_id: UUID) -> None:
        shelf = await self._get_owned(shelf_id, user_id)
        await self._session.delete(shelf)
        await self._session.flush()
        logger.info("Removed shelf %s", shelf_id)
