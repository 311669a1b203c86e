"""Book catalog service."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import Book, Genre, Review, Shelf, User

logger = logging.getLogger(__name__)


class BookService:
    """Catalog CRUD plus the admin dashboard counts."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, book_id: UUID) -> Book:
        result = await self._session.execute(
            select(Book)
            .where(Book.id == book_id)
            .execution_options(populate_existing=True)
        )
        book = result.scalar_one_or_none()
        if not book:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
        return book

    async def require_genre(self, genre_id: UUID) -> None:
        if not await self._session.get(Genre, genre_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown genre",
            )

    async def create(
        self,
        title: str,
        author: str,
        genre_id: UUID,
        description: str,
        cover_image: str,
    ) -> Book:
        await self.require_genre(genre_id)
        book = Book(
            title=title.strip(),
            author=author.strip(),
            genre_id=genre_id,
            description=description,
            cover_image=cover_image,
        )
        self._session.add(book)
        await self._session.flush()
        logger.info("Created book %s (%s)", book.title, book.id)
        return await self.get(book.id)

    async def list_all(self) -> list[Book]:
        result = await self._session.execute(
            select(Book).order_by(Book.created_at.desc(), Book.id)
        )
        return list(result.scalars().all())

    async def update(
        self,
        book_id: UUID,
        title: Optional[str] = None,
        author: Optional[str] = None,
        genre_id: Optional[UUID] = None,
        description: Optional[str] = None,
        cover_image: Optional[str] = None,
    ) -> tuple[Book, Optional[str]]:
        """
        Apply the given fields to a book.

        Returns the refreshed book and, when the cover was replaced, the URL
        of the previous cover so the caller can remove it from storage.
        """
        book = await self.get(book_id)
        if genre_id is not None:
            await self.require_genre(genre_id)
            book.genre_id = genre_id
        if title is not None:
            book.title = title.strip()
        if author is not None:
            book.author = author.strip()
        if description is not None:
            book.description = description

        replaced_cover = None
        if cover_image is not None:
            replaced_cover = book.cover_image
            book.cover_image = cover_image

        await self._session.flush()
        logger.info("Updated book %s", book_id)
        return await self.get(book_id), replaced_cover

    async def delete(self, book_id: UUID) -> str:
        """Delete a book with its shelf entries and reviews. Returns the cover URL."""
        book = await self.get(book_id)
        cover = book.cover_image
        await self._session.execute(delete(Shelf).where(Shelf.book_id == book_id))
        await self._session.execute(delete(Review).where(Review.book_id == book_id))
        await self._session.delete(book)
        await self._session.flush()
        logger.info("Deleted book %s", book_id)
        return cover

    async def admin_stats(self) -> dict:
        total_books = await self._session.scalar(select(func.count(Book.id)))
        total_users = await self._session.scalar(select(func.count(User.id)))
        rows = await self._session.execute(
            select(Genre.name, func.count(Book.id))
            .join(Book, Book.genre_id == Genre.id, isouter=True)
            .group_by(Genre.id, Genre.name)
            .order_by(Genre.name)
        )
        return {
            "totalBooks": total_books or 0,
            "totalUsers": total_users or 0,
            "booksPerGenre": [{"name": name, "value": count} for name, count in rows.all()],
        }
