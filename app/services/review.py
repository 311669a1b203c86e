"""Review submission and moderation service."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import Book, Review

logger = logging.getLogger(__name__)


class ReviewService:
    """Handles review creation, moderation and the book rating aggregates."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _get(self, review_id: UUID) -> Review:
        result = await self._session.execute(
            select(Review)
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        review = result.scalar_one_or_none()
        if not review:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
        return review

    async def create_review(
        self, book_id: UUID, user_id: UUID, rating: int, comment: str
    ) -> Review:
        """
        Submit a review for a book.

        One review per user and book; new reviews wait in Pending until an
        admin approves them. Raises 409 on a second review.
        """
        if not await self._session.get(Book, book_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")

        existing = await self._session.execute(
            select(Review.id).where(Review.book_id == book_id, Review.user_id == user_id)
        )
        if existing.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You already reviewed this book",
            )

        review = Review(user_id=user_id, book_id=book_id, rating=rating, comment=comment)
        self._session.add(review)
        await self._session.flush()
        logger.info("Review %s submitted for book %s", review.id, book_id)
        return await self._get(review.id)

    async def list_all(self) -> list[Review]:
        result = await self._session.execute(select(Review).order_by(Review.created_at.desc()))
        return list(result.scalars().all())

    async def list_pending(self) -> list[Review]:
        result = await self._session.execute(
            select(Review)
            .where(Review.status == "Pending")
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_reviews_for_book(self, book_id: UUID) -> list[Review]:
        """Retrieve the approved reviews of a specific book."""
        result = await self._session.execute(
            select(Review)
            .where(Review.book_id == book_id, Review.status == "Approved")
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def approve(self, review_id: UUID) -> Review:
        review = await self._get(review_id)
        review.status = "Approved"
        await self._session.flush()
        await self._refresh_book_rating(review.book_id)
        logger.info("Review %s approved", review_id)
        return await self._get(review_id)

    async def delete(self, review_id: UUID) -> None:
        review = await self._get(review_id)
        book_id = review.book_id
        await self._session.delete(review)
        await self._session.flush()
        await self._refresh_book_rating(book_id)
        logger.info("Review %s deleted", review_id)

    async def _refresh_book_rating(self, book_id: UUID) -> None:
        """Recompute a book's average rating and review count from approved reviews."""
        row = (
            await self._session.execute(
                select(func.count(Review.id), func.avg(Review.rating)).where(
                    Review.book_id == book_id, Review.status == "Approved"
                )
            )
        ).one()
        book = await self._session.get(Book, book_id)
        if book is None:
            return
        book.total_reviews = row[0] or 0
        book.average_rating = round(float(row[1]), 2) if row[1] is not None else 0.0
        await self._session.flush()
