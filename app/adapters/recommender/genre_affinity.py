"""Genre-affinity recommender with a popularity fallback."""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain import scoring
from app.domain.models import Book, Review, Shelf
from app.domain.scoring import CandidateBook, Recommendation
from app.ports.recommender import RecommenderPort

logger = logging.getLogger(__name__)


class GenreAffinityRecommender(RecommenderPort):
    """
    Recommends unread books from the user's favourite genres.

    Reads everything it needs from the session in a fixed number of queries
    (per-book rating and shelf aggregates are fetched in bulk), then hands the
    rows to the pure scoring functions in `app.domain.scoring`.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def recommend(
        self,
        user_id: UUID,
        limit: int = scoring.MAX_RECOMMENDATIONS,
    ) -> list[Recommendation]:
        read_books = await self._read_books(user_id)
        read_ids = [book.id for book in read_books]

        primary: list[Recommendation] = []
        if len(read_books) >= scoring.MIN_READ_FOR_AFFINITY:
            genre_counts = scoring.genre_frequency(book.genre_id for book in read_books)
            genres = scoring.top_genres(genre_counts)
            user_mean = await self._user_mean_rating(user_id)
            candidates = await self._candidates(
                read_ids,
                genre_ids=genres,
                limit=scoring.CANDIDATE_POOL_LIMIT,
            )
            primary = scoring.score_affinity_candidates(candidates, genre_counts, user_mean)

        fallback: list[Recommendation] = []
        if scoring.needs_fallback(primary):
            candidates = await self._candidates(read_ids, limit=scoring.FALLBACK_POOL_LIMIT)
            fallback = scoring.score_popular_candidates(candidates)

        results = scoring.merge_recommendations(primary, fallback)[:limit]
        logger.info(
            "Recommendations for user %s: read=%d primary=%d fallback=%d returned=%d",
            user_id,
            len(read_books),
            len(primary),
            len(fallback),
            len(results),
        )
        return results

    # ── Queries ─────────────────────────────────────

    async def _read_books(self, user_id: UUID) -> list[Book]:
        result = await self._session.execute(
            select(Shelf)
            .where(Shelf.user_id == user_id, Shelf.shelf_type == "read")
            .order_by(Shelf.created_at, Shelf.id)
        )
        return [
            shelf.book
            for shelf in result.scalars().all()
            if shelf.book is not None and shelf.book.genre is not None
        ]

    async def _user_mean_rating(self, user_id: UUID) -> float:
        result = await self._session.execute(
            select(Review.rating).where(
                Review.user_id == user_id,
                Review.status == "Approved",
            )
        )
        return scoring.mean_rating(
            list(result.scalars().all()),
            default=scoring.DEFAULT_USER_RATING,
        )

    async def _candidates(
        self,
        exclude_ids: Sequence[UUID],
        limit: int,
        genre_ids: Sequence[UUID] | None = None,
    ) -> list[CandidateBook]:
        stmt = select(Book)
        if genre_ids is not None:
            stmt = stmt.where(Book.genre_id.in_(genre_ids))
        if exclude_ids:
            stmt = stmt.where(Book.id.not_in(exclude_ids))
        result = await self._session.execute(
            stmt.order_by(Book.created_at, Book.id).limit(limit)
        )
        books = list(result.scalars().all())
        if not books:
            return []

        book_ids = [book.id for book in books]
        ratings = await self._approved_averages(book_ids)
        shelved = await self._shelf_counts(book_ids)

        return [
            CandidateBook(
                id=book.id,
                title=book.title,
                author=book.author,
                genre_id=book.genre_id,
                genre=book.genre.name,
                cover_image=book.cover_image,
                avg_rating=ratings.get(book.id, 0.0),
                shelved_count=shelved.get(book.id, 0),
            )
            for book in books
        ]

    async def _approved_averages(self, book_ids: Sequence[UUID]) -> dict[UUID, float]:
        """Mean approved rating per book; books without approved reviews are absent."""
        result = await self._session.execute(
            select(Review.book_id, func.avg(Review.rating))
            .where(Review.book_id.in_(book_ids), Review.status == "Approved")
            .group_by(Review.book_id)
        )
        return {book_id: float(avg) for book_id, avg in result.all()}

    async def _shelf_counts(self, book_ids: Sequence[UUID]) -> dict[UUID, int]:
        """Number of shelf entries per book, across all users and shelf types."""
        result = await self._session.execute(
            select(Shelf.book_id, func.count(Shelf.id))
            .where(Shelf.book_id.in_(book_ids))
            .group_by(Shelf.book_id)
        )
        return {book_id: count for book_id, count in result.all()}
