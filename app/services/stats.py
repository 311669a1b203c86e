"""Per-user reading statistics."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import Review, Shelf
from app.domain.reading_stats import ReadingStats, ShelfSnapshot, compute_reading_stats
from app.ports.clock import ClockPort

logger = logging.getLogger(__name__)


class StatsService:
    """Loads a user's shelves and approved ratings, then aggregates them."""

    def __init__(self, session: AsyncSession, clock: ClockPort) -> None:
        self._session = session
        self._clock = clock

    def _local(self, stored: datetime) -> datetime:
        # Timestamps are stored as naive UTC.
        if stored.tzinfo is None:
            stored = stored.replace(tzinfo=timezone.utc)
        return stored.astimezone(self._clock.tz)

    async def user_statistics(self, user_id: UUID) -> ReadingStats:
        now = self._clock.now()

        shelves = await self._session.execute(select(Shelf).where(Shelf.user_id == user_id))
        snapshots = [
            ShelfSnapshot(
                shelf_type=shelf.shelf_type,
                pages_read=shelf.pages_read or 0,
                total_pages=shelf.total_pages or 0,
                updated_at=self._local(shelf.updated_at or shelf.created_at),
                genre=shelf.book.genre.name if shelf.book and shelf.book.genre else None,
            )
            for shelf in shelves.scalars().all()
        ]

        ratings = await self._session.execute(
            select(Review.rating).where(
                Review.user_id == user_id,
                Review.status == "Approved",
            )
        )

        stats = compute_reading_stats(snapshots, list(ratings.scalars().all()), now)
        logger.debug(
            "Stats for user %s: %d shelf entries, streak=%d",
            user_id,
            len(snapshots),
            stats.reading_streak,
        )
        return stats
