"""Recommender port: abstract interface for the recommendation engine."""

from abc import ABC, abstractmethod
from uuid import UUID

from app.domain.scoring import MAX_RECOMMENDATIONS, Recommendation


class RecommenderPort(ABC):
    """Abstraction for the book recommendation engine."""

    @abstractmethod
    async def recommend(
        self,
        user_id: UUID,
        limit: int = MAX_RECOMMENDATIONS,
    ) -> list[Recommendation]:
        """Return ranked book recommendations for a user."""
        ...
