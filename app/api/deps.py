"""Shared FastAPI dependencies: storage, clock and recommender wiring."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.clock import SystemClock
from app.adapters.recommender.genre_affinity import GenreAffinityRecommender
from app.config import StorageBackend, settings
from app.database import get_session
from app.ports.clock import ClockPort
from app.ports.recommender import RecommenderPort
from app.ports.storage import StoragePort


@lru_cache
def get_storage() -> StoragePort:
    """Build the configured storage adapter once per process."""
    if settings.storage_backend == StorageBackend.S3:
        from app.adapters.storage.s3 import S3StorageAdapter

        return S3StorageAdapter(
            endpoint_url=settings.s3_endpoint_url,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            bucket=settings.s3_bucket,
        )

    from app.adapters.storage.local import LocalStorageAdapter

    return LocalStorageAdapter(settings.local_storage_path, settings.public_base_url)


@lru_cache
def get_clock() -> ClockPort:
    return SystemClock(settings.stats_timezone)


def get_recommender(session: AsyncSession = Depends(get_session)) -> RecommenderPort:
    return GenreAffinityRecommender(session)
