"""Tutorial video service."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.schemas import TutorialRequest, TutorialUpdateRequest
from app.domain.models import Tutorial

logger = logging.getLogger(__name__)


class TutorialService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, tutorial_id: UUID) -> Tutorial:
        tutorial = await self._session.get(Tutorial, tutorial_id)
        if not tutorial:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tutorial not found")
        return tutorial

    async def list_all(self) -> list[Tutorial]:
        result = await self._session.execute(
            select(Tutorial).order_by(Tutorial.order, Tutorial.created_at.desc())
        )
        return list(result.scalars().all())

    async def create(self, data: TutorialRequest) -> Tutorial:
        tutorial = Tutorial(**data.model_dump())
        self._session.add(tutorial)
        await self._session.flush()
        logger.info("Created tutorial %s", tutorial.id)
        return tutorial

    async def update(self, tutorial_id: UUID, data: TutorialUpdateRequest) -> Tutorial:
        tutorial = await self.get(tutorial_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(tutorial, field, value)
        await self._session.flush()
        return tutorial

    async def delete(self, tutorial_id: UUID) -> None:
        tutorial = await self.get(tutorial_id)
        await self._session.delete(tutorial)
        await self._session.flush()
        logger.info("Deleted tutorial %s", tutorial_id)
