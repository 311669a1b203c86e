"""Shelf, reading progress and reading statistics routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock
from app.api.middleware.auth import get_current_user
from app.api.schemas import (
    MessageResponse,
    ProgressRequest,
    ShelfRequest,
    ShelfResponse,
    ShelvesResponse,
    StatsResponse,
)
from app.database import get_session
from app.domain.models import Shelf, User
from app.ports.clock import ClockPort
from app.services.shelf import ShelfService
from app.services.stats import StatsService

router = APIRouter(prefix="/api/shelves", tags=["Shelves"])


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    session: AsyncSession = Depends(get_session),
    clock: ClockPort = Depends(get_clock),
    user: User = Depends(get_current_user),
) -> StatsResponse:
    """Year-to-date counts, genre breakdown, reading streak and chart series."""
    stats = await StatsService(session, clock).user_statistics(user.id)
    return StatsResponse.model_validate(stats)


@router.post("", response_model=ShelfResponse)
async def add_to_shelf(
    data: ShelfRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> Shelf:
    shelf, created = await ShelfService(session).add_or_move(
        user.id, data.book_id, data.shelf_type
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return shelf


@router.get("", response_model=ShelvesResponse)
async def list_shelves(
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> ShelvesResponse:
    shelves = await ShelfService(session).list_for_user(user.id)
    return ShelvesResponse(shelves=[ShelfResponse.model_validate(s) for s in shelves])


@router.put("/{shelf_id}/progress", response_model=ShelfResponse)
async def update_progress(
    shelf_id: UUID,
    data: ProgressRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> Shelf:
    return await ShelfService(session).update_progress(
        shelf_id, user.id, data.pages_read, data.total_pages
    )


@router.delete("/{shelf_id}", response_model=MessageResponse)
async def remove_from_shelf(
    shelf_id: UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    await ShelfService(session).remove(shelf_id, user.id)
    return MessageResponse(message="Book removed from shelf")
