"""Genre routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.middleware.auth import require_admin
from app.api.schemas import GenreRequest, GenreResponse, GenresResponse, MessageResponse
from app.database import get_session
from app.domain.models import Genre, User
from app.services.genre import GenreService

router = APIRouter(prefix="/api/genres", tags=["Genres"])


@router.post("", response_model=GenreResponse, status_code=status.HTTP_201_CREATED)
async def create_genre(
    data: GenreRequest,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> Genre:
    return await GenreService(session).create(data.name)


@router.get("", response_model=GenresResponse)
async def list_genres(session: AsyncSession = Depends(get_session)) -> GenresResponse:
    genres = await GenreService(session).list_all()
    return GenresResponse(genres=[GenreResponse.model_validate(g) for g in genres])


@router.put("/{genre_id}", response_model=GenreResponse)
async def update_genre(
    genre_id: UUID,
    data: GenreRequest,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> Genre:
    return await GenreService(session).update(genre_id, data.name)


@router.delete("/{genre_id}", response_model=MessageResponse)
async def delete_genre(
    genre_id: UUID,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> MessageResponse:
    await GenreService(session).delete(genre_id)
    return MessageResponse(message="Genre deleted successfully")
