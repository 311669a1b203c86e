"""Book catalog, recommendation and admin statistics routes."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_recommender, get_storage
from app.api.middleware.auth import get_current_user, require_admin
from app.api.schemas import (
    AdminStatsResponse,
    BookResponse,
    BooksResponse,
    MessageResponse,
    RecommendationItem,
    RecommendationsResponse,
)
from app.api.uploads import read_image, staged_image
from app.database import get_session
from app.domain.models import Book, User
from app.ports.recommender import RecommenderPort
from app.ports.storage import StoragePort
from app.services.book import BookService

router = APIRouter(prefix="/api/books", tags=["Books"])


@router.get("/recommendations", response_model=RecommendationsResponse)
async def get_recommendations(
    recommender: RecommenderPort = Depends(get_recommender),
    user: User = Depends(get_current_user),
) -> RecommendationsResponse:
    """Genre-affinity suggestions for the current user, topped up with popular books."""
    results = await recommender.recommend(user.id)
    return RecommendationsResponse(
        recommendations=[RecommendationItem.model_validate(rec) for rec in results]
    )


@router.get("/admin-stats", response_model=AdminStatsResponse)
async def get_admin_stats(
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> dict:
    return await BookService(session).admin_stats()


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    title: str = Form(..., min_length=1, max_length=500),
    author: str = Form(..., min_length=1, max_length=300),
    genre: UUID = Form(...),
    description: str = Form(..., min_length=1),
    cover_image: UploadFile = File(...),
    session: AsyncSession = Depends(get_session),
    storage: StoragePort = Depends(get_storage),
    _admin: User = Depends(require_admin),
) -> Book:
    image = await read_image(cover_image)
    service = BookService(session)
    await service.require_genre(genre)

    async with staged_image(storage, image) as cover_url:
        book = await service.create(title, author, genre, description, cover_url)
        await session.commit()
    return book


@router.get("", response_model=BooksResponse)
async def list_books(session: AsyncSession = Depends(get_session)) -> BooksResponse:
    books = await BookService(session).list_all()
    return BooksResponse(books=[BookResponse.model_validate(b) for b in books])


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(
    book_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> Book:
    return await BookService(session).get(book_id)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: UUID,
    title: Optional[str] = Form(None, min_length=1, max_length=500),
    author: Optional[str] = Form(None, min_length=1, max_length=300),
    genre: Optional[UUID] = Form(None),
    description: Optional[str] = Form(None, min_length=1),
    cover_image: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(get_session),
    storage: StoragePort = Depends(get_storage),
    _admin: User = Depends(require_admin),
) -> Book:
    image = await read_image(cover_image) if cover_image is not None else None
    service = BookService(session)
    await service.get(book_id)
    if genre is not None:
        await service.require_genre(genre)

    async with staged_image(storage, image) as cover_url:
        book, replaced = await service.update(
            book_id,
            title=title,
            author=author,
            genre_id=genre,
            description=description,
            cover_image=cover_url,
        )
        await session.commit()

    # The old cover goes only once the row no longer points at it.
    if replaced:
        await storage.delete(replaced)
    return book


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(
    book_id: UUID,
    session: AsyncSession = Depends(get_session),
    storage: StoragePort = Depends(get_storage),
    _admin: User = Depends(require_admin),
) -> MessageResponse:
    cover = await BookService(session).delete(book_id)
    await session.commit()
    await storage.delete(cover)
    return MessageResponse(message="Book deleted successfully")
