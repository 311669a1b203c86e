"""Review submission and moderation routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.middleware.auth import get_current_user, require_admin
from app.api.schemas import (
    MessageResponse,
    ReviewCreateRequest,
    ReviewResponse,
    ReviewsResponse,
)
from app.database import get_session
from app.domain.models import Review, User
from app.services.review import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def _wrap(reviews: list[Review]) -> ReviewsResponse:
    return ReviewsResponse(reviews=[ReviewResponse.model_validate(r) for r in reviews])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    data: ReviewCreateRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> Review:
    return await ReviewService(session).create_review(
        data.book_id, user.id, data.rating, data.comment
    )


@router.get("/book/{book_id}", response_model=ReviewsResponse)
async def get_book_reviews(
    book_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> ReviewsResponse:
    """Approved reviews of a book; public."""
    return _wrap(await ReviewService(session).get_reviews_for_book(book_id))


@router.get("", response_model=ReviewsResponse)
async def list_reviews(
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> ReviewsResponse:
    return _wrap(await ReviewService(session).list_all())


@router.get("/pending", response_model=ReviewsResponse)
async def list_pending_reviews(
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> ReviewsResponse:
    return _wrap(await ReviewService(session).list_pending())


@router.put("/{review_id}/approve", response_model=ReviewResponse)
async def approve_review(
    review_id: UUID,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> Review:
    return await ReviewService(session).approve(review_id)


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review(
    review_id: UUID,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> MessageResponse:
    await ReviewService(session).delete(review_id)
    return MessageResponse(message="Review deleted successfully")
