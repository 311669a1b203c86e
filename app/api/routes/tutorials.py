"""Tutorial video routes: public reads, admin writes."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.middleware.auth import require_admin
from app.api.schemas import (
    MessageResponse,
    TutorialRequest,
    TutorialResponse,
    TutorialsResponse,
    TutorialUpdateRequest,
)
from app.database import get_session
from app.domain.models import Tutorial, User
from app.services.tutorial import TutorialService

router = APIRouter(prefix="/api/tutorials", tags=["Tutorials"])


@router.get("", response_model=TutorialsResponse)
async def list_tutorials(session: AsyncSession = Depends(get_session)) -> TutorialsResponse:
    tutorials = await TutorialService(session).list_all()
    return TutorialsResponse(tutorials=[TutorialResponse.model_validate(t) for t in tutorials])


@router.get("/{tutorial_id}", response_model=TutorialResponse)
async def get_tutorial(
    tutorial_id: UUID,
    session: AsyncSession = Depends(get_session),
) -> Tutorial:
    return await TutorialService(session).get(tutorial_id)


@router.post("", response_model=TutorialResponse, status_code=status.HTTP_201_CREATED)
async def create_tutorial(
    data: TutorialRequest,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> Tutorial:
    return await TutorialService(session).create(data)


@router.put("/{tutorial_id}", response_model=TutorialResponse)
async def update_tutorial(
    tutorial_id: UUID,
    data: TutorialUpdateRequest,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> Tutorial:
    return await TutorialService(session).update(tutorial_id, data)


@router.delete("/{tutorial_id}", response_model=MessageResponse)
async def delete_tutorial(
    tutorial_id: UUID,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> MessageResponse:
    await TutorialService(session).delete(tutorial_id)
    return MessageResponse(message="Tutorial deleted successfully")
