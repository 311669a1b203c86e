"""Registration, login and admin user management routes."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_storage
from app.api.middleware.auth import get_current_user, require_admin
from app.api.schemas import (
    LoginRequest,
    ReadingGoalRequest,
    RoleUpdateRequest,
    TokenResponse,
    UserResponse,
    UsersResponse,
)
from app.api.uploads import read_image, staged_image
from app.database import get_session
from app.domain.models import User
from app.ports.storage import StoragePort
from app.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    name: str = Form(..., min_length=1, max_length=200),
    email: EmailStr = Form(...),
    password: str = Form(..., min_length=6),
    photo: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(get_session),
    storage: StoragePort = Depends(get_storage),
) -> User:
    """Create an account; the profile photo is optional."""
    image = await read_image(photo) if photo is not None else None
    service = AuthService(session)
    await service.ensure_email_available(email)

    async with staged_image(storage, image) as photo_url:
        user = await service.register(name, email, password, photo_url)
        await session.commit()
    return user


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> TokenResponse:
    token, user = await AuthService(session).login(data.email, data.password)
    return TokenResponse(token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> User:
    return user


@router.put("/reading-goal", response_model=UserResponse)
async def set_reading_goal(
    data: ReadingGoalRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
) -> User:
    return await AuthService(session).set_reading_goal(user, data.year, data.target)


@router.get("/users", response_model=UsersResponse)
async def list_users(
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> UsersResponse:
    users = await AuthService(session).list_users()
    return UsersResponse(users=[UserResponse.model_validate(u) for u in users])


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: UUID,
    data: RoleUpdateRequest,
    session: AsyncSession = Depends(get_session),
    _admin: User = Depends(require_admin),
) -> User:
    return await AuthService(session).update_role(user_id, data.role)
