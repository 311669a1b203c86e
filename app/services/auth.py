"""Authentication and user lifecycle service."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.middleware.auth import create_access_token, hash_password, verify_password
from app.domain.models import DEFAULT_AVATAR, ROLES, User

logger = logging.getLogger(__name__)


class AuthService:
    """Handles user registration, authentication and admin user management."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def ensure_email_available(self, email: str) -> None:
        existing = await self._session.execute(
            select(User.id).where(User.email == email.strip().lower())
        )
        if existing.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User already exists",
            )

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        photo: Optional[str] = None,
    ) -> User:
        """Register a new user. Raises 409 if the email is taken."""
        email = email.strip().lower()
        await self.ensure_email_available(email)

        user = User(
            name=name.strip(),
            email=email,
            hashed_password=hash_password(password),
            photo=photo or DEFAULT_AVATAR,
        )
        self._session.add(user)
        await self._session.flush()
        logger.info("Registered user %s", user.id)
        return user

    async def login(self, email: str, password: str) -> tuple[str, User]:
        """Authenticate a user and return a JWT access token with the user."""
        result = await self._session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        user = result.scalar_one_or_none()

        if not user or not verify_password(password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )

        return create_access_token(user.id), user

    async def list_users(self) -> list[User]:
        result = await self._session.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())

    async def update_role(self, user_id: UUID, role: str) -> User:
        if role not in ROLES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid role",
            )
        user = await self._session.get(User, user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        user.role = role
        await self._session.flush()
        logger.info("User %s role set to %s", user_id, role)
        return user

    async def set_reading_goal(self, user: User, year: int, target: int) -> User:
        user.reading_goal_year = year
        user.reading_goal_target = target
        await self._session.flush()
        return user
