import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
from itertools import count

# Must be set before the app (and its settings) are imported.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("LOCAL_STORAGE_PATH", "./test-uploads")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.adapters.clock import FixedClock
from app.api.deps import get_clock
from app.api.middleware.auth import create_access_token, hash_password
from app.database import get_session
from app.domain.models import Base, Book, Genre, Review, Shelf, User
from app.main import app

TEST_DATABASE_URL = os.environ["DATABASE_URL"]
BASE = "http://test"

engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
TestSessionFactory = async_sessionmaker(engine, expire_on_commit=False)


async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


app.dependency_overrides[get_session] = override_get_session


@pytest.fixture(autouse=True)
async def setup_db():
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def session() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as s:
        yield s


class Factory:
    """Inserts rows directly, with deterministic creation order."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._seq = count()
        self._epoch = datetime(2024, 1, 1)

    def _tick(self) -> datetime:
        return self._epoch + timedelta(seconds=next(self._seq))

    async def _save(self, obj):
        self._session.add(obj)
        await self._session.commit()
        return obj

    async def user(self, name: str = "Reader", role: str = "User") -> User:
        n = next(self._seq)
        return await self._save(
            User(
                name=name,
                email=f"{name.lower()}{n}@example.com",
                hashed_password=hash_password("password123"),
                role=role,
            )
        )

    async def genre(self, name: str) -> Genre:
        return await self._save(Genre(name=name))

    async def book(self, genre: Genre, title: str = "Book") -> Book:
        return await self._save(
            Book(
                title=title,
                author="Author",
                genre_id=genre.id,
                description="A book.",
                cover_image="/uploads/cover.jpg",
                created_at=self._tick(),
            )
        )

    async def shelf(
        self,
        user: User,
        book: Book,
        shelf_type: str = "read",
        updated_at: datetime | None = None,
        pages_read: int = 0,
        total_pages: int = 0,
    ) -> Shelf:
        created = self._tick()
        return await self._save(
            Shelf(
                user_id=user.id,
                book_id=book.id,
                shelf_type=shelf_type,
                pages_read=pages_read,
                total_pages=total_pages,
                created_at=created,
                updated_at=updated_at or created,
            )
        )

    async def review(
        self, user: User, book: Book, rating: int, status: str = "Approved"
    ) -> Review:
        return await self._save(
            Review(
                user_id=user.id,
                book_id=book.id,
                rating=rating,
                comment="Thoughts.",
                status=status,
                created_at=self._tick(),
            )
        )


@pytest.fixture
async def factory(session: AsyncSession) -> Factory:
    return Factory(session)


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE) as c:
        yield c


@pytest.fixture
async def reader(factory: Factory) -> User:
    return await factory.user("Reader")


@pytest.fixture
async def admin(factory: Factory) -> User:
    return await factory.user("Admin", role="Admin")


@pytest.fixture
async def user_client(client: AsyncClient, reader: User) -> AsyncClient:
    client.headers.update(bearer(reader))
    return client


@pytest.fixture
async def admin_client(admin: User) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE, headers=bearer(admin)) as c:
        yield c


@pytest.fixture
def pin_clock():
    """Pin the statistics clock; returns a setter taking an aware datetime."""

    def _pin(instant: datetime) -> None:
        app.dependency_overrides[get_clock] = lambda: FixedClock(instant)

    yield _pin
    app.dependency_overrides.pop(get_clock, None)
