"""Pydantic request/response schemas."""

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

ShelfType = Literal["wantToRead", "currentlyReading", "read"]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ── Auth & Users ───────────────────────────────────


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserResponse(ORMModel):
    id: UUID
    name: str
    email: str
    photo: str
    role: str
    reading_goal_year: int
    reading_goal_target: int
    created_at: datetime


class TokenResponse(BaseModel):
    token: str
    user: UserResponse


class UsersResponse(BaseModel):
    users: list[UserResponse]


class RoleUpdateRequest(BaseModel):
    role: str


class ReadingGoalRequest(BaseModel):
    year: int = Field(ge=1900, le=9999)
    target: int = Field(ge=0)


# ── Genres ─────────────────────────────────────────


class GenreRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class GenreResponse(ORMModel):
    id: UUID
    name: str


class GenresResponse(BaseModel):
    genres: list[GenreResponse]


# ── Books ──────────────────────────────────────────


class BookResponse(ORMModel):
    id: UUID
    title: str
    author: str
    genre: GenreResponse
    description: str
    cover_image: str
    average_rating: float
    total_reviews: int
    created_at: datetime


class BooksResponse(BaseModel):
    books: list[BookResponse]


class GenreCount(BaseModel):
    name: str
    value: int


class AdminStatsResponse(BaseModel):
    totalBooks: int
    totalUsers: int
    booksPerGenre: list[GenreCount]


class RecommendationItem(ORMModel):
    id: UUID
    title: str
    author: str
    genre: str
    cover_image: str
    avg_rating: float
    shelved_count: int
    score: float
    reason: str


class RecommendationsResponse(BaseModel):
    recommendations: list[RecommendationItem]


# ── Shelves ────────────────────────────────────────


class ShelfRequest(BaseModel):
    book_id: UUID
    shelf_type: ShelfType


class ProgressRequest(BaseModel):
    pages_read: int = Field(ge=0)
    total_pages: Optional[int] = Field(default=None, ge=0)


class ShelfResponse(ORMModel):
    id: UUID
    book: BookResponse
    shelf_type: ShelfType
    pages_read: int
    total_pages: int
    created_at: datetime
    updated_at: datetime


class ShelvesResponse(BaseModel):
    shelves: list[ShelfResponse]


class FavoriteGenre(BaseModel):
    name: str
    count: int


class MonthlyCount(BaseModel):
    month: str
    count: int


class PagesPoint(BaseModel):
    date: str
    pages: int


class StatsResponse(ORMModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    books_this_year: int = Field(alias="booksThisYear")
    total_pages: int = Field(alias="totalPages")
    avg_rating: float = Field(alias="avgRating")
    total_books_read: int = Field(alias="totalBooksRead")
    favorite_genres: list[FavoriteGenre] = Field(alias="favoriteGenres")
    reading_streak: int = Field(alias="readingStreak")
    monthly_books: list[MonthlyCount] = Field(alias="monthlyBooks")
    pages_over_time: list[PagesPoint] = Field(alias="pagesOverTime")


# ── Reviews ────────────────────────────────────────


class ReviewCreateRequest(BaseModel):
    book_id: UUID
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1, max_length=5000)


class ReviewerSummary(ORMModel):
    id: UUID
    name: str
    photo: str


class ReviewedBookSummary(ORMModel):
    id: UUID
    title: str
    cover_image: str


class ReviewResponse(ORMModel):
    id: UUID
    rating: int
    comment: str
    status: str
    created_at: datetime
    user: ReviewerSummary
    book: ReviewedBookSummary


class ReviewsResponse(BaseModel):
    reviews: list[ReviewResponse]


# ── Tutorials ──────────────────────────────────────


class TutorialRequest(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    youtube_url: str = Field(min_length=1, max_length=1000)
    description: Optional[str] = None
    order: int = 0


class TutorialUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    youtube_url: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    description: Optional[str] = None
    order: Optional[int] = None

    @field_validator("title", "youtube_url", "order")
    @classmethod
    def not_null(cls, value):
        # Omit a field to leave it unchanged; only the description can be cleared.
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class TutorialResponse(ORMModel):
    id: UUID
    title: str
    youtube_url: str
    description: Optional[str]
    order: int
    created_at: datetime


class TutorialsResponse(BaseModel):
    tutorials: list[TutorialResponse]


# ── Generic ────────────────────────────────────────


class MessageResponse(BaseModel):
    message: str
