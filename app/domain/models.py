"""SQLAlchemy ORM models."""

import uuid
from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship

DEFAULT_AVATAR = "uploads/default-avatar.jpg"

ROLES = ("User", "Admin")
SHELF_TYPES = ("wantToRead", "currentlyReading", "read")
REVIEW_STATUSES = ("Pending", "Approved")


def _current_year() -> int:
    return datetime.utcnow().year


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    photo = Column(String(1000), nullable=False, default=DEFAULT_AVATAR)
    role = Column(Enum(*ROLES, name="user_role_enum"), nullable=False, default="User")
    reading_goal_year = Column(Integer, nullable=False, default=_current_year)
    reading_goal_target = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    shelves = relationship("Shelf", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "Admin"


class Genre(Base):
    __tablename__ = "genres"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    books = relationship("Book", back_populates="genre", passive_deletes=True)


class Book(Base):
    __tablename__ = "books"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(500), nullable=False, index=True)
    author = Column(String(300), nullable=False, index=True)
    genre_id = Column(Uuid, ForeignKey("genres.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    cover_image = Column(String(1000), nullable=False)
    average_rating = Column(Float, nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    genre = relationship("Genre", back_populates="books", lazy="joined")
    shelves = relationship("Shelf", back_populates="book", cascade="all, delete-orphan", passive_deletes=True)
    reviews = relationship("Review", back_populates="book", cascade="all, delete-orphan", passive_deletes=True)


class Shelf(Base):
    __tablename__ = "shelves"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_shelf_user_book"),
        Index("ix_shelves_user_updated", "user_id", "updated_at"),
        CheckConstraint("pages_read >= 0", name="ck_shelf_pages_read"),
        CheckConstraint("total_pages >= 0", name="ck_shelf_total_pages"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Uuid, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    shelf_type = Column(Enum(*SHELF_TYPES, name="shelf_type_enum"), nullable=False)
    pages_read = Column(Integer, nullable=False, default=0)
    total_pages = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="shelves")
    book = relationship("Book", back_populates="shelves", lazy="joined")


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_review_user_book"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Uuid, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    status = Column(
        Enum(*REVIEW_STATUSES, name="review_status_enum"),
        nullable=False,
        default="Pending",
    )
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="reviews", lazy="joined")
    book = relationship("Book", back_populates="reviews", lazy="joined")


class Tutorial(Base):
    __tablename__ = "tutorials"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(300), nullable=False)
    youtube_url = Column(String(1000), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
