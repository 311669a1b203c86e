"""Initial schema.

Revision ID: 001
Revises:
Create Date: 2025-01-01 00:00:00.000000
"""

import sqlalchemy as sa

from alembic import op

revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("photo", sa.String(1000), nullable=False),
        sa.Column(
            "role",
            sa.Enum("User", "Admin", name="user_role_enum"),
            nullable=False,
            server_default="User",
        ),
        sa.Column("reading_goal_year", sa.Integer, nullable=False),
        sa.Column("reading_goal_target", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )

    # Genres
    op.create_table(
        "genres",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )

    # Books
    op.create_table(
        "books",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.String(500), nullable=False, index=True),
        sa.Column("author", sa.String(300), nullable=False, index=True),
        sa.Column("genre_id", sa.Uuid, sa.ForeignKey("genres.id"), nullable=False, index=True),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("cover_image", sa.String(1000), nullable=False),
        sa.Column("average_rating", sa.Float, nullable=False, server_default="0"),
        sa.Column("total_reviews", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )

    # Shelves: one entry per user per book
    op.create_table(
        "shelves",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "book_id",
            sa.Uuid,
            sa.ForeignKey("books.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "shelf_type",
            sa.Enum("wantToRead", "currentlyReading", "read", name="shelf_type_enum"),
            nullable=False,
        ),
        sa.Column("pages_read", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_pages", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "book_id", name="uq_shelf_user_book"),
        sa.CheckConstraint("pages_read >= 0", name="ck_shelf_pages_read"),
        sa.CheckConstraint("total_pages >= 0", name="ck_shelf_total_pages"),
    )
    # Streak and time-series queries walk a user's shelves by activity date
    op.create_index("ix_shelves_user_updated", "shelves", ["user_id", "updated_at"])

    # Reviews
    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "book_id",
            sa.Uuid,
            sa.ForeignKey("books.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=False),
        sa.Column(
            "status",
            sa.Enum("Pending", "Approved", name="review_status_enum"),
            nullable=False,
            server_default="Pending",
        ),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "book_id", name="uq_review_user_book"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating"),
    )

    # Tutorials
    op.create_table(
        "tutorials",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("youtube_url", sa.String(1000), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("tutorials")
    op.drop_table("reviews")
    op.execute("DROP TYPE IF EXISTS review_status_enum")
    op.drop_index("ix_shelves_user_updated", table_name="shelves")
    op.drop_table("shelves")
    op.execute("DROP TYPE IF EXISTS shelf_type_enum")
    op.drop_table("books")
    op.drop_table("genres")
    op.drop_table("users")
    op.execute("DROP TYPE IF EXISTS user_role_enum")
