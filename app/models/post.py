"""Post, comment, purchase, saved-post and rating models using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import CheckConstraint, DateTime, Index, SmallInteger, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from app.configs.settings import MAX_COMMENT_LENGTH, MAX_TITLE_LENGTH


def _now() -> datetime:
    return datetime.now(tz=UTC).replace(microsecond=0)


class PostDB(SQLModel, table=True):
    """
    Post database model for PostgreSQL.

    A post is one image offered on the marketplace, free when ``price`` is 0.
    Deleting the author cascades to the author's posts.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_tags_gin", "tags", postgresql_using="gin"),
        Index("ix_posts_category_created", "category", "created_at"),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )

    # Foreign key to User
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )

    title: str = Field(
        sa_column=Column(String(MAX_TITLE_LENGTH), nullable=False),
        description="Post title",
    )
    price: float = Field(
        default=0.0,
        nullable=False,
        description="Price, 0 for free posts",
    )
    category: str | None = Field(
        default=None,
        sa_column=Column(String(50), index=True),
        description="Post category",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONB, nullable=False),
        description="Post tags",
    )
    image_url: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Stored image URL",
    )
    image_public_id: str | None = Field(
        default=None,
        sa_column=Column(String(255)),
        description="Storage identifier of the image",
    )
    likes: int = Field(
        default=0,
        nullable=False,
        description="Like counter",
    )
    approved: bool = Field(
        default=False,
        nullable=False,
        description="Whether a manager approved the post",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Sunset over the bay",
                "price": 4.99,
                "category": "nature",
                "tags": ["sunset", "sea"],
                "likes": 0,
            },
        },
    )


class CommentDB(SQLModel, table=True):
    """Comment left on a post."""

    __tablename__ = cast("declared_attr[str]", "post_comments")

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    post_id: UUID = Field(
        sa_column=Column(ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    user_id: UUID = Field(
        sa_column=Column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    text: str = Field(sa_column=Column(String(MAX_COMMENT_LENGTH), nullable=False))
    created_at: datetime = Field(
        default_factory=_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class PurchaseDB(SQLModel, table=True):
    """Record of an account buying a paid post."""

    __tablename__ = cast("declared_attr[str]", "purchases")

    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_purchases_user_post"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    user_id: UUID = Field(
        sa_column=Column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    post_id: UUID = Field(
        sa_column=Column(ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    price_paid: float = Field(nullable=False)
    purchased_at: datetime = Field(
        default_factory=_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class SavedPostDB(SQLModel, table=True):
    """Link between an account and a post it saved."""

    __tablename__ = cast("declared_attr[str]", "saved_posts")

    user_id: UUID = Field(
        sa_column=Column(
            ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
            nullable=False,
        ),
    )
    post_id: UUID = Field(
        sa_column=Column(
            ForeignKey("posts.id", ondelete="CASCADE"),
            primary_key=True,
            nullable=False,
        ),
    )
    saved_at: datetime = Field(
        default_factory=_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


class RatingDB(SQLModel, table=True):
    """
    Star rating (1 to 5) an account gave a post.

    One row per account and post; rating again replaces the value.
    """

    __tablename__ = cast("declared_attr[str]", "post_ratings")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_post_ratings_user_post"),
        CheckConstraint("value BETWEEN 1 AND 5", name="ck_post_ratings_value_range"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True, nullable=False)
    user_id: UUID = Field(
        sa_column=Column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    post_id: UUID = Field(
        sa_column=Column(ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    value: int = Field(sa_column=Column(SmallInteger, nullable=False))
    created_at: datetime = Field(
        default_factory=_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
    )
