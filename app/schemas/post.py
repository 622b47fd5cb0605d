"""Post, comment, purchase, rating and download schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.configs.settings import (
    MAX_COMMENT_LENGTH,
    MAX_RATING,
    MAX_TITLE_LENGTH,
    MIN_RATING,
    MIN_TITLE_LENGTH,
)
from app.schemas.common import SuccessResponse


class PostResponse(BaseModel):
    """Public view of a post."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    author_id: UUID
    title: str
    price: float
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    likes: int = 0
    approved: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PostUpdate(BaseModel):
    """Owner or admin edits. Omitted fields are left untouched."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(default=None, min_length=MIN_TITLE_LENGTH, max_length=MAX_TITLE_LENGTH)
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    category: str | None = Field(default=None, max_length=50)
    tags: list[str] | None = None

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        cleaned: list[str] = []
        for tag in v:
            tag = tag.strip().lower()
            if tag and tag not in cleaned:
                cleaned.append(tag)
        return cleaned


class PostEnvelope(SuccessResponse):
    post: PostResponse


class PostListResponse(SuccessResponse):
    """One page of posts, newest first."""

    posts: list[PostResponse]
    page: int
    limit: int
    total: int


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(..., min_length=1, max_length=MAX_COMMENT_LENGTH, description="Comment text")


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    post_id: UUID
    user_id: UUID
    text: str
    created_at: datetime


class CommentEnvelope(SuccessResponse):
    comment: CommentResponse


class CommentListResponse(SuccessResponse):
    """One page of a post's comments, oldest first."""

    comments: list[CommentResponse]
    page: int
    limit: int
    total: int


class LikeResponse(SuccessResponse):
    likes: int


class SaveResponse(SuccessResponse):
    saved: bool


class PurchaseResponse(SuccessResponse):
    post: PostResponse
    price_paid: float


class PurchasedPost(BaseModel):
    post: PostResponse
    price_paid: float
    purchased_at: datetime


class PurchaseListResponse(SuccessResponse):
    """One page of the caller's purchases, newest first."""

    purchases: list[PurchasedPost]
    page: int
    limit: int
    total: int


class RatingCreate(BaseModel):
    value: int = Field(..., ge=MIN_RATING, le=MAX_RATING, description="Stars from 1 to 5")


class RatingResponse(SuccessResponse):
    average: float
    count: int
    your_rating: int | None = None


class DownloadResponse(SuccessResponse):
    url: str | None
