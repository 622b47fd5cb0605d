"""User database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from app.configs.settings import MAX_BIO_LENGTH, MAX_NAME_LENGTH


class UserDB(SQLModel, table=True):
    """
    User database model for PostgreSQL.

    An account of the marketplace. ``role`` drives every authorization
    decision and ``suspended`` blocks login and token use. Seller statistics
    (``earnings``, ``total_sales``) are credited when one of the account's
    posts is purchased.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )

    # Required fields
    name: str = Field(
        sa_column=Column(String(MAX_NAME_LENGTH), nullable=False),
        description="Display name",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique, stored lower-cased)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Argon2 password digest",
    )

    # Optional profile fields
    bio: str | None = Field(
        default=None,
        sa_column=Column(String(MAX_BIO_LENGTH)),
        description=f"User bio (max {MAX_BIO_LENGTH} chars)",
    )
    profile_picture_url: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Profile picture URL",
    )
    profile_picture_public_id: str | None = Field(
        default=None,
        sa_column=Column(String(255)),
        description="Storage identifier of the profile picture",
    )

    # Role-based access control
    role: str = Field(
        default="user",
        sa_column=Column(String(20), nullable=False, server_default="user", index=True),
        description="User role (user, manager, admin)",
    )
    suspended: bool = Field(
        default=False,
        nullable=False,
        description="Whether the account is suspended",
    )

    # Seller statistics
    earnings: float = Field(
        default=0.0,
        nullable=False,
        description="Total earned from sales of the user's posts",
    )
    total_sales: int = Field(
        default=0,
        nullable=False,
        description="Number of purchases of the user's posts",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC).replace(microsecond=0),
        sa_column=Column(DateTime(timezone=True), nullable=False),
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
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "name": "Alice",
                "email": "alice@example.com",
                "role": "user",
                "suspended": False,
            },
        },
    )
