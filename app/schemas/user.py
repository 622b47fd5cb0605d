"""
Account schemas.

Responses are built from ``UserDB`` rows through ``from_attributes`` and
never carry the password hash.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from app.configs.settings import MAX_BIO_LENGTH, MAX_NAME_LENGTH, MIN_PASSWORD_LENGTH
from app.schemas.common import NormalizedEmail, SuccessResponse


class UserResponse(BaseModel):
    """User response model (without sensitive information)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    role: str
    bio: str | None = None
    suspended: bool = False
    profile_picture_url: str | None = None
    earnings: float = 0.0
    total_sales: int = 0
    created_at: datetime | None = None


class UserUpdate(BaseModel):
    """Self-service profile changes. Omitted fields are left untouched."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    email: NormalizedEmail | None = Field(default=None, description="New email address")
    password: SecretStr | None = Field(
        default=None,
        min_length=MIN_PASSWORD_LENGTH,
        description="New password, re-hashed only when supplied",
    )
    bio: str | None = Field(default=None, max_length=MAX_BIO_LENGTH)


class UserRoleUpdate(BaseModel):
    """Request schema for updating a user's role (validated by the service)."""

    role: str = Field(..., description="New role (user, manager, admin)", examples=["manager"])


class UserStatusUpdate(BaseModel):
    """Request schema for suspending or re-activating an account."""

    suspended: bool = Field(..., description="True to suspend, False to re-activate")


class UserEnvelope(SuccessResponse):
    user: UserResponse


class UserListResponse(SuccessResponse):
    """Paginated list of users."""

    users: list[UserResponse] = Field(..., description="List of users")
    count: int = Field(..., description="Number of users in this page")
    total: int = Field(..., description="Total number of users in database")
    skip: int = Field(..., description="Number of records skipped")
    limit: int = Field(..., description="Maximum number of records returned")
