"""Authentication request, response and token schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from app.configs.settings import MAX_BIO_LENGTH, MAX_NAME_LENGTH, MIN_PASSWORD_LENGTH
from app.schemas.common import NormalizedEmail, SuccessResponse
from app.schemas.user import UserResponse


class TokenData(BaseModel):
    """Identity claims extracted from a verified access token."""

    model_config = ConfigDict(frozen=True)

    email: str
    user_id: UUID
    role: str
    jti: str
    token_type: str = "access"
    expires_at: datetime | None = None


class SignupRequest(BaseModel):
    """Public signup payload. The role is never taken from the client."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description="Display name",
        examples=["Alice"],
    )
    email: NormalizedEmail = Field(..., description="Email address", examples=["alice@example.com"])
    password: SecretStr = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        description=f"Password, at least {MIN_PASSWORD_LENGTH} characters",
        examples=["secret1"],
    )
    bio: str | None = Field(default=None, max_length=MAX_BIO_LENGTH, description="Short bio")


class LoginRequest(BaseModel):
    """Login payload."""

    email: NormalizedEmail = Field(..., description="Email address", examples=["alice@example.com"])
    password: SecretStr = Field(..., min_length=1, description="Password")


class AuthResponse(SuccessResponse):
    """Session payload returned by signup and login."""

    token: str = Field(..., description="Bearer token, also set as an HTTP-only cookie")
    user: UserResponse
