"""Response envelope and field types shared by every endpoint."""

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, EmailStr, Field


def normalize_email(value: object) -> object:
    """Trim and lower-case an email before format validation."""
    return value.strip().lower() if isinstance(value, str) else value


NormalizedEmail = Annotated[EmailStr, BeforeValidator(normalize_email)]


class SuccessResponse(BaseModel):
    """Envelope ``{success, msg?}`` that successful payloads extend."""

    success: bool = Field(default=True, description="Whether the request succeeded")
    msg: str | None = Field(default=None, description="Human readable outcome")
