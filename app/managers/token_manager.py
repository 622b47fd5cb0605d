"""Token manager for handling JWT access tokens with enhanced security claims."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from app.configs import settings
from app.errors import InvalidTokenError
from app.schemas.auth import TokenData

ACCESS_TOKEN_TYPE = "access"


def access_token_ttl() -> timedelta:
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_access_token(
    user_id: UUID,
    email: str,
    role: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a new access token bound to an account.

    The token embeds the account id, its email and its role at issuance
    time, and expires after ``ACCESS_TOKEN_EXPIRE_MINUTES`` unless
    ``expires_delta`` says otherwise.

    Args:
        user_id: Account UUID
        email: Account email
        role: Account role at issuance
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT access token
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta if expires_delta is not None else access_token_ttl())

    to_encode = {
        "sub": email,
        "user_id": str(user_id),
        "role": role,
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": ACCESS_TOKEN_TYPE,
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str) -> TokenData:
    """
    Decode and validate an access token.

    Signature, expiry, issuer, audience, token type and the presence of every
    identity claim are all checked; any failure rejects the whole token.

    Args:
        token: JWT token string

    Returns:
        TokenData: Decoded identity claims

    Raises:
        InvalidTokenError: If any check fails
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        raise InvalidTokenError from e

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError

    try:
        return TokenData(
            email=payload["sub"],
            user_id=UUID(payload["user_id"]),
            role=payload["role"],
            jti=payload["jti"],
            token_type=payload["type"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=UTC),
        )
    except (KeyError, ValueError, TypeError, PydanticValidationError) as e:
        raise InvalidTokenError from e

