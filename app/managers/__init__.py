from app.managers.password_manager import (
    PasswordHasher,
    dummy_verify_password,
    get_password_hasher,
    hash_password,
    verify_password,
)
from app.managers.rate_limiter import (
    LOGIN_RATE_LIMIT,
    SIGNUP_RATE_LIMIT,
    limiter,
    rate_limit_exceeded_handler,
)
from app.managers.token_manager import create_access_token, decode_access_token

__all__ = [
    "LOGIN_RATE_LIMIT",
    "SIGNUP_RATE_LIMIT",
    "PasswordHasher",
    "create_access_token",
    "decode_access_token",
    "dummy_verify_password",
    "get_password_hasher",
    "hash_password",
    "limiter",
    "rate_limit_exceeded_handler",
    "verify_password",
]
