"""Authentication routes: signup, login, logout and the current account."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from app.dependencies import AuthServiceDep, CurrentUserDep
from app.managers import LOGIN_RATE_LIMIT, SIGNUP_RATE_LIMIT, limiter
from app.schemas import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    SuccessResponse,
    UserEnvelope,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["🔐 Auth"])

USER_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "name": "Alice",
    "email": "alice@example.com",
    "role": "user",
    "bio": None,
    "suspended": False,
    "profile_picture_url": None,
    "earnings": 0.0,
    "total_sales": 0,
    "created_at": "2025-01-01T00:00:00",
}


@router.post(
    "/signup",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new account",
    description="Create a `user` account, set the session cookie and return the token.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "msg": "User registered successfully",
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        "user": USER_EXAMPLE,
                    },
                },
            },
        },
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {"example": {"success": False, "msg": "User already exists"}},
            },
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {
                "application/json": {
                    "example": {"success": False, "msg": "Too many requests, please try again later"},
                },
            },
        },
    },
    operation_id="auth_signup",
)
@limiter.limit(SIGNUP_RATE_LIMIT)
async def signup(
    request: Request,
    response: Response,
    payload: SignupRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Register a new account.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response the session cookie is attached to.
    payload : SignupRequest
        Name, email, password and optional bio.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    AuthResponse
        Token and the created account.

    Raises
    ------
    DuplicateIdentityError
        If the email is already registered.
    """
    user = await auth_service.register(payload)
    token = auth_service.create_token_for_user(user)
    auth_service.issue_session(response, token)
    return AuthResponse(
        msg="User registered successfully",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    summary="Log in",
    description="Check email and password, set the session cookie and return the token.",
    responses={
        401: {
            "description": "Unauthorized",
            "content": {
                "application/json": {"example": {"success": False, "msg": "Invalid credentials"}},
            },
        },
        403: {
            "description": "Suspended account",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "msg": "Your account has been suspended. Please contact support.",
                    },
                },
            },
        },
    },
    operation_id="auth_login",
)
@limiter.limit(LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Log in with email and password.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response the session cookie is attached to.
    payload : LoginRequest
        Email and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    AuthResponse
        Token and the authenticated account.

    Raises
    ------
    InvalidCredentialsError
        If the email is unknown or the password is wrong.
    AccountSuspendedError
        If the account is suspended.
    """
    token, user = await auth_service.authenticate(payload.email, payload.password.get_secret_value())
    auth_service.issue_session(response, token)
    return AuthResponse(
        msg="Login successful",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/logout",
    response_class=ORJSONResponse,
    response_model=SuccessResponse,
    summary="Log out",
    description="Clear the session cookie. Bearer tokens stay valid until they expire.",
    operation_id="auth_logout",
)
async def logout(response: Response, auth_service: AuthServiceDep) -> SuccessResponse:
    auth_service.end_session(response)
    return SuccessResponse(msg="Logged out successfully")


@router.get(
    "/me",
    response_class=ORJSONResponse,
    response_model=UserEnvelope,
    summary="Current account",
    operation_id="auth_me",
)
async def me(current_user: CurrentUserDep) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.model_validate(current_user))
