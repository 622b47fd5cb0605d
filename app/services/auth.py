"""Authentication service: registration, login, sessions and caller resolution."""

from fastapi import Response

from app.configs import settings
from app.errors import (
    AccountSuspendedError,
    DuplicateIdentityError,
    InvalidCredentialsError,
    UnauthenticatedError,
    UnknownAccountError,
)
from app.managers.password_manager import (
    dummy_verify_password,
    hash_password,
    password_needs_rehash,
    verify_password,
)
from app.managers.token_manager import access_token_ttl, create_access_token, decode_access_token
from app.models import UserDB
from app.monitoring import get_logger
from app.rabc import Role
from app.repositories import UserRepository
from app.schemas.auth import SignupRequest

logger = get_logger(__name__)


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, user_repo: UserRepository) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    async def register(self, data: SignupRequest, role: str = Role.USER) -> UserDB:
        """
        Create a new account.

        Public signup always uses the default ``user`` role; only the admin
        bootstrap script passes another one.

        Args:
            data: Validated signup payload (email already normalized)
            role: Role of the new account

        Returns:
            UserDB: The created account

        Raises:
            DuplicateIdentityError: If the email is already registered
        """
        if await self.user_repo.get_by_email(data.email):
            raise DuplicateIdentityError

        password_hash = await hash_password(data.password.get_secret_value())
        user = await self.user_repo.create(
            name=data.name,
            email=data.email,
            password_hash=password_hash,
            role=str(role),
            bio=data.bio,
        )
        logger.info("Account registered", user_id=str(user.id), role=user.role)
        return user

    async def authenticate(self, email: str, password: str) -> tuple[str, UserDB]:
        """
        Check credentials and mint an access token.

        Unknown email and wrong password fail identically. Suspension is only
        reported once the password matched, so it never reveals whether an
        email is registered.

        Args:
            email: Normalized email
            password: Plaintext password

        Returns:
            tuple[str, UserDB]: Access token and the account

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
            AccountSuspendedError: If the account is suspended
        """
        user = await self.user_repo.get_by_email(email)
        if user is None:
            await dummy_verify_password()
            logger.info("Login rejected", reason="unknown_email")
            raise InvalidCredentialsError

        if not await verify_password(password, user.password_hash):
            logger.info("Login rejected", reason="wrong_password", user_id=str(user.id))
            raise InvalidCredentialsError

        if user.suspended:
            logger.info("Login rejected", reason="suspended", user_id=str(user.id))
            raise AccountSuspendedError

        if password_needs_rehash(user.password_hash):
            user = await self.user_repo.update(user, {"password_hash": await hash_password(password)})
            logger.info("Password digest upgraded", user_id=str(user.id))

        return self.create_token_for_user(user), user

    @staticmethod
    def create_token_for_user(user: UserDB) -> str:
        return create_access_token(user_id=user.id, email=user.email, role=user.role)

    @staticmethod
    def issue_session(response: Response, token: str) -> None:
        """
        Set the session cookie carrying ``token``.

        HTTP-only and ``SameSite=strict``; ``secure`` only in production so
        local development works over plain HTTP.
        """
        response.set_cookie(
            key=settings.AUTH_COOKIE_NAME,
            value=token,
            max_age=int(access_token_ttl().total_seconds()),
            httponly=True,
            secure=settings.is_production,
            samesite="strict",
        )

    @staticmethod
    def end_session(response: Response) -> None:
        """
        Clear the session cookie.

        Bearer tokens already handed out stay valid until they expire, there
        is no server-side revocation list.
        """
        response.delete_cookie(
            key=settings.AUTH_COOKIE_NAME,
            httponly=True,
            secure=settings.is_production,
            samesite="strict",
        )

    async def resolve_caller(
        self,
        cookie_token: str | None,
        bearer_token: str | None,
    ) -> UserDB:
        """
        Resolve the account behind a request's credential.

        The cookie wins over the ``Authorization: Bearer`` header. Each
        rejection kind has its own error type so it can be logged apart.

        Raises:
            UnauthenticatedError: If no credential was sent
            InvalidTokenError: If the token fails verification
            UnknownAccountError: If the token's account no longer exists
            AccountSuspendedError: If the account is suspended
        """
        token = cookie_token or bearer_token
        if not token:
            raise UnauthenticatedError

        token_data = decode_access_token(token)

        user = await self.user_repo.get_by_id(token_data.user_id)
        if user is None:
            raise UnknownAccountError

        if user.suspended:
            raise AccountSuspendedError

        return user
