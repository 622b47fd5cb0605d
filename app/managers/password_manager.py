"""
Password hashing module using Argon2 with passlib's CryptContext.

Hashes are produced with Argon2id; pbkdf2_sha256 digests are still verified
and flagged for rehashing. Cost parameters come from
``PASSWORD_SECURITY_LEVEL`` through ``CONFIG_MAP``.
"""

from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from app.configs import CONFIG_MAP, settings
from app.errors import PasswordHashingError
from app.monitoring import get_logger

executor = ThreadPoolExecutor(max_workers=4)
logger = get_logger(__name__)


class PasswordHasher:
    """
    A secure password hashing and verification manager using Argon2id algorithm.

    This class wraps passlib's CryptContext to provide:
    - Secure password hashing with Argon2id
    - Password verification that never raises on a corrupt digest
    - Constant-work dummy verification for unknown accounts
    """

    def __init__(self, level: str | None = None) -> None:
        self.level = level or settings.PASSWORD_SECURITY_LEVEL
        config = CONFIG_MAP[self.level]
        self.pwd_context = CryptContext(
            schemes=["argon2", "pbkdf2_sha256"],
            deprecated="pbkdf2_sha256",
            argon2__memory_cost=config.memory_cost,
            argon2__time_cost=config.time_cost,
            argon2__parallelism=config.parallelism,
        )
        logger.info(f"PasswordHasher initialized with Argon2id on level {self.level}")

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password using Argon2id.

        Args:
            password: The plaintext password to hash

        Returns:
            str: The hashed password in Argon2id format

        Raises:
            ValueError: If password is empty
            PasswordHashingError: If hashing fails

        Example:
            >>> hasher = PasswordHasher()
            >>> hasher.hash("secret1")  # $argon2id$v=19$m=65536,t=2,p=2$...
        """
        if not password:
            msg = "Password cannot be empty"
            raise ValueError(msg)

        try:
            hashed_password = self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Error hashing password")
            raise PasswordHashingError("Failed to hash password") from e
        logger.debug(f"Password hashed successfully on level {self.level}")
        return hashed_password

    def verify(self, password: str, hashed_password: str | None) -> bool:
        """
        Verify a plaintext password against a hashed password.

        A missing, empty or unparsable digest verifies as ``False``.

        Example:
            >>> hasher = PasswordHasher()
            >>> hashed = hasher.hash("my_password")
            >>> hasher.verify("my_password", hashed)
            True
            >>> hasher.verify("wrong_password", hashed)
            False
        """
        if not isinstance(hashed_password, str) or not hashed_password.strip():
            logger.warning("Invalid hash format provided")
            self.pwd_context.dummy_verify()
            return False

        try:
            return self.pwd_context.verify(password, hashed_password)
        except (ValueError, TypeError, InternalBackendError):
            logger.exception("Stored hash is corrupted or invalid format")
            return False

    def dummy_verify(self) -> None:
        """Spend the same work as a real verification, for missing accounts."""
        self.pwd_context.dummy_verify()

    def needs_rehash(self, hashed_password: str) -> bool:
        return self.pwd_context.needs_update(hashed_password)


_default_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    """
    Get or create the default password hasher instance.

    Returns:
        PasswordHasher: The process-wide password hasher
    """
    global _default_hasher  # noqa: PLW0603
    if _default_hasher is None:
        _default_hasher = PasswordHasher()
    return _default_hasher


async def hash_password(password: str) -> str:
    """
    Hash a password on the worker pool using the default hasher.

    Example:
        >>> hashed = await hash_password("my_password")
    """
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().hash,
        password,
    )


async def verify_password(password: str, hashed_password: str | None) -> bool:
    """
    Verify a password on the worker pool using the default hasher.

    Example:
        >>> is_valid = await verify_password("my_password", hashed_password)
    """
    return await get_running_loop().run_in_executor(
        executor,
        get_password_hasher().verify,
        password,
        hashed_password,
    )


async def dummy_verify_password() -> None:
    await get_running_loop().run_in_executor(executor, get_password_hasher().dummy_verify)


def password_needs_rehash(hashed_password: str) -> bool:
    """Whether a verified digest uses a deprecated scheme or outdated cost."""
    return get_password_hasher().needs_rehash(hashed_password)
