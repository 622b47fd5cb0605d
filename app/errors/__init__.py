from app.errors.auth import (
    AccountSuspendedError,
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidTokenError,
    UnauthenticatedError,
    UnknownAccountError,
    UserAuthenticationError,
    auth_exception_handler,
)
from app.errors.authorization import (
    ForbiddenError,
    InvalidRoleError,
    MisconfiguredRoleError,
    SelfDemotionForbiddenError,
    authorization_exception_handler,
)
from app.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_unhandled_exception_handler,
    error_envelope,
)
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    database_exception_handler,
)
from app.errors.password_hasher import PasswordHashingError, password_hashing_exception_handler
from app.errors.resource import (
    AlreadyPurchasedError,
    AlreadySavedError,
    FreePostError,
    NotFoundError,
    PurchaseRequiredError,
    resource_exception_handler,
)
from app.errors.upload import (
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from app.errors.validation import ValidationError, validation_exception_handler

__all__ = [
    "AccountSuspendedError",
    "AlreadyPurchasedError",
    "AlreadySavedError",
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "DuplicateIdentityError",
    "ForbiddenError",
    "FreePostError",
    "ImageProcessingError",
    "ImageTooLargeError",
    "InvalidCredentialsError",
    "InvalidImageError",
    "InvalidRoleError",
    "InvalidTokenError",
    "MisconfiguredRoleError",
    "NotFoundError",
    "PasswordHashingError",
    "PurchaseRequiredError",
    "SelfDemotionForbiddenError",
    "StorageError",
    "UnauthenticatedError",
    "UnknownAccountError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserAuthenticationError",
    "ValidationError",
    "auth_exception_handler",
    "authorization_exception_handler",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "error_envelope",
    "password_hashing_exception_handler",
    "resource_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
