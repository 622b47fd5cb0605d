# app/main.py

"""Pixmart Backend - image marketplace API with role-based access control."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.responses import Response
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.configs import settings
from app.errors import (
    AlreadyPurchasedError,
    AlreadySavedError,
    BaseAppError,
    DatabaseError,
    DuplicateIdentityError,
    ForbiddenError,
    FreePostError,
    InvalidRoleError,
    NotFoundError,
    PasswordHashingError,
    PurchaseRequiredError,
    UploadError,
    UserAuthenticationError,
    auth_exception_handler,
    authorization_exception_handler,
    create_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    password_hashing_exception_handler,
    resource_exception_handler,
    upload_exception_handler,
    validation_exception_handler,
)
from app.managers import limiter, rate_limit_exceeded_handler
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import configure_logging, get_logger
from app.monitoring.health import setup_health_routes
from app.rabc import DEFAULT_PERMISSION_TABLE
from app.routes import auth_router, posts_router, users_router

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Pixmart Backend API",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

# Installed once; authorization checks read it through a dependency
app.state.permission_table = DEFAULT_PERMISSION_TABLE
app.state.limiter = limiter

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

routes = [auth_router, users_router, posts_router]

_ = [app.include_router(router) for router in routes]

setup_health_routes(app)

if settings.STORAGE_PROVIDER == "local":
    app.mount(
        settings.UPLOADS_BASE_URL,
        StaticFiles(directory=settings.UPLOADS_DIR, check_dir=False),
        name="uploads",
    )

errors = [
    (UserAuthenticationError, auth_exception_handler),
    (DuplicateIdentityError, auth_exception_handler),
    (ForbiddenError, authorization_exception_handler),
    (InvalidRoleError, authorization_exception_handler),
    (UploadError, upload_exception_handler),
    (PasswordHashingError, password_hashing_exception_handler),
    (DatabaseError, database_exception_handler),
    (NotFoundError, resource_exception_handler),
    (FreePostError, resource_exception_handler),
    (AlreadyPurchasedError, resource_exception_handler),
    (AlreadySavedError, resource_exception_handler),
    (PurchaseRequiredError, resource_exception_handler),
    (BaseAppError, create_exception_handler(logger)),
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (RequestValidationError, validation_exception_handler),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]


@app.get(
    "/",
    tags=["🏠 Root"],
    summary="Root access",
    response_model=dict[str, str],
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Welcome to Pixmart Backend"},
                },
            },
        },
    },
    operation_id="root_access",
)
@limiter.limit("30/minute")
async def root(request: Request, response: Response) -> ORJSONResponse:
    """
    Root endpoint.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Current response context.

    Returns
    -------
    ORJSONResponse
        Welcome message payload.
    """
    return ORJSONResponse(content={"message": f"Welcome to {settings.APP_NAME}"})
