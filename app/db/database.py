"""
PostgreSQL engine and session lifecycle for the marketplace.

Every request that touches accounts, posts or purchases runs inside one
``transaction()``. Multi-step writes such as a purchase (record + seller
credit) or an account deletion (posts + account) therefore commit or roll
back together.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from time import perf_counter

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.configs import settings
from app.errors.base import BaseAppError
from app.monitoring import get_logger

logger = get_logger(__name__)

STATEMENT_TIMEOUT_MS = 30000

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    pool_size=settings.POOL_SIZE,
    max_overflow=settings.MAX_OVERFLOW,
    pool_timeout=settings.POOL_TIMEOUT,
    pool_recycle=settings.POOL_RECYCLE,
    pool_pre_ping=True,
    connect_args={
        "command_timeout": STATEMENT_TIMEOUT_MS / 1000,
        "server_settings": {
            "application_name": settings.APP_NAME,
            "statement_timeout": str(STATEMENT_TIMEOUT_MS),
            "lock_timeout": str(STATEMENT_TIMEOUT_MS),
        },
    },
)

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession]:
    """
    Open a session whose work commits on exit and rolls back on error.

    Application errors (a missing post, a forbidden role change) are part
    of normal traffic and are only logged at debug level. Anything else is
    logged with its traceback before being re-raised.

    Yields:
        AsyncSession: Session bound to a single database transaction
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except BaseAppError as e:
            await session.rollback()
            logger.debug("Transaction rolled back", error=type(e).__name__)
            raise
        except Exception:
            await session.rollback()
            logger.exception("Transaction rolled back after unexpected error")
            raise


async def get_session() -> AsyncGenerator[AsyncSession]:
    """
    Request-scoped session dependency.

    Yields:
        AsyncSession: Session committed when the route handler returns
    """
    async with transaction() as session:
        yield session


async def ping_database() -> int:
    """
    Run ``SELECT 1`` and return the round trip in milliseconds.

    Raises:
        SQLAlchemyError: If the database cannot be reached
    """
    start = perf_counter()
    async with transaction() as session:
        await session.execute(text("SELECT 1"))
    return int((perf_counter() - start) * 1000)


async def init_db() -> None:
    """
    Create missing marketplace tables.

    Only a development convenience, deployed schemas come from
    ``alembic upgrade head``.
    """
    # Registers the tables on SQLModel.metadata
    from app.models import CommentDB, PostDB, PurchaseDB, RatingDB, SavedPostDB, UserDB  # noqa: F401, PLC0415

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables ensured", tables=sorted(SQLModel.metadata.tables))


async def close_db() -> None:
    """Dispose the engine's connection pool on shutdown."""
    await engine.dispose()
    logger.info("Database connections closed")
