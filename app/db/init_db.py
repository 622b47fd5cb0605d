"""
Database initialization script.

Creates the tables of every model when run directly. The production schema
is managed by Alembic migrations (``alembic upgrade head``).
"""

from asyncio import run as asyncio_run

from sqlalchemy.exc import SQLAlchemyError

from app.db.database import close_db, init_db
from app.errors.database import DatabaseInitializationError
from app.monitoring import configure_logging, get_logger

logger = get_logger(__name__)


async def main() -> None:
    """Create the tables and report the outcome."""
    try:
        logger.info("Initializing database...")
        await init_db()
        logger.info("Database ready!")
    except (SQLAlchemyError, OSError) as e:
        logger.exception("Failed to initialize database")
        raise DatabaseInitializationError from e
    finally:
        await close_db()


if __name__ == "__main__":
    configure_logging()
    asyncio_run(main())
