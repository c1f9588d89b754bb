"""Database initialization utilities."""

from tumbi.db.base import Base
from tumbi.db.session import engine
from tumbi.core.logging import get_logger

logger = get_logger(__name__)


async def create_tables() -> None:
    """Create all database tables."""
    # Import models to ensure they're registered
    from tumbi import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")


async def drop_tables() -> None:
    """Drop all database tables (use with caution!)."""
    from tumbi import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("Database tables dropped")
