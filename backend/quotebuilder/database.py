import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlmodel import SQLModel

from quotebuilder.config import settings

logger = logging.getLogger(__name__)

try:
    engine_kwargs = {}
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs.update(pool_size=settings.DB_POOL_SIZE, max_overflow=settings.DB_MAX_OVERFLOW)

    engine = create_async_engine(
        settings.database_url,
        echo=settings.DB_ECHO_LOG,
        pool_pre_ping=True,
        **engine_kwargs,
    )

    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,  # ORM objects stay readable after commit
    )

    logger.info("Async SQLAlchemy engine and session factory configured.")

except Exception as e:
    logger.critical(f"Error while configuring async SQLAlchemy: {e}", exc_info=True)
    engine = None
    AsyncSessionLocal = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session."""
    if AsyncSessionLocal is None:
        logger.error("The SQLAlchemy session factory is not initialised.")
        raise RuntimeError("Database session factory is not initialized.")

    async with AsyncSessionLocal() as session:
        try:
            # Commits belong to the repositories, which own the transactions
            yield session
        except Exception as e:
            logger.error(f"Error during DB session, rolling back: {e}", exc_info=True)
            await session.rollback()
            raise
        finally:
            await session.close()
            logger.debug("DB session closed.")


async def create_tables():
    """Creates every table registered on SQLModel.metadata."""
    # Import so the table models are registered on the metadata
    from quotebuilder.quotations import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
