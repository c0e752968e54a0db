"""Database connection and session management."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vendorvault_api.config import get_settings

settings = get_settings()


def _engine_options() -> dict[str, Any]:
    """Build engine keyword arguments for the configured backend."""
    if settings.is_sqlite:
        # SQLite uses a singleton/static pool that rejects sizing arguments
        return {"echo": False}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        # Validate connections before checkout to detect stale connections
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        # Never echo SQL statements as they may contain personal data
        "echo": False,
    }


engine = create_async_engine(settings.async_database_url, **_engine_options())

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create all tables that do not exist yet."""
    from vendorvault_api.models.orm import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
