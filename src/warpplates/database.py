"""Database connection and session management."""

import re

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase


def transform_database_url_for_asyncpg(url: str) -> str:
    """Transform database URL for asyncpg compatibility.

    asyncpg doesn't support 'sslmode' parameter - it uses 'ssl' instead.
    """
    return re.sub(r"sslmode=(\w+)", r"ssl=\1", url)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


# Lazy-loaded engine and session factory (avoids import-time errors for Alembic)
_engine = None
_async_session = None


def get_engine():
    """Get or create the async engine."""
    global _engine
    if _engine is None:
        from warpplates.config import settings

        db_url = settings.database_url
        if db_url.startswith("postgresql+asyncpg"):
            db_url = transform_database_url_for_asyncpg(db_url)
        _engine = create_async_engine(db_url, echo=False)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the async session factory."""
    global _async_session
    if _async_session is None:
        _async_session = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False
        )
    return _async_session


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine."""
    global _engine, _async_session
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session = None
