"""Async SQLAlchemy engine and session helpers.

Every ``LogStore`` call opens its own short-lived session from the factory
built here, which lets a page read and its count run side by side.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from ..core.config import settings

# ``Base`` is the parent class for every model defined in ojtlog/models.
Base = declarative_base()


def build_engine(url: str | None = None) -> AsyncEngine:
    return create_async_engine(url or settings.database_url)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows are turned into plain dicts after commit, so keep attributes loaded.
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables. Importing the models registers them on ``Base``."""

    from ..models import log as _log  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
