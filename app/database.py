# python
"""Database engine and session utilities.

The engine is bound to ``DATABASE_URL``, or to ``TEST_DATABASE_URL`` while
``TESTING=true``. Request handlers receive an ``AsyncSession`` through the
``get_db`` dependency.
"""
import os
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings, settings


def resolve_database_url(app_settings: Settings = settings) -> str:
    """Pick the connection URL for the current run mode.

    Raises:
        RuntimeError: If no URL is configured
    """
    if os.getenv("TESTING") == "true":
        url = os.getenv("TEST_DATABASE_URL") or app_settings.test_database_url
    else:
        url = app_settings.database_url

    url = (url or "").strip()
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not configured. Set it in the environment or .env file "
            "(e.g., DATABASE_URL=postgresql+asyncpg://<user>:<pass>@<host>/<db>)."
        )
    return url


engine = create_async_engine(resolve_database_url(), echo=settings.debug)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, Any]:
    async with AsyncSessionLocal() as session:
        yield session


async def ping_database() -> None:
    """Run a trivial query; raises whatever the driver raises when the database is unreachable."""
    async with AsyncSessionLocal() as session:
        await session.execute(text("SELECT 1"))
