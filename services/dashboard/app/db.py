from __future__ import annotations

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from services.dashboard.app.settings import SETTINGS


def create_engine(database_url: str | None = None) -> AsyncEngine:
    # No pooling in this layer; each request gets a fresh connection.
    return create_async_engine(database_url or SETTINGS.database_url, pool_pre_ping=True, poolclass=NullPool)


ENGINE = create_engine()
SESSIONMAKER = async_sessionmaker(ENGINE, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncIterator[AsyncSession]:
    async with SESSIONMAKER() as session:
        yield session
