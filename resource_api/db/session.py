"""Async engine and session factory"""
from typing import AsyncIterator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from resource_api.core.config import settings
from resource_api.db.base import Base

# Register models on Base.metadata
from resource_api.db.models.user import User  # noqa: F401

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create missing tables"""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping_db(bind: AsyncEngine = engine) -> bool:
    """Check that the database answers a trivial query"""
    async with bind.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield one session per request"""
    async with SessionLocal() as session:
        yield session
