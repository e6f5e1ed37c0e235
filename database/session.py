"""
Async SQLAlchemy engine and session factory.
"""

from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from database.models import Base


def build_engine(database_url: str, **overrides: Any) -> AsyncEngine:
    """Create the async engine; pool sizing applies to server databases only."""
    kwargs: Dict[str, Any] = {"echo": False}
    if not database_url.startswith("sqlite"):
        kwargs.update(pool_size=10, max_overflow=20, pool_recycle=3600)
    kwargs.update(overrides)
    return create_async_engine(database_url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency function — use in FastAPI `Depends(get_db_session)`."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
