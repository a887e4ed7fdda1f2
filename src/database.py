"""Async database engine, schema bootstrap and per-request sessions."""

from collections.abc import AsyncGenerator

import structlog
from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import Settings
from src.exceptions import BootstrapError
from src.models import Base

logger = structlog.get_logger()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide connection pool."""
    return create_async_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create the submission tables if they do not exist yet.

    Safe to run on every boot.

    Raises:
        BootstrapError: The schema could not be created.
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        raise BootstrapError(f"Schema initialization failed: {e}", e) from e

    logger.info("schema_ready", tables=sorted(Base.metadata.tables))


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for a database session bound to this request."""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session
