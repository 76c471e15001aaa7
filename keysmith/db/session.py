"""Database session management using SQLModel async.

The engine is owned by an explicitly constructed ``Database`` object. The
application opens it in its lifespan before serving and closes it on
shutdown; nothing here is module-global.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

# Import all models to ensure they are registered with SQLModel metadata
import keysmith.models  # noqa: F401

logger = structlog.get_logger()


class Database:
    """Async engine plus session factory for one database URL."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._url = url
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine."""
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self._engine

    async def init(self) -> None:
        """Open the engine and create tables that do not exist yet."""
        if self._engine is None:
            self._engine = create_async_engine(self._url, echo=self._echo, future=True)
            self._session_factory = sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        async with self._engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("db.init", url=self._url)

    async def close(self) -> None:
        """Dispose of the engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("db.close")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get async database session as context manager.

        Commits when the block exits cleanly, rolls back otherwise.

        Usage:
            async with database.session() as session:
                result = await session.execute(select(ApiKey))
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
