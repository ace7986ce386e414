"""Database connection and session management."""

import functools
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Awaitable, Callable, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from orpheus_common.config import DatabaseSettings
from orpheus_common.errors import StorageUnavailableError
from orpheus_common.logging import get_logger
from orpheus_common.models.base import Base

logger = get_logger(__name__)

T = TypeVar("T")


class Database:
    """
    Async engine and session factory for one process.

    Created by the application (or CLI) entry point and handed to whatever
    needs it; the engine itself is built lazily on first use.
    """

    def __init__(self, settings: DatabaseSettings):
        self.settings = settings
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def available(self) -> bool:
        return bool(self.settings.url)

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            if not self.available:
                raise StorageUnavailableError()
            self._engine = create_async_engine(self.settings.url, **self._engine_options())
            logger.info(
                "database_engine_created",
                dialect=self._engine.dialect.name,
                database=self._engine.url.database,
            )
        return self._engine

    def _engine_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"echo": self.settings.echo}
        if self.settings.is_sqlite:
            options["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.settings.url:
                # One shared connection, otherwise every checkout sees an empty database
                options["poolclass"] = StaticPool
        else:
            options["pool_size"] = self.settings.pool_size
            options["pool_recycle"] = self.settings.pool_recycle_sec
            options["pool_pre_ping"] = True
        return options

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session.

        Usage:
            async with database.session() as session:
                result = await session.execute(select(Photo))
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        logger.info("database_schema_verified")

    async def dispose(self) -> None:
        """Close the database engine (cleanup)."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("database_engine_closed")


def reads_database(default: Callable[[], T]) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Degrade a repository read to ``default()`` when the store is missing or unreachable.

    The decorated method must belong to an object with a ``session`` attribute.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs) -> T:
            if self.session is None:
                logger.warning("database_unavailable", operation=func.__qualname__)
                return default()
            try:
                return await func(self, *args, **kwargs)
            except OperationalError as exc:
                logger.warning("database_read_failed", operation=func.__qualname__, error=str(exc))
                await self.session.rollback()
                return default()

        return wrapper

    return decorator


def writes_database(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Fail a repository write loudly when the store is missing or unreachable."""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs) -> T:
        if self.session is None:
            logger.error("database_unavailable", operation=func.__qualname__)
            raise StorageUnavailableError()
        try:
            return await func(self, *args, **kwargs)
        except OperationalError as exc:
            logger.error("database_write_failed", operation=func.__qualname__, error=str(exc))
            await self.session.rollback()
            raise StorageUnavailableError() from exc

    return wrapper
