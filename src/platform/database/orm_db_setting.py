"""
SQLAlchemy async engine and session management

This module provides:
1. Base: declarative base shared by every ORM model
2. Database: owns one async engine + session maker (injected through the DI container)
3. create_db_and_tables(): schema bootstrap used at startup and in tests

PostgreSQL (asyncpg) is the production backend. SQLite (aiosqlite) is accepted
for local runs and tests; pool arguments that SQLite does not understand are
skipped for it.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


def _engine_kwargs(db_url: str) -> dict[str, Any]:
    if make_url(db_url).get_backend_name() == 'sqlite':
        return {'connect_args': {'timeout': 30}}
    return {
        'pool_size': settings.DB_POOL_SIZE,
        'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
        'pool_timeout': settings.DB_POOL_TIMEOUT,
        'pool_recycle': settings.DB_POOL_RECYCLE,
        'pool_pre_ping': settings.DB_POOL_PRE_PING,
    }


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


class Database:
    """
    Database class for dependency injection

    Args:
        db_url: SQLAlchemy async URL, defaults to settings.DATABASE_URL_ASYNC
        engine_kwargs: overrides for create_async_engine (tests pin the pool size)
    """

    def __init__(self, *, db_url: str | None = None, **engine_kwargs: Any) -> None:
        self.db_url = db_url or settings.DATABASE_URL_ASYNC
        kwargs = _engine_kwargs(self.db_url) | engine_kwargs
        self._engine = create_async_engine(self.db_url, echo=False, **kwargs)
        if self._engine.dialect.name == 'sqlite':
            event.listen(self._engine.sync_engine, 'connect', _enable_sqlite_foreign_keys)
        self._session_maker = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        return self._session_maker

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for read-only sessions outside a unit of work"""
        async with self._session_maker() as session:
            yield session

    async def create_db_and_tables(self) -> None:
        """Create database tables if they don't exist"""
        # Register every model on Base.metadata before create_all
        import src.service.booking.driven_adapter.model  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
        Logger.base.info(f'🗄️  [DB] Tables ensured on {self._engine.url.render_as_string()}')

    async def drop_tables(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self._engine.dispose()
