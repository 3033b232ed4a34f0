"""
Async database session management — PostgreSQL, SQLite.

Driver mapping:
  postgresql://  → postgresql+asyncpg://     (requires asyncpg)
  postgres://    → postgresql+asyncpg://
  sqlite://      → sqlite+aiosqlite://       (requires aiosqlite)

Usage:
    database = Database(url, environment="development")
    await database.ping()                    # raises when unreachable
    await database.create_all()
    async with database.session() as db:     # one transaction
        result = await db.execute(...)
    await database.dispose()
"""
from __future__ import annotations

import asyncio
import structlog
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker,
)

from database.models import Base

logger = structlog.get_logger()


def _to_async_url(db_url: str) -> str:
    """Convert a sync database URL to its async driver equivalent."""
    replacements = [
        ("postgresql://", "postgresql+asyncpg://"),
        ("postgres://", "postgresql+asyncpg://"),
        ("sqlite://", "sqlite+aiosqlite://"),
    ]
    for sync_prefix, async_prefix in replacements:
        if db_url.startswith(sync_prefix):
            return db_url.replace(sync_prefix, async_prefix, 1)
    # async driver already present, or a scheme we do not map
    return db_url


def _engine_kwargs(db_url: str, environment: str = "production",
                   connect_timeout: float = 5.0, pool_size: int = 10,
                   max_overflow: int = 20, echo: bool = False) -> dict:
    """Return database-specific engine configuration."""
    base = {"echo": echo}

    if "sqlite" in db_url:
        # SQLite: no connection pooling or TLS
        return {**base, "connect_args": {"timeout": connect_timeout}}

    # PostgreSQL: pool tuning, bounded connect, TLS relaxed only in development
    return {
        **base,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "pool_pre_ping": True,
        "connect_args": {
            "timeout": connect_timeout,
            "ssl": environment != "development",
        },
    }


def redact_url(db_url: str) -> str:
    """Drop credentials before a URL reaches the logs."""
    return db_url.split("@")[-1] if "@" in db_url else db_url


class Database:
    """One async engine + session factory for one database URL."""

    def __init__(self, url: str, environment: str = "production",
                 connect_timeout: float = 5.0, pool_size: int = 10,
                 max_overflow: int = 20, echo: bool = False):
        self.url = _to_async_url(url)
        self.connect_timeout = connect_timeout
        kwargs = _engine_kwargs(
            self.url, environment=environment, connect_timeout=connect_timeout,
            pool_size=pool_size, max_overflow=max_overflow, echo=echo,
        )
        self._engine: AsyncEngine = create_async_engine(self.url, **kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info("database_engine_created",
                    dialect=self._engine.dialect.name,
                    url=redact_url(self.url))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional async session scope."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> None:
        """Round-trip `SELECT 1`, bounded by the connect timeout. Raises on failure."""
        async def _select_one():
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))

        await asyncio.wait_for(_select_one(), timeout=self.connect_timeout)

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_schema_ready",
                    dialect=self.dialect,
                    tables=list(Base.metadata.tables.keys()))

    async def dispose(self) -> None:
        """Dispose engine connections. Call at shutdown."""
        await self._engine.dispose()
        logger.info("database_closed", url=redact_url(self.url))
