"""
Notes API: Database Connection Manager
=======================================

What:  Async SQLAlchemy engine ownership, a single startup connection attempt,
       connection status reporting, and a per-call session context manager.
How:   A ``Database`` object is constructed by the application lifespan and
       handed to the repository. Nothing in this module opens a connection
       at import time.
When:  ``connect()`` runs once at startup, ``session()`` once per repository
       call, ``dispose()`` once at shutdown.

Connection policy:
    - DATABASE_URL missing  → warning logged, no engine, every session()
                              raises DatabaseUnavailableError
    - connect attempt fails → error logged, engine kept, status disconnected
    - connect succeeds      → host logged, status connected, `notes` table
                              created when missing
    There is exactly one attempt per process. Reconnection after a failure
    is left to the driver's pool (a later checkout may succeed).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from notes_api.exceptions import DatabaseUnavailableError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shares one metadata object)."""
    pass


class Database:
    """
    Owns the engine and session factory for one database URL.

    Args:
        url:           Async SQLAlchemy URL, or None to run without persistence
        pool_size:     Persistent pooled connections (server databases only)
        max_overflow:  Extra connections for bursts (server databases only)
        pool_pre_ping: Validate pooled connections before use
        echo:          Log every SQL statement (DEBUG only)
    """

    def __init__(
        self,
        url: Optional[str],
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.url = url
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._pool_pre_ping = pool_pre_ping
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._connected = False

    @classmethod
    def from_settings(cls, settings) -> "Database":
        """Build a Database from a Settings instance."""
        return cls(
            url=settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    # ── Status ────────────────────────────────────────────────────────────
    @property
    def is_configured(self) -> bool:
        return self._engine is not None

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def host(self) -> str:
        """Host part of the URL; the database file for SQLite."""
        if not self.url:
            return ""
        try:
            parsed = make_url(self.url)
        except Exception:
            return ""
        return parsed.host or parsed.database or ""

    # ── Lifecycle ─────────────────────────────────────────────────────────
    def _engine_kwargs(self) -> dict:
        kwargs = {
            "echo": self._echo,
            "pool_pre_ping": self._pool_pre_ping,
        }
        # SQLite pools don't take size/overflow/recycle arguments
        if not make_url(self.url).get_backend_name().startswith("sqlite"):
            kwargs.update(
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_recycle=3600,
            )
        return kwargs

    async def connect(self) -> bool:
        """
        Make the single startup connection attempt.

        Returns True when the database answered, False otherwise. Never raises:
        failures are logged and reflected in ``is_connected``.
        """
        if not self.url:
            logger.warning("Database URL not found in environment variables")
            logger.warning("Set DATABASE_URL (or add it to .env) to enable persistence")
            return False

        # Models must be registered on Base.metadata before create_all
        from notes_api.models import note  # noqa: F401

        try:
            self._engine = create_async_engine(self.url, **self._engine_kwargs())
            # expire_on_commit=False: returned Note objects stay readable
            # after their session has closed
            self._session_factory = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            self._connected = False
            logger.error("Database connection error: %s", str(e) or type(e).__name__)
            return False

        self._connected = True
        logger.info("Database connected: %s", self.host)
        return True

    async def ping(self) -> bool:
        """Run ``SELECT 1``; True when the database answered."""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def dispose(self) -> None:
        """Close all pooled connections (shutdown)."""
        if self._engine is not None:
            await self._engine.dispose()
        self._connected = False

    # ── Sessions ──────────────────────────────────────────────────────────
    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that commits on success and rolls back on error.

        Raises:
            DatabaseUnavailableError: No engine exists (URL unset or invalid).
        """
        if self._session_factory is None:
            raise DatabaseUnavailableError()

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
