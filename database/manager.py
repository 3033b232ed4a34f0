"""
StorageManager — picks the durable database or the in-memory fallback.

State machine:

    MEMORY_ACTIVE ──initialize()/attempt_database_reconnection()──► RECONNECTING
    RECONNECTING  ──connect + schema + admin + seed ok────────────► DATABASE_ACTIVE
    RECONNECTING  ──any failure───────────────────────────────────► MEMORY_ACTIVE

The manager starts in MEMORY_ACTIVE with a seeded InMemoryStorage, so
`storage` is always bound. Connectivity and initialization failures are
logged and contained here; they never reach route handlers.
"""
from __future__ import annotations

import asyncio
import structlog
from enum import Enum
from typing import Callable, Optional

from config.settings import Settings
from database.errors import ConnectivityError
from database.initializer import DatabaseInitializer
from database.store import SqlStorage
from database.store_base import BaseStorage
from database.store_memory import InMemoryStorage
from models.schemas import HealthStatus

logger = structlog.get_logger()


class StorageState(str, Enum):
    MEMORY_ACTIVE = "memory_active"
    RECONNECTING = "reconnecting"
    DATABASE_ACTIVE = "database_active"


DATABASE_STORAGE_TYPE = "Database (PostgreSQL)"
MEMORY_STORAGE_TYPE = "Memory (In-Memory)"


class StorageManager:
    """Owns the active backend and the transitions between backends."""

    def __init__(
        self,
        settings: Settings,
        memory: InMemoryStorage = None,
        initializer_factory: Callable[[Settings], DatabaseInitializer] = None,
    ):
        self._settings = settings
        self._memory = memory or InMemoryStorage(admin=settings.admin)
        self._initializer_factory = initializer_factory or DatabaseInitializer
        self._initializer: Optional[DatabaseInitializer] = None
        self._storage: BaseStorage = self._memory
        self._state = StorageState.MEMORY_ACTIVE
        self._lock = asyncio.Lock()

    # ── Introspection ─────────────────────────────────────────

    @property
    def state(self) -> StorageState:
        return self._state

    @property
    def storage(self) -> BaseStorage:
        return self._storage

    @property
    def is_using_database(self) -> bool:
        return self._state == StorageState.DATABASE_ACTIVE

    @property
    def storage_type(self) -> str:
        return DATABASE_STORAGE_TYPE if self.is_using_database else MEMORY_STORAGE_TYPE

    def get_health_status(self) -> HealthStatus:
        if self.is_using_database:
            return HealthStatus(
                storage_type=self.storage_type,
                using_database=True,
                status="healthy",
                message="Connected to database storage",
            )
        return HealthStatus(
            storage_type=self.storage_type,
            using_database=False,
            status="degraded",
            message="Using fallback memory storage - data will not persist between restarts",
        )

    # ── Transitions ───────────────────────────────────────────

    async def initialize(self) -> None:
        """Startup bring-up. Always leaves a bound backend."""
        logger.info("storage_initializing", database_configured=bool(self._settings.database.url))
        async with self._lock:
            if self.is_using_database:
                return
            if not self._settings.database.url:
                logger.info("storage_memory_mode", reason="DATABASE_URL not set")
                return
            await self._connect()
        logger.info("storage_ready", storage_type=self.storage_type, state=self._state.value)

    async def attempt_database_reconnection(self) -> bool:
        """Retry the database; True once DATABASE_ACTIVE."""
        async with self._lock:
            if self.is_using_database:
                return True
            if not self._settings.database.url:
                return False
            logger.info("storage_reconnect_attempt")
            connected = await self._connect()
        if connected:
            # Rows written to memory while degraded stay there
            logger.warning("storage_memory_data_not_migrated", **(await self._memory.stats()))
        return connected

    async def _connect(self) -> bool:
        """connect + initialize under the lock; rolls back to memory on any failure."""
        self._state = StorageState.RECONNECTING
        initializer = self._initializer_factory(self._settings)
        try:
            if not await initializer.test_connection(self._settings.database.url):
                raise ConnectivityError("Connection test failed", backend="database")
            await initializer.initialize_database()
        except Exception as e:
            logger.warning("storage_database_unavailable",
                           error=str(e), fallback=MEMORY_STORAGE_TYPE)
            await initializer.close()
            self._storage = self._memory
            self._state = StorageState.MEMORY_ACTIVE
            return False

        self._initializer = initializer
        self._storage = SqlStorage(initializer.database)
        self._state = StorageState.DATABASE_ACTIVE
        logger.info("storage_database_active", dialect=initializer.database.dialect)
        return True

    async def close(self) -> None:
        if self._initializer is not None:
            await self._initializer.close()
            self._initializer = None
        self._storage = self._memory
        self._state = StorageState.MEMORY_ACTIVE


class StorageFacade:
    """
    The single storage object route handlers see. Every contract method is
    looked up on the manager's active backend at call time, so a backend
    switch is picked up by the next call.
    """

    _contract = frozenset(BaseStorage.__abstractmethods__)

    def __init__(self, manager: StorageManager):
        self._manager = manager

    @property
    def manager(self) -> StorageManager:
        return self._manager

    def __getattr__(self, name: str):
        if name in StorageFacade._contract:
            return getattr(self._manager.storage, name)
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")
