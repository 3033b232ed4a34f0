"""
Database layer — Dual-backend persistence with in-memory fallback.

Backends:
  - SQL (PostgreSQL / SQLite via SQLAlchemy async)
  - In-memory (list-based, seeded, for degraded mode and testing)

Quick start:
  from database import create_storage_manager
  manager, storage = create_storage_manager(settings)
  await manager.initialize()
  services = await storage.get_active_services()
"""
from database.errors import (
    StorageError, ConnectivityError, InitializationError,
    ConstraintViolation, NotImplementedInMemory,
)
from database.models import Base
from database.session import Database
from database.store_base import BaseStorage
from database.store import SqlStorage
from database.store_memory import InMemoryStorage
from database.initializer import DatabaseInitializer
from database.manager import StorageFacade, StorageManager, StorageState
from database.store_factory import create_storage_manager

__all__ = [
    # Errors
    "StorageError", "ConnectivityError", "InitializationError",
    "ConstraintViolation", "NotImplementedInMemory",
    # ORM / session
    "Base", "Database",
    # Storage interface
    "BaseStorage",
    # Storage backends
    "SqlStorage", "InMemoryStorage",
    # Bring-up and switching
    "DatabaseInitializer", "StorageManager", "StorageState", "StorageFacade",
    # Factory
    "create_storage_manager",
]
