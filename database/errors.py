"""
Storage errors.

Connectivity and initialization failures are contained by the storage
manager; constraint violations and not-implemented operations propagate to
the caller. A missing id is never an exception: update returns None and
delete returns False.
"""
from __future__ import annotations


class StorageError(Exception):
    """Base exception for all storage operations."""

    def __init__(self, message: str, backend: str = ""):
        self.backend = backend
        super().__init__(message)


class ConnectivityError(StorageError):
    """Database unreachable or timed out during the connection test."""


class InitializationError(StorageError):
    """Schema creation, admin creation or seeding failed after connecting."""


class ConstraintViolation(StorageError):
    """A unique field (username, email, slug, key) already exists."""

    def __init__(self, entity: str, field: str = "", value: str = "", backend: str = ""):
        self.entity = entity
        self.field = field
        self.value = value
        detail = f"{entity}.{field}={value!r}" if field else entity
        super().__init__(f"Duplicate value violates unique constraint: {detail}", backend)


class NotImplementedInMemory(StorageError, NotImplementedError):
    """Operation requires the database backend."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} is not implemented in memory storage", backend="memory")
