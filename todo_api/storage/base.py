"""
Storage abstraction layer.

All persistence goes through these interfaces. This allows swapping
implementations (in-memory -> MongoDB, DynamoDB, PostgreSQL JSONB, etc.)
without changing application code.

Each method is a single-document operation and must be atomic with
respect to that document. Nothing above this layer takes locks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Errors
# =============================================================================


class StorageError(Exception):
    """Base exception for storage failures."""
    pass


class DuplicateKeyError(StorageError):
    """A unique field already holds the inserted value."""

    def __init__(self, collection: str, field: str):
        super().__init__(f"Duplicate value for {collection}.{field}")
        self.collection = collection
        self.field = field


# =============================================================================
# Storage Interfaces
# =============================================================================


class MetadataStorage(ABC):
    """
    Document storage for users and todos.

    Filters are exact-match on top-level fields.
    """

    @abstractmethod
    async def insert(
        self,
        collection: str,
        id: str,
        data: dict[str, Any],
        unique: tuple[str, ...] = (),
    ) -> None:
        """
        Insert a new document.

        Raises:
            DuplicateKeyError: ``id`` or any field named in ``unique``
                already exists in the collection.
        """
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def find_one(
        self, collection: str, filters: dict[str, Any]
    ) -> dict[str, Any] | None:
        """First document matching all filters."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query documents with optional filters, in insertion order."""
        pass

    @abstractmethod
    async def find_one_and_update(
        self,
        collection: str,
        filters: dict[str, Any],
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Apply a partial update to the first match; return the new document."""
        pass

    @abstractmethod
    async def find_one_and_delete(
        self, collection: str, filters: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Delete the first match; return the removed document."""
        pass

    @abstractmethod
    async def push(
        self, collection: str, id: str, field: str, item: Any
    ) -> bool:
        """Append ``item`` to a list field. False if the document is missing."""
        pass

    @abstractmethod
    async def pull(
        self, collection: str, id: str, field: str, match: dict[str, Any]
    ) -> bool:
        """
        Remove every list item whose keys equal ``match``.

        Returns False only if the document is missing; removing nothing
        is still a success.
        """
        pass


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for storage backends.

    Initialize once at app startup with appropriate implementations.
    Services receive this and use the interfaces without knowing
    the underlying implementation.
    """

    model_config = {"arbitrary_types_allowed": True}

    metadata: MetadataStorage


# =============================================================================
# Collection Names (for MetadataStorage)
# =============================================================================


class Collections:
    """Standard collection/table names."""

    USERS = "users"
    TODOS = "todos"
