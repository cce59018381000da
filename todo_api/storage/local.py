"""
Local storage implementations for development.

In-memory implementations that work without any external services.
No method awaits between reading and writing a document, so every
operation is atomic under the event loop.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any

from todo_api.storage.base import (
    DuplicateKeyError,
    MetadataStorage,
    StorageProvider,
)


def _matches(doc: dict[str, Any], filters: dict[str, Any] | None) -> bool:
    if not filters:
        return True
    return all(doc.get(key) == value for key, value in filters.items())


# =============================================================================
# In-Memory Metadata Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage for development and tests."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(collection, {})

    def _first(
        self, collection: str, filters: dict[str, Any]
    ) -> dict[str, Any] | None:
        for doc in self._collection(collection).values():
            if _matches(doc, filters):
                return doc
        return None

    @staticmethod
    def _touch(doc: dict[str, Any]) -> None:
        doc["_updated_at"] = datetime.now(timezone.utc).isoformat()

    async def insert(
        self,
        collection: str,
        id: str,
        data: dict[str, Any],
        unique: tuple[str, ...] = (),
    ) -> None:
        docs = self._collection(collection)
        if id in docs:
            raise DuplicateKeyError(collection, "_id")
        for field in unique:
            value = data.get(field)
            if any(doc.get(field) == value for doc in docs.values()):
                raise DuplicateKeyError(collection, field)

        doc = {**copy.deepcopy(data), "_id": id}
        self._touch(doc)
        docs[id] = doc

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._collection(collection).get(id)
        return copy.deepcopy(doc) if doc is not None else None

    async def find_one(
        self, collection: str, filters: dict[str, Any]
    ) -> dict[str, Any] | None:
        doc = self._first(collection, filters)
        return copy.deepcopy(doc) if doc is not None else None

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        results = [
            doc for doc in self._collection(collection).values()
            if _matches(doc, filters)
        ]
        end = None if limit is None else offset + limit
        return copy.deepcopy(results[offset:end])

    async def find_one_and_update(
        self,
        collection: str,
        filters: dict[str, Any],
        updates: dict[str, Any],
    ) -> dict[str, Any] | None:
        doc = self._first(collection, filters)
        if doc is None:
            return None
        doc.update(copy.deepcopy(updates))
        self._touch(doc)
        return copy.deepcopy(doc)

    async def find_one_and_delete(
        self, collection: str, filters: dict[str, Any]
    ) -> dict[str, Any] | None:
        doc = self._first(collection, filters)
        if doc is None:
            return None
        del self._collection(collection)[doc["_id"]]
        return doc

    async def push(
        self, collection: str, id: str, field: str, item: Any
    ) -> bool:
        doc = self._collection(collection).get(id)
        if doc is None:
            return False
        doc.setdefault(field, []).append(copy.deepcopy(item))
        self._touch(doc)
        return True

    async def pull(
        self, collection: str, id: str, field: str, match: dict[str, Any]
    ) -> bool:
        doc = self._collection(collection).get(id)
        if doc is None:
            return False
        doc[field] = [
            item for item in doc.get(field, [])
            if not _matches(item, match)
        ]
        self._touch(doc)
        return True


# =============================================================================
# Factory
# =============================================================================


def create_local_storage() -> StorageProvider:
    """Create a StorageProvider with local implementations."""
    return StorageProvider(metadata=InMemoryMetadataStorage())
