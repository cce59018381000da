"""
Storage abstractions.

Integration Points:
- MetadataStorage -> any document database with single-document atomic
  updates (MongoDB, DynamoDB, ...)
"""

from todo_api.storage.base import (
    Collections,
    DuplicateKeyError,
    MetadataStorage,
    StorageError,
    StorageProvider,
)
from todo_api.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "Collections",
    "DuplicateKeyError",
    "MetadataStorage",
    "StorageError",
    "StorageProvider",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
