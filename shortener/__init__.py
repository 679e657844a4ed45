"""Core storage and business logic for URL shortener."""

from .allocator import SequentialIdAllocator
from .errors import (
    StorageError,
    NotFoundError,
    GoneError,
    AlreadyExistsError,
    BackendError,
)
from .models import URLRecord, UserArchiveEntry, UserURL, BatchItem
from .storage import StorageBase, MemoryStorage, PostgresStorage, create_storage

__all__ = [
    "SequentialIdAllocator",
    "StorageError",
    "NotFoundError",
    "GoneError",
    "AlreadyExistsError",
    "BackendError",
    "URLRecord",
    "UserArchiveEntry",
    "UserURL",
    "BatchItem",
    "StorageBase",
    "MemoryStorage",
    "PostgresStorage",
    "create_storage",
]
