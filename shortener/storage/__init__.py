"""Storage layer for URL shortener."""

import logging
from typing import Optional

from .base import StorageBase
from .memory import MemoryStorage, URLStore, UserArchive
from .postgres import PostgresStorage


def create_storage(config, logger: Optional[logging.Logger] = None) -> StorageBase:
    """Build the storage selected by configuration.

    A non-empty ``database_dsn`` selects PostgreSQL, otherwise URLs are kept
    in memory (snapshotted to ``file_storage_path`` when set).

    Args:
        config: Configuration instance
        logger: Optional logger instance

    Returns:
        Storage instance (tables are not created here)
    """
    if config.database_dsn:
        return PostgresStorage(
            base_url=config.base_url,
            dsn=config.database_dsn,
            pool_max_size=config.db_pool_max_size,
            timeout_seconds=config.db_timeout_seconds,
            delete_batch_size=config.delete_batch_size,
            logger=logger,
        )

    return MemoryStorage(
        base_url=config.base_url,
        file_storage_path=config.file_storage_path,
        logger=logger,
    )


__all__ = [
    "StorageBase",
    "MemoryStorage",
    "URLStore",
    "UserArchive",
    "PostgresStorage",
    "create_storage",
]
