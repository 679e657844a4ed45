"""In-memory implementation for URL shortener, with optional JSON snapshot."""

import json
import logging
import os
import tempfile
from typing import Dict, List, Optional, Tuple

from .base import StorageBase
from ..allocator import SequentialIdAllocator
from ..common.locks import ReadWriteLock
from ..errors import AlreadyExistsError, BackendError, GoneError, NotFoundError
from ..models import URLRecord, UserArchiveEntry, UserURL


class URLStore:
    """Bidirectional short ID <-> original URL mapping.

    Both indices are guarded by one read-write lock. When ``file_storage_path``
    is set, the forward index is rewritten in full on every insertion while
    the write lock is held, so persistence is synchronous and serialized.
    """

    def __init__(
        self,
        file_storage_path: str = "",
        allocator: Optional[SequentialIdAllocator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize URL store.

        Args:
            file_storage_path: JSON snapshot file (empty disables persistence)
            allocator: Optional short ID allocator
            logger: Optional logger instance
        """
        self.file_storage_path = file_storage_path
        self.allocator = allocator or SequentialIdAllocator()
        self.logger = logger or logging.getLogger(__name__)

        self._urls: Dict[str, str] = {}
        self._ids: Dict[str, str] = {}
        self._lock = ReadWriteLock()

        if file_storage_path:
            self._load()

    def _load(self) -> None:
        """Load the forward index from disk and rebuild the reverse index."""
        try:
            with open(self.file_storage_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            self.logger.warning(
                f"Storage file {self.file_storage_path} not found, starting empty"
            )
            return
        except (OSError, ValueError) as e:
            self.logger.warning(
                f"Storage could not be loaded from {self.file_storage_path}: {e}"
            )
            return

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            self.logger.warning(
                f"Storage file {self.file_storage_path} is not a flat JSON object, starting empty"
            )
            return

        self._urls = data
        self._ids = {original_url: short_id for short_id, original_url in data.items()}
        self.logger.info(f"Loaded {len(self._urls)} URLs from {self.file_storage_path}")

    def _persist(self) -> None:
        """Rewrite the snapshot file. Caller holds the write lock.

        The snapshot is written to a temporary file in the same directory and
        then renamed over the old one, so a failed write leaves the previous
        snapshot intact.
        """
        directory = os.path.dirname(os.path.abspath(self.file_storage_path))
        fd, tmp_path = tempfile.mkstemp(
            dir=directory, prefix=".snapshot-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._urls, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.file_storage_path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def shorten(self, original_url: str) -> Tuple[URLRecord, bool]:
        """Store ``original_url`` unless already present.

        Args:
            original_url: The original URL

        Returns:
            Tuple of (record, already_existed)

        Raises:
            BackendError: If the snapshot could not be written
        """
        with self._lock.write_locked():
            short_id = self._ids.get(original_url)
            if short_id is not None:
                return URLRecord(short_id, original_url), True

            short_id = self.allocator.allocate(
                len(self._urls), is_taken=self._urls.__contains__
            )
            self._urls[short_id] = original_url
            self._ids[original_url] = short_id

            if self.file_storage_path:
                try:
                    self._persist()
                except (OSError, TypeError, ValueError) as e:
                    del self._urls[short_id]
                    del self._ids[original_url]
                    self.logger.error(
                        f"Error writing storage file {self.file_storage_path}: {e}"
                    )
                    raise BackendError(f"Could not persist short URL: {e}") from e

        self.logger.info(f"Created short URL: {short_id} -> {original_url}")
        return URLRecord(short_id, original_url), False

    def resolve(self, short_id: str) -> str:
        """Get the original URL for ``short_id``.

        Raises:
            NotFoundError: If the ID is unknown
        """
        with self._lock.read_locked():
            original_url = self._urls.get(short_id)

        if original_url is None:
            raise NotFoundError(f"Short ID '{short_id}' not found")
        return original_url

    def resolve_many(self, short_ids: List[str]) -> List[URLRecord]:
        """Resolve several IDs under one read lock, skipping unknown ones."""
        with self._lock.read_locked():
            return [
                URLRecord(short_id, self._urls[short_id])
                for short_id in short_ids
                if short_id in self._urls
            ]

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._urls)


class UserArchive:
    """Per session token set of owned short IDs with a liveness flag."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._entries: Dict[str, Dict[str, UserArchiveEntry]] = {}
        self._lock = ReadWriteLock()

    def record_ownership(self, user_token: str, short_id: str) -> None:
        """Mark ``short_id`` as live for ``user_token``. No-op for empty tokens."""
        if not user_token:
            return

        with self._lock.write_locked():
            owned = self._entries.setdefault(user_token, {})
            entry = owned.get(short_id)
            if entry is None:
                owned[short_id] = UserArchiveEntry(user_token, short_id)
            else:
                entry.is_live = True

    def list_live(self, user_token: str) -> List[str]:
        """List live short IDs in insertion order.

        Raises:
            NotFoundError: If the token never shortened anything
        """
        with self._lock.read_locked():
            owned = self._entries.get(user_token)
            if owned is None:
                raise NotFoundError(f"No archive for user {user_token!r}")
            return [short_id for short_id, entry in owned.items() if entry.is_live]

    def is_live(self, user_token: str, short_id: str) -> Optional[bool]:
        """Liveness of an entry: None if never owned, else the flag."""
        with self._lock.read_locked():
            entry = self._entries.get(user_token, {}).get(short_id)
            return None if entry is None else entry.is_live

    def tombstone(self, user_token: str, short_ids: List[str]) -> int:
        """Mark owned IDs as deleted, ignoring the others.

        Returns:
            Number of entries that were live and are now tombstoned
        """
        deleted = 0
        with self._lock.write_locked():
            owned = self._entries.get(user_token)
            if not owned:
                return 0

            for short_id in short_ids:
                entry = owned.get(short_id)
                if entry is not None and entry.is_live:
                    entry.is_live = False
                    deleted += 1

        return deleted


class MemoryStorage(StorageBase):
    """Storage kept in process memory, optionally snapshotted to a JSON file."""

    def __init__(
        self,
        base_url: str,
        file_storage_path: str = "",
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize in-memory storage.

        Args:
            base_url: Base URL prepended to short IDs
            file_storage_path: Optional JSON snapshot file
            logger: Optional logger instance
        """
        super().__init__(base_url, logger)
        self.urls = URLStore(file_storage_path=file_storage_path, logger=self.logger)
        self.archive = UserArchive(logger=self.logger)

    async def shorten_url(self, original_url: str, user_token: str = "") -> str:
        record, already_existed = self.urls.shorten(original_url)
        self.archive.record_ownership(user_token, record.short_id)

        short_url = self.short_url(record.short_id)
        if already_existed:
            raise AlreadyExistsError(short_url)
        return short_url

    async def get_original_url(self, short_id: str, user_token: str = "") -> str:
        if user_token:
            live = self.archive.is_live(user_token, short_id)
            if live is None:
                raise NotFoundError(f"Short ID '{short_id}' not owned by user")
            if not live:
                raise GoneError(f"Short ID '{short_id}' was deleted")

        return self.urls.resolve(short_id)

    async def get_user_archive(self, user_token: str) -> List[UserURL]:
        short_ids = self.archive.list_live(user_token)
        return [
            UserURL(short_url=self.short_url(record.short_id), original_url=record.original_url)
            for record in self.urls.resolve_many(short_ids)
        ]

    async def delete_keys(self, short_ids: List[str], user_token: str) -> None:
        if not user_token:
            return

        deleted = self.archive.tombstone(user_token, short_ids)
        self.logger.info(f"Deleted {deleted} of {len(short_ids)} URLs for user {user_token}")

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass
