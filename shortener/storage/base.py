"""Abstract base class for URL shortener storage implementations."""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from ..common.url_builder import build_short_url
from ..errors import AlreadyExistsError
from ..models import BatchItem, UserURL


class StorageBase(ABC):
    """Storage facade used by the web layer.

    Every operation takes the caller's session token. An empty token means
    "anonymous": no ownership is recorded and no ownership checks are made.
    """

    def __init__(self, base_url: str, logger: Optional[logging.Logger] = None):
        """Initialize storage.

        Args:
            base_url: Base URL prepended to short IDs
            logger: Optional logger instance
        """
        self.base_url = base_url
        self.logger = logger or logging.getLogger(__name__)

    def short_url(self, short_id: str) -> str:
        """Build the externally visible short URL for ``short_id``."""
        return build_short_url(short_id, self.base_url)

    @abstractmethod
    async def shorten_url(self, original_url: str, user_token: str = "") -> str:
        """Shorten a URL and record ownership for ``user_token``.

        Ownership is recorded even when the URL was already stored, so a URL
        first shortened anonymously (or by another user) becomes owned by
        ``user_token`` too.

        Args:
            original_url: The original long URL (stored verbatim)
            user_token: Session token of the caller

        Returns:
            The short URL

        Raises:
            AlreadyExistsError: If the URL was already shortened. The
                exception carries the existing short URL.
            BackendError: On storage failure
        """
        pass

    @abstractmethod
    async def get_original_url(self, short_id: str, user_token: str = "") -> str:
        """Resolve a short ID.

        Args:
            short_id: The short ID to resolve
            user_token: Session token. When non-empty the caller must own
                ``short_id``.

        Returns:
            The original URL

        Raises:
            NotFoundError: If the ID is unknown, or not owned by ``user_token``
            GoneError: If ``user_token`` deleted the ID
            BackendError: On storage failure
        """
        pass

    @abstractmethod
    async def get_user_archive(self, user_token: str) -> List[UserURL]:
        """List the live URLs owned by ``user_token``.

        Raises:
            NotFoundError: If the token never shortened anything
            BackendError: On storage failure
        """
        pass

    @abstractmethod
    async def delete_keys(self, short_ids: List[str], user_token: str) -> None:
        """Tombstone ``short_ids`` for ``user_token``.

        IDs the user does not own are ignored.

        Raises:
            BackendError: On storage failure
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check if the backend is reachable."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass

    async def for_each(
        self,
        items: Iterable[BatchItem],
        user_token: str,
        callback: Callable[[str, str], None],
    ) -> None:
        """Shorten a batch of URLs, reporting each new short URL.

        Items are processed in order. URLs that were already shortened are
        stored for the user but not reported to ``callback``.

        Args:
            items: Batch items to shorten
            user_token: Session token of the caller
            callback: Called as ``callback(correlation_id, short_url)``. The
                first exception it raises stops the batch and propagates.
        """
        for item in items:
            try:
                short_url = await self.shorten_url(item.original_url, user_token)
            except AlreadyExistsError:
                self.logger.debug(
                    f"Batch item {item.correlation_id} already shortened, skipping"
                )
                continue

            callback(item.correlation_id, short_url)
