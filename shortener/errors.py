"""Exceptions raised by the storage layer.

Classes:
    StorageError:
        Generic base class for storage-related exceptions.

    NotFoundError:
        Raised when a short ID or a user archive is unknown.

    GoneError:
        Raised when a short ID was deleted (tombstoned) for the requesting user.

    AlreadyExistsError:
        Raised when the URL being shortened was already stored. Not a failure:
        ownership has been recorded and ``short_url`` holds the existing link.

    BackendError:
        Raised on I/O, database or serialization failures.
"""


class StorageError(Exception):
    """Generic base class for storage-related exceptions."""

    pass


class NotFoundError(StorageError):
    """Exception raised when a short ID or user archive is not found."""

    pass


class GoneError(StorageError):
    """Exception raised when a short ID was deleted by its owner."""

    pass


class AlreadyExistsError(StorageError):
    """Exception raised when the original URL was already shortened."""

    def __init__(self, short_url: str):
        super().__init__(f"URL already shortened as {short_url}")
        self.short_url = short_url


class BackendError(StorageError):
    """Exception raised when the underlying storage fails.

    e.g. file write errors, connection issues, timeouts, bad JSON, etc.
    """

    pass
