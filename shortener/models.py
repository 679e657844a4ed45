"""Data models for URL shortener."""

from dataclasses import dataclass


@dataclass(frozen=True)
class URLRecord:
    """A short ID and the original URL it points to."""

    short_id: str
    original_url: str


@dataclass
class UserArchiveEntry:
    """Ownership of a short ID by a session token."""

    user_token: str
    short_id: str
    is_live: bool = True


@dataclass(frozen=True)
class UserURL:
    """An entry of a user's archive as returned to the web layer."""

    short_url: str
    original_url: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "short_url": self.short_url,
            "original_url": self.original_url,
        }


@dataclass(frozen=True)
class BatchItem:
    """A single URL of a batch shorten request."""

    correlation_id: str
    original_url: str
