"""Common utilities for URL shortener."""

from .batching import chunks
from .locks import ReadWriteLock
from .url_builder import build_short_url, short_id_from_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "chunks",
    "ReadWriteLock",
    "build_short_url",
    "short_id_from_url",
    "setup_logging",
    "get_logger",
]
