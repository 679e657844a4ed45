"""URL building utilities for URL shortener."""


def build_short_url(short_id: str, base_url: str) -> str:
    """Build complete short URL.

    Args:
        short_id: The short ID
        base_url: Base URL (e.g., http://localhost:8080)

    Returns:
        Complete short URL
    """
    return f"{base_url.rstrip('/')}/{short_id}"


def short_id_from_url(short_url: str) -> str:
    """Extract the short ID (last path segment) from a short URL.

    Args:
        short_url: Complete short URL or a bare short ID

    Returns:
        The short ID
    """
    return short_url.rstrip("/").rsplit("/", 1)[-1]
