"""Batching helpers."""

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def chunks(items: Sequence[T], size: int) -> List[List[T]]:
    """Split ``items`` into consecutive lists of at most ``size`` elements.

    Args:
        items: Items to split
        size: Maximum chunk length

    Returns:
        List of chunks (empty if ``items`` is empty)
    """
    if size < 1:
        raise ValueError("Chunk size must be positive")

    return [list(items[i:i + size]) for i in range(0, len(items), size)]
