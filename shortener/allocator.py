"""Short ID allocation for URL shortener."""

import string
from typing import Callable, Optional


class SequentialIdAllocator:
    """Allocate short IDs from a monotonic counter.

    IDs are the decimal representation of ``count + 1`` where ``count`` is the
    number of URLs already stored. Callers must hold the store's write lock
    (or an equivalent table lock) across the count read and the insertion.
    """

    DIGITS = string.digits
    # Largest value of a PostgreSQL BIGINT key
    MAX_ID = 2 ** 63 - 1

    def __init__(self, start: int = 1):
        """Initialize allocator.

        Args:
            start: Value returned for an empty store
        """
        if start < 1:
            raise ValueError("start must be >= 1")
        self.start = start

    def allocate(
        self,
        count: int,
        is_taken: Optional[Callable[[str], bool]] = None,
    ) -> str:
        """Allocate the next short ID.

        Args:
            count: Number of records currently stored
            is_taken: Optional predicate reporting IDs already in use. A
                snapshot loaded from disk may have holes, in which case
                ``count + 1`` could collide with an existing record.

        Returns:
            New short ID as a decimal string
        """
        sequence_number = count + self.start
        short_id = str(sequence_number)

        if is_taken is not None:
            while is_taken(short_id):
                sequence_number += 1
                short_id = str(sequence_number)

        return short_id

    @staticmethod
    def is_valid_format(short_id: str) -> bool:
        """Check whether ``short_id`` could have been allocated here.

        Only canonical decimals qualify: no sign, no leading zeros and no
        value beyond ``MAX_ID``. ``"007"`` is not the same ID as ``"7"``.
        """
        if not short_id or not all(c in SequentialIdAllocator.DIGITS for c in short_id):
            return False
        if short_id[0] == "0":
            return False
        return int(short_id) <= SequentialIdAllocator.MAX_ID
