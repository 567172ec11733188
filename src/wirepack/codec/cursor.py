"""Byte offset tracking for a single encode or decode pass."""

from __future__ import annotations


class Cursor:
    """Tracks the byte offset while a buffer is written or read.

    The cursor never looks at the buffer itself. Every codec advances it by
    exactly the number of bytes it writes or reads, so after a pass the offset
    equals the total size of what was processed.

    A cursor belongs to one pass at a time; share definitions between threads,
    never cursors.

    Example:
        >>> cursor = Cursor()
        >>> cursor.advance(4)
        0
        >>> cursor.advance_one()
        4
        >>> cursor.offset
        5
        >>> cursor.reset()
    """

    __slots__ = ("_offset",)

    def __init__(self) -> None:
        self._offset = 0

    @property
    def offset(self) -> int:
        """Current offset in bytes."""
        return self._offset

    def advance(self, amount: int) -> int:
        """Move the offset forward by ``amount`` bytes.

        Args:
            amount: Number of bytes to move by

        Returns:
            The offset before this change
        """
        previous = self._offset
        self._offset += amount
        return previous

    def advance_one(self) -> int:
        """Move the offset forward by a single byte.

        Returns:
            The offset before this change
        """
        previous = self._offset
        self._offset += 1
        return previous

    def reset(self) -> None:
        """Reset the offset to zero."""
        self._offset = 0

    def __repr__(self) -> str:
        return f"Cursor(offset={self._offset})"
