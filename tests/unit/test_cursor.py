"""Tests for the byte offset cursor."""

from __future__ import annotations

from wirepack import Cursor


class TestCursor:
    """Test cursor arithmetic."""

    def test_starts_at_zero(self) -> None:
        """Test a new cursor points at the first byte."""
        assert Cursor().offset == 0

    def test_advance_returns_previous_offset(self) -> None:
        """Test advance hands back the offset to write at."""
        cursor = Cursor()
        assert cursor.advance(4) == 0
        assert cursor.advance(2) == 4
        assert cursor.offset == 6

    def test_advance_one(self) -> None:
        """Test single byte advances."""
        cursor = Cursor()
        assert cursor.advance_one() == 0
        assert cursor.advance_one() == 1
        assert cursor.offset == 2

    def test_advance_zero(self) -> None:
        """Test advancing by zero leaves the offset alone."""
        cursor = Cursor()
        cursor.advance(3)
        assert cursor.advance(0) == 3
        assert cursor.offset == 3

    def test_offset_is_sum_of_advances(self) -> None:
        """Test the offset equals the total of all advances."""
        cursor = Cursor()
        steps = [1, 4, 8, 2, 1]
        for step in steps:
            cursor.advance(step)
        assert cursor.offset == sum(steps)

    def test_reset(self) -> None:
        """Test reset goes back to zero."""
        cursor = Cursor()
        cursor.advance(10)
        cursor.reset()
        assert cursor.offset == 0
        assert cursor.advance_one() == 0

    def test_repr(self) -> None:
        """Test repr shows the offset."""
        cursor = Cursor()
        cursor.advance(3)
        assert repr(cursor) == "Cursor(offset=3)"
