"""The DataType abstraction every wire value is built from.

A DataType bundles three things for one kind of value: how many bytes it
occupies, how to write it at a cursor and how to read it back. Primitive
codecs, VarInt and every composite combinator are DataType instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar, Union

from .cursor import Cursor

N = TypeVar("N")

# Buffers handed to decoders; encoders always write into a bytearray
ReadBuffer = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class Fixed:
    """Size rule for values that always occupy the same number of bytes.

    Attributes:
        byte_count: Encoded size in bytes
    """

    byte_count: int

    def of(self, value: Any) -> int:
        return self.byte_count


@dataclass(frozen=True)
class Computed:
    """Size rule for values whose encoded size depends on the value.

    Attributes:
        func: Function mapping a value to its encoded size in bytes
    """

    func: Callable[[Any], int]

    def of(self, value: Any) -> int:
        return self.func(value)


SizeRule = Union[Fixed, Computed]


@dataclass(frozen=True)
class DataType(Generic[N]):
    """Size, encode and decode capability for one wire-representable value kind.

    The bytes ``encode`` advances the cursor through must equal ``size_of``
    for the same value, and ``decode`` must advance through the same amount.
    Definitions rely on this to allocate exactly sized buffers.

    Attributes:
        name: Human readable codec name (used by the analyzer and in errors)
        size: Fixed or Computed size rule
        encode: ``encode(buffer, cursor, value)`` writes the value at the cursor
        decode: ``decode(buffer, cursor)`` reads a value at the cursor

    Example:
        >>> from wirepack.codec.primitives import UInt8
        >>> buffer = bytearray(UInt8.size_of(7))
        >>> UInt8.encode(buffer, Cursor(), 7)
        >>> UInt8.decode(buffer, Cursor())
        7
    """

    name: str
    size: SizeRule
    encode: Callable[[bytearray, Cursor, N], None] = field(repr=False, compare=False)
    decode: Callable[[ReadBuffer, Cursor], N] = field(repr=False, compare=False)

    @property
    def is_fixed(self) -> bool:
        """Whether every value of this type has the same encoded size."""
        return isinstance(self.size, Fixed)

    def size_of(self, value: N) -> int:
        """Return the encoded size of ``value`` in bytes."""
        return self.size.of(value)


def total_size(values: Any, data_type: DataType[Any]) -> int:
    """Sum the encoded sizes of ``values`` under ``data_type``.

    Fixed size types multiply instead of visiting every value.
    """
    size = data_type.size
    if isinstance(size, Fixed):
        return size.byte_count * len(values)
    return sum(size.func(value) for value in values)
