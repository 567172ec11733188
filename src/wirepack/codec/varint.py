"""Variable-length unsigned integer codec.

Integers are written in 7-bit groups, least significant group first. Bit 7
of every byte except the last is set to flag that another byte follows:

    0     -> 00
    127   -> 7f
    128   -> 80 01
    300   -> ac 02
    16384 -> 80 80 01

Reads stop after 10 bytes, the width of the 64-bit unsigned range. A value
that would need more is capped: the bytes that do not fit are dropped and the
value read so far is returned. ``decode_varint(..., strict=True)`` raises
VarIntOverflowError instead.
"""

from __future__ import annotations

import logging

from ..exceptions import VarIntOverflowError
from .cursor import Cursor
from .datatype import Computed, DataType, ReadBuffer
from .primitives import UInt8

logger = logging.getLogger(__name__)

MAX_VARINT_BYTES = 10


def varint_size(value: int) -> int:
    """Return the number of bytes ``value`` occupies as a VarInt.

    Args:
        value: Non-negative integer

    Returns:
        Encoded size in bytes (1-10 for the 64-bit range)
    """
    size = 1
    while value >= 0x80:
        value >>= 7
        size += 1
    return size


def encode_varint(buffer: bytearray, cursor: Cursor, value: int) -> None:
    """Write ``value`` as a VarInt at the cursor.

    Raises:
        ValueError: If value is negative
    """
    if value < 0:
        raise ValueError(f"VarInt requires non-negative value, got {value}")

    while value >= 0x80:
        UInt8.encode(buffer, cursor, (value & 0x7F) | 0x80)
        value >>= 7
    UInt8.encode(buffer, cursor, value)


def decode_varint(buffer: ReadBuffer, cursor: Cursor, strict: bool = False) -> int:
    """Read a VarInt at the cursor.

    Args:
        buffer: Buffer to read from
        cursor: Cursor positioned at the first VarInt byte
        strict: Raise instead of capping when the 10 byte limit is hit

    Returns:
        Decoded value

    Raises:
        VarIntOverflowError: If strict and the value does not fit in 10 bytes
    """
    value = 0
    shift = 0
    for index in range(MAX_VARINT_BYTES):
        byte = UInt8.decode(buffer, cursor)
        if byte < 0x80:
            if index == MAX_VARINT_BYTES - 1 and byte > 1:
                return _overflow(value, strict)
            return value | (byte << shift)
        value |= (byte & 0x7F) << shift
        shift += 7
    return _overflow(value, strict)


def _overflow(value: int, strict: bool) -> int:
    if strict:
        raise VarIntOverflowError(
            f"VarInt does not fit in {MAX_VARINT_BYTES} bytes (partial value {value})"
        )
    logger.warning("VarInt exceeded %d bytes, value capped at %d", MAX_VARINT_BYTES, value)
    return value


def _decode_capped(buffer: ReadBuffer, cursor: Cursor) -> int:
    return decode_varint(buffer, cursor)


# Compressed unsigned integer (0 to 18446744073709551615)
VarInt: DataType[int] = DataType(
    name="VarInt",
    size=Computed(varint_size),
    encode=encode_varint,
    decode=_decode_capped,
)
