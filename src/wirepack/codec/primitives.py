"""Fixed-width primitive codecs.

Every multi-byte primitive is big-endian. Integers use two's complement when
signed; floats are IEEE-754. Values outside a type's range make
``struct.pack_into`` raise ``struct.error``, which the encoder reports as an
EncodeError.
"""

from __future__ import annotations

import struct

from .cursor import Cursor
from .datatype import DataType, Fixed, ReadBuffer

BYTE_ORDER = ">"


def _fixed(name: str, fmt: str) -> DataType[float]:
    """Build a DataType backed by a precompiled big-endian struct format."""
    packer = struct.Struct(BYTE_ORDER + fmt)
    width = packer.size

    def encode(buffer: bytearray, cursor: Cursor, value: float) -> None:
        packer.pack_into(buffer, cursor.advance(width), value)

    def decode(buffer: ReadBuffer, cursor: Cursor) -> float:
        return packer.unpack_from(buffer, cursor.advance(width))[0]

    return DataType(name=name, size=Fixed(width), encode=encode, decode=decode)


# 8-bit signed integer (-128 to 127)
Int8: DataType[int] = _fixed("Int8", "b")

# 16-bit signed integer (-32768 to 32767)
Int16: DataType[int] = _fixed("Int16", "h")

# 32-bit signed integer (-2147483648 to 2147483647)
Int32: DataType[int] = _fixed("Int32", "i")

# 8-bit unsigned integer (0 to 255)
UInt8: DataType[int] = _fixed("UInt8", "B")

# 16-bit unsigned integer (0 to 65535)
UInt16: DataType[int] = _fixed("UInt16", "H")

# 32-bit unsigned integer (0 to 4294967295)
UInt32: DataType[int] = _fixed("UInt32", "I")

# 32-bit floating point (-3.4e+38 to 3.4e+38)
Float32: DataType[float] = _fixed("Float32", "f")

# 64-bit floating point (-1.7e+308 to +1.7e+308)
Float64: DataType[float] = _fixed("Float64", "d")


def _encode_bool(buffer: bytearray, cursor: Cursor, value: bool) -> None:
    UInt8.encode(buffer, cursor, 1 if value else 0)


def _decode_bool(buffer: ReadBuffer, cursor: Cursor) -> bool:
    return UInt8.decode(buffer, cursor) == 1


# Boolean stored as an 8-bit integer, 0x01 for True
Bool: DataType[bool] = DataType(name="Bool", size=Fixed(1), encode=_encode_bool, decode=_decode_bool)

INTEGER_TYPES: tuple[DataType[int], ...] = (Int8, Int16, Int32, UInt8, UInt16, UInt32)
FLOAT_TYPES: tuple[DataType[float], ...] = (Float32, Float64)
