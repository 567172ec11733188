"""Composite codecs built from other DataTypes.

Every variable-length composite starts with a VarInt length or count, so the
content delimits itself without a terminator:

    Length    VarInt
    for Length {
        Element   DataType<T>
    }
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence, TypeVar

from ..exceptions import SchemaError
from .cursor import Cursor
from .datatype import Computed, DataType, ReadBuffer, total_size
from .definition import StructDefinition, StructLayout
from .primitives import INTEGER_TYPES, UInt8
from .varint import VarInt, decode_varint, encode_varint, varint_size

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


def _read_span(buffer: ReadBuffer, cursor: Cursor, length: int) -> bytes:
    start = cursor.advance(length)
    end = start + length
    if end > len(buffer):
        raise IndexError(
            f"Attempted to read {length} bytes at offset {start} past end of "
            f"{len(buffer)} byte buffer"
        )
    return bytes(buffer[start:end])


# ----------------------------------------------------------------------------
# Byte sequences and strings
# ----------------------------------------------------------------------------


def _bytes_size(value: bytes) -> int:
    return varint_size(len(value)) + len(value)


def _encode_bytes(buffer: bytearray, cursor: Cursor, value: bytes) -> None:
    encode_varint(buffer, cursor, len(value))
    for byte in value:
        UInt8.encode(buffer, cursor, byte)


def _decode_bytes(buffer: ReadBuffer, cursor: Cursor) -> bytes:
    length = decode_varint(buffer, cursor)
    return _read_span(buffer, cursor, length)


# Length-prefixed raw bytes
ByteArray: DataType[bytes] = DataType(
    name="ByteArray",
    size=Computed(_bytes_size),
    encode=_encode_bytes,
    decode=_decode_bytes,
)


def _str_size(value: str) -> int:
    return varint_size(len(value)) + len(value)


def _encode_str(buffer: bytearray, cursor: Cursor, value: str) -> None:
    encode_varint(buffer, cursor, len(value))
    for char in value:
        # One byte per code point; anything above 0xFF loses its high bits
        UInt8.encode(buffer, cursor, ord(char) & 0xFF)


def _decode_str(buffer: ReadBuffer, cursor: Cursor) -> str:
    return _decode_bytes(buffer, cursor).decode("latin-1")


# Length-prefixed string, one byte per character (Latin-1 range only)
Str: DataType[str] = DataType(
    name="Str",
    size=Computed(_str_size),
    encode=_encode_str,
    decode=_decode_str,
)


def _utf8_size(value: str) -> int:
    return _bytes_size(value.encode("utf-8"))


def _encode_utf8(buffer: bytearray, cursor: Cursor, value: str) -> None:
    _encode_bytes(buffer, cursor, value.encode("utf-8"))


def _decode_utf8(buffer: ReadBuffer, cursor: Cursor) -> str:
    return _decode_bytes(buffer, cursor).decode("utf-8")


# Length-prefixed UTF-8 string, the length counts encoded bytes
Utf8Str: DataType[str] = DataType(
    name="Utf8Str",
    size=Computed(_utf8_size),
    encode=_encode_utf8,
    decode=_decode_utf8,
)

MAP_KEY_TYPES: tuple[DataType[Any], ...] = (Str, Utf8Str, VarInt, *INTEGER_TYPES)


# ----------------------------------------------------------------------------
# Arrays
# ----------------------------------------------------------------------------


def ArrayType(data_type: DataType[T]) -> DataType[List[T]]:
    """Create a DataType for a count-prefixed list of ``data_type`` values.

    If the elements are structs used nowhere else, StructArray skips the
    intermediate Struct call.

    Args:
        data_type: The DataType of each element

    Returns:
        DataType encoding ``list[T]``
    """

    def size(value: Sequence[T]) -> int:
        return varint_size(len(value)) + total_size(value, data_type)

    def encode(buffer: bytearray, cursor: Cursor, value: Sequence[T]) -> None:
        encode_varint(buffer, cursor, len(value))
        for element in value:
            data_type.encode(buffer, cursor, element)

    def decode(buffer: ReadBuffer, cursor: Cursor) -> List[T]:
        count = decode_varint(buffer, cursor)
        return [data_type.decode(buffer, cursor) for _ in range(count)]

    return DataType(
        name=f"ArrayType[{data_type.name}]",
        size=Computed(size),
        encode=encode,
        decode=decode,
    )


def Struct(layout: StructLayout, order: Sequence[str]) -> DataType[Dict[str, Any]]:
    """Create a DataType for a nested struct with known fields.

    Field names are known only to the encoder and decoder; they are not
    written to the wire. Values are encoded in ``order``.

    Args:
        layout: Mapping of field name to DataType
        order: Field names in wire order

    Returns:
        DataType encoding a ``dict`` keyed by field name

    Raises:
        SchemaError: If order is not a permutation of the layout's fields
    """
    definition = StructDefinition(layout, order)
    return DataType(
        name="Struct",
        size=Computed(definition.compute_size),
        encode=definition.encode,
        decode=definition.decode,
    )


def StructArray(layout: StructLayout, order: Sequence[str]) -> DataType[List[Dict[str, Any]]]:
    """Create a DataType for a count-prefixed list of structs.

    Shortcut for ``ArrayType(Struct(layout, order))``.

    Args:
        layout: Mapping of field name to DataType
        order: Field names in wire order

    Returns:
        DataType encoding ``list[dict]``

    Raises:
        SchemaError: If order is not a permutation of the layout's fields
    """
    definition = StructDefinition(layout, order)

    def size(value: Sequence[Mapping[str, Any]]) -> int:
        body = 0
        for element in value:
            body += definition.compute_size(element)
        return varint_size(len(value)) + body

    def encode(buffer: bytearray, cursor: Cursor, value: Sequence[Mapping[str, Any]]) -> None:
        encode_varint(buffer, cursor, len(value))
        for element in value:
            definition.encode(buffer, cursor, element)

    def decode(buffer: ReadBuffer, cursor: Cursor) -> List[Dict[str, Any]]:
        count = decode_varint(buffer, cursor)
        return [definition.decode(buffer, cursor) for _ in range(count)]

    return DataType(name="StructArray", size=Computed(size), encode=encode, decode=decode)


# ----------------------------------------------------------------------------
# Maps
# ----------------------------------------------------------------------------


def MapType(key_type: DataType[K], value_type: DataType[V]) -> DataType[Dict[K, V]]:
    """Create a DataType for a count-prefixed mapping of keys to values.

    Use this when keys are generated at runtime; for known keys use Struct.
    Entries are written in the mapping's iteration order and read back into a
    dict in the order they arrive. No sorting takes place.

    Encoding:

        Length    VarInt
        for Length {
            Key    DataType<K>
            Value  DataType<V>
        }

    Args:
        key_type: Key codec, restricted to string and integer codecs
        value_type: Value codec

    Returns:
        DataType encoding ``dict[K, V]``

    Raises:
        SchemaError: If key_type is not a string or integer codec
    """
    if not any(key_type is allowed_type for allowed_type in MAP_KEY_TYPES):
        allowed = ", ".join(data_type.name for data_type in MAP_KEY_TYPES)
        raise SchemaError(f"Map keys must use one of {allowed}; got {key_type.name}")

    def size(value: Mapping[K, V]) -> int:
        return (
            varint_size(len(value))
            + total_size(list(value.keys()), key_type)
            + total_size(list(value.values()), value_type)
        )

    def encode(buffer: bytearray, cursor: Cursor, value: Mapping[K, V]) -> None:
        encode_varint(buffer, cursor, len(value))
        for key, item in value.items():
            key_type.encode(buffer, cursor, key)
            value_type.encode(buffer, cursor, item)

    def decode(buffer: ReadBuffer, cursor: Cursor) -> Dict[K, V]:
        count = decode_varint(buffer, cursor)
        out: Dict[K, V] = {}
        for _ in range(count):
            key = key_type.decode(buffer, cursor)
            out[key] = value_type.decode(buffer, cursor)
        return out

    return DataType(
        name=f"MapType[{key_type.name}, {value_type.name}]",
        size=Computed(size),
        encode=encode,
        decode=decode,
    )
