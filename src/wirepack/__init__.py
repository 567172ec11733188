"""wirepack: Binary Wire Codec

A Python library for compact binary messages over persistent duplex
connections. Every value is described by a DataType (size, encode, decode);
struct and packet definitions compose DataTypes into ordered wire layouts
and prefix each message with a VarInt packet identifier.

Key Features:
- Big-endian fixed-width primitives, VarInt, strings, byte arrays
- Arrays, struct arrays, nested structs and maps
- Exact two-pass sizing: every buffer is allocated once at its final size
- Pydantic-based message modeling
- Packet registry with listener dispatch and a pluggable transport

Quick Start:
    >>> from wirepack import PacketDefinition, Str, UInt8, decode_message, encode_message
    >>>
    >>> LOGIN = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])
    >>> data = encode_message(LOGIN, {"name": "ab", "user": 5})
    >>> data.hex()
    '0202616205'
    >>> decode_message(data, {LOGIN.id: LOGIN}).value
    {'name': 'ab', 'user': 5}

With Pydantic models:
    >>> from typing import ClassVar, Optional
    >>> from wirepack import BaseMessage, StrField, UInt8Field, decode, encode
    >>>
    >>> class Login(BaseMessage):
    ...     name: StrField
    ...     user: UInt8Field
    ...     wire_id: ClassVar[Optional[int]] = 2
    >>>
    >>> decode(Login, encode(Login(name="ab", user=5)))
    Login(name='ab', user=5)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .codec import (
    ArrayType,
    Bool,
    ByteArray,
    Computed,
    Cursor,
    DataType,
    DecodedPacket,
    Fixed,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    MapType,
    PacketDefinition,
    Str,
    Struct,
    StructArray,
    StructDefinition,
    UInt8,
    UInt16,
    UInt32,
    UnregisteredPacket,
    Utf8Str,
    VarInt,
    decode,
    decode_message,
    decode_struct,
    encode,
    encode_message,
    encode_struct,
    varint_size,
)
from .exceptions import (
    DecodeError,
    EncodeError,
    SchemaError,
    TransportError,
    VarIntOverflowError,
    WirepackError,
)
from .models import (
    BaseMessage,
    BoolField,
    BytesField,
    Float32Field,
    Float64Field,
    Int8Field,
    Int16Field,
    Int32Field,
    MessageArray,
    NestedMessage,
    StrField,
    UInt8Field,
    UInt16Field,
    UInt32Field,
    Utf8Field,
)
from .routing import PacketRegistry, decode_by_id, register_message
from .utils import encoded_size, field_sizes

__all__ = [
    # Core API
    "encode_message",
    "decode_message",
    "encode_struct",
    "decode_struct",
    "DecodedPacket",
    "UnregisteredPacket",
    "Cursor",
    "DataType",
    "Fixed",
    "Computed",
    "StructDefinition",
    "PacketDefinition",
    # Primitives
    "Int8",
    "Int16",
    "Int32",
    "UInt8",
    "UInt16",
    "UInt32",
    "Float32",
    "Float64",
    "Bool",
    "VarInt",
    "varint_size",
    # Composites
    "ByteArray",
    "Str",
    "Utf8Str",
    "ArrayType",
    "Struct",
    "StructArray",
    "MapType",
    # Models
    "BaseMessage",
    "encode",
    "decode",
    "NestedMessage",
    "MessageArray",
    "Int8Field",
    "Int16Field",
    "Int32Field",
    "UInt8Field",
    "UInt16Field",
    "UInt32Field",
    "Float32Field",
    "Float64Field",
    "BoolField",
    "BytesField",
    "StrField",
    "Utf8Field",
    # Registry
    "PacketRegistry",
    "register_message",
    "decode_by_id",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Exceptions
    "WirepackError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "VarIntOverflowError",
    "TransportError",
    # Version
    "__version__",
]
