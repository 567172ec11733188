"""Binary codec for wirepack.

This module provides the DataType codecs, the struct and packet definitions
built from them, and the encode/decode entry points.
"""

from __future__ import annotations

from .composite import ArrayType, ByteArray, MapType, Str, Struct, StructArray, Utf8Str
from .cursor import Cursor
from .datatype import Computed, DataType, Fixed
from .decoder import DecodedPacket, UnregisteredPacket, decode, decode_message, decode_struct
from .definition import PacketDefinition, StructDefinition
from .encoder import encode, encode_message, encode_struct
from .primitives import Bool, Float32, Float64, Int8, Int16, Int32, UInt8, UInt16, UInt32
from .schema import FieldSchema, MessageSchema
from .varint import VarInt, decode_varint, encode_varint, varint_size

__all__ = [
    "encode",
    "decode",
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
    "MessageSchema",
    "FieldSchema",
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
    # VarInt
    "VarInt",
    "varint_size",
    "encode_varint",
    "decode_varint",
    # Composites
    "ByteArray",
    "Str",
    "Utf8Str",
    "ArrayType",
    "Struct",
    "StructArray",
    "MapType",
]
