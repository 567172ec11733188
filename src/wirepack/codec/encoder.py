"""Binary encoder for packet definitions and Pydantic messages.

This module provides the two encoding entry points used by transports:
``encode_message(definition, value)`` for plain mappings and
``encode(message)`` for BaseMessage instances.
"""

from __future__ import annotations

import struct
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

from pydantic import BaseModel

from ..exceptions import EncodeError
from .cursor import Cursor
from .definition import PacketDefinition, StructDefinition
from .schema import MessageSchema


@contextmanager
def _encode_errors(subject: str) -> Iterator[None]:
    """Report low-level codec failures as EncodeError."""
    try:
        yield
    except KeyError as e:
        raise EncodeError(f"{subject}: missing field {e}") from e
    except (ValueError, TypeError, OverflowError, IndexError, struct.error) as e:
        raise EncodeError(f"{subject}: {e}") from e


def encode_message(
    definition: PacketDefinition, value: Mapping[str, Any], cursor: Optional[Cursor] = None
) -> bytes:
    """Encode a value as a complete packet.

    The returned buffer is always exactly
    ``varint_size(definition.id) + definition.compute_size(value)`` bytes.

    Args:
        definition: Packet definition describing the value
        value: Mapping of field name to value
        cursor: Optional write cursor; reset before returning

    Returns:
        Identifier VarInt followed by the encoded fields

    Raises:
        EncodeError: If a field is missing or a value cannot be encoded

    Example:
        >>> login = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])
        >>> encode_message(login, {"name": "ab", "user": 5})
        b'\\x02\\x02ab\\x05'
    """
    with _encode_errors(f"Packet {definition.id}"):
        return definition.create(value, cursor)


def encode_struct(definition: StructDefinition, value: Mapping[str, Any]) -> bytes:
    """Encode a value as a bare struct body, without an identifier.

    Args:
        definition: Struct definition describing the value
        value: Mapping of field name to value

    Returns:
        The encoded fields

    Raises:
        EncodeError: If a field is missing or a value cannot be encoded
    """
    cursor = Cursor()
    with _encode_errors("Struct"):
        buffer = bytearray(definition.compute_size(value))
        definition.encode(buffer, cursor, value)

    if cursor.offset != len(buffer):
        raise EncodeError(f"Struct: wrote {cursor.offset} bytes into a {len(buffer)} byte buffer")
    return bytes(buffer)


def encode(message: BaseModel) -> bytes:
    """Encode a Pydantic message to its binary wire form.

    Messages whose class sets ``wire_id`` are written as packets (identifier
    then fields); others are written as a bare struct.

    Args:
        message: Pydantic message instance to encode

    Returns:
        Binary representation

    Raises:
        SchemaError: If message schema is invalid
        EncodeError: If a field value cannot be encoded or the message
            exceeds ``wire_max_bytes``

    Examples:
        ```python
        from typing import ClassVar, Optional

        from wirepack import BaseMessage, StrField, UInt8Field, encode

        class Login(BaseMessage):
            name: StrField
            user: UInt8Field

            wire_id: ClassVar[Optional[int]] = 2

        encode(Login(name="ab", user=5))  # b'\\x02\\x02ab\\x05'
        ```
    """
    schema = MessageSchema.from_model(type(message))
    values = schema.values_of(message)

    if isinstance(schema.definition, PacketDefinition):
        encoded = encode_message(schema.definition, values)
    else:
        encoded = encode_struct(schema.definition, values)

    if schema.max_bytes is not None and len(encoded) > schema.max_bytes:
        raise EncodeError(
            f"Encoded message size ({len(encoded)} bytes) exceeds "
            f"wire_max_bytes={schema.max_bytes}"
        )

    return encoded
