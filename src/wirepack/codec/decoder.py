"""Binary decoder for packet definitions and Pydantic messages.

This module provides ``decode_message(data, definitions)``, which reads the
packet identifier and hands the rest of the buffer to the matching
definition, and ``decode(message_class, data)`` for BaseMessage classes.
"""

from __future__ import annotations

import struct
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from ..exceptions import DecodeError
from .cursor import Cursor
from .datatype import ReadBuffer
from .definition import PacketDefinition, StructDefinition
from .schema import MessageSchema
from .varint import decode_varint

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class DecodedPacket:
    """A packet whose identifier matched a registered definition.

    Attributes:
        id: Packet identifier
        value: Decoded fields keyed by name (or a message instance)
        consumed: Number of bytes read, identifier included
    """

    id: int
    value: Any
    consumed: int


@dataclass(frozen=True)
class UnregisteredPacket:
    """A packet whose identifier has no registered definition.

    Only the identifier was read; the rest of the buffer is left untouched.

    Attributes:
        id: Packet identifier
        consumed: Number of bytes read (the identifier's VarInt width)
    """

    id: int
    consumed: int


DecodeResult = Union[DecodedPacket, UnregisteredPacket]


@contextmanager
def _truncation_errors(subject: str) -> Iterator[None]:
    """Report reads past the end of the buffer as DecodeError."""
    try:
        yield
    except (IndexError, struct.error) as e:
        raise DecodeError(f"Truncated data while decoding {subject}: {e}") from e
    except (UnicodeDecodeError, TypeError) as e:
        raise DecodeError(f"Error decoding {subject}: {e}") from e


def decode_message(
    data: ReadBuffer,
    definitions: Mapping[int, PacketDefinition],
    cursor: Optional[Cursor] = None,
    strict: bool = False,
) -> DecodeResult:
    """Decode one packet using the definition registered for its identifier.

    Args:
        data: Complete packet buffer
        definitions: Mapping of packet identifier to definition
        cursor: Optional read cursor; reset before returning
        strict: Raise VarIntOverflowError on an identifier longer than 10 bytes

    Returns:
        DecodedPacket, or UnregisteredPacket when the identifier is unknown

    Raises:
        DecodeError: If the buffer ends before the declared fields do

    Example:
        >>> login = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])
        >>> decode_message(b"\\x02\\x02ab\\x05", {2: login})
        DecodedPacket(id=2, value={'name': 'ab', 'user': 5}, consumed=5)
    """
    if cursor is None:
        cursor = Cursor()
    try:
        with _truncation_errors("packet identifier"):
            packet_id = decode_varint(data, cursor, strict=strict)

        definition = definitions.get(packet_id)
        if definition is None:
            return UnregisteredPacket(id=packet_id, consumed=cursor.offset)

        with _truncation_errors(f"packet {packet_id}"):
            value = definition.decode(data, cursor)
        return DecodedPacket(id=packet_id, value=value, consumed=cursor.offset)
    finally:
        cursor.reset()


def decode_struct(definition: StructDefinition, data: ReadBuffer) -> Dict[str, Any]:
    """Decode a bare struct body.

    Args:
        definition: Struct definition describing the body
        data: Buffer starting at the first field

    Returns:
        Decoded fields keyed by name

    Raises:
        DecodeError: If the buffer ends before the declared fields do
    """
    with _truncation_errors("struct"):
        return definition.decode(data, Cursor())


def build_message(message_class: Type[T], fields: Mapping[str, Any]) -> T:
    """Construct a message from decoded fields.

    Raises:
        DecodeError: If the fields fail the model's validation
    """
    try:
        return message_class(**fields)
    except ValueError as e:
        raise DecodeError(f"Failed to construct {message_class.__name__}: {e}") from e


def decode(message_class: Type[T], data: ReadBuffer, strict: bool = False) -> T:
    """Decode binary data to a Pydantic message.

    For packet messages (``wire_id`` set) the leading identifier must match
    the class; otherwise the buffer is read as a bare struct.

    Args:
        message_class: Pydantic message class to decode to
        data: Binary data to decode
        strict: Raise VarIntOverflowError on an identifier longer than 10 bytes

    Returns:
        Decoded message instance

    Raises:
        SchemaError: If message schema is invalid
        DecodeError: If data is truncated, carries another packet identifier,
            or doesn't match the model

    Examples:
        ```python
        data = encode(Login(name="ab", user=5))
        decoded = decode(Login, data)
        ```
    """
    schema = MessageSchema.from_model(message_class)
    definition = schema.definition

    if isinstance(definition, PacketDefinition):
        result = decode_message(data, {definition.id: definition}, strict=strict)
        if isinstance(result, UnregisteredPacket):
            raise DecodeError(
                f"Message ID mismatch: decoded {result.id}, expected {definition.id} "
                f"for {message_class.__name__}"
            )
        fields = result.value
    else:
        fields = decode_struct(definition, data)

    return build_message(message_class, fields)
