"""Field type helpers and utilities.

This module provides ready-made ``Annotated`` aliases that pair each wire
codec with the matching Pydantic constraints, plus DataTypes for nesting
messages inside other messages.

Example:
    >>> class Reading(BaseMessage):
    ...     sensor: UInt8Field
    ...     value: Float64Field
    >>> class Batch(BaseMessage):
    ...     station: StrField
    ...     readings: list[Reading]        # struct array, inferred
    ...     labels: Annotated[dict[str, int], MapType(Str, VarInt)]
"""

from __future__ import annotations

from typing import Annotated, Any, List, Mapping, Type, TypeVar

from pydantic import BaseModel, Field

from ..codec.composite import ByteArray, Str, Utf8Str
from ..codec.cursor import Cursor
from ..codec.datatype import Computed, DataType, ReadBuffer
from ..codec.decoder import build_message
from ..codec.primitives import Bool, Float32, Float64, Int8, Int16, Int32, UInt8, UInt16, UInt32
from ..codec.schema import MessageSchema
from ..codec.varint import decode_varint, encode_varint, varint_size

M = TypeVar("M", bound=BaseModel)

Int8Field = Annotated[int, Field(ge=-(2**7), le=2**7 - 1), Int8]
Int16Field = Annotated[int, Field(ge=-(2**15), le=2**15 - 1), Int16]
Int32Field = Annotated[int, Field(ge=-(2**31), le=2**31 - 1), Int32]
UInt8Field = Annotated[int, Field(ge=0, le=2**8 - 1), UInt8]
UInt16Field = Annotated[int, Field(ge=0, le=2**16 - 1), UInt16]
UInt32Field = Annotated[int, Field(ge=0, le=2**32 - 1), UInt32]
Float32Field = Annotated[float, Float32]
Float64Field = Annotated[float, Float64]
BoolField = Annotated[bool, Bool]
BytesField = Annotated[bytes, ByteArray]
StrField = Annotated[str, Str]
Utf8Field = Annotated[str, Utf8Str]


def _values(message: Any) -> Mapping[str, Any]:
    if isinstance(message, BaseModel):
        return MessageSchema.from_model(type(message)).values_of(message)
    return message


def NestedMessage(model_class: Type[M]) -> DataType[M]:
    """Create a DataType that encodes a whole message as a nested struct.

    The nested message's fields are written in its own wire order with no
    identifier or prefix, even when the nested class sets ``wire_id``.

    Args:
        model_class: Message class to nest

    Returns:
        DataType encoding instances of ``model_class``
    """
    definition = MessageSchema.from_model(model_class).definition

    def size(value: Any) -> int:
        return definition.compute_size(_values(value))

    def encode(buffer: bytearray, cursor: Cursor, value: Any) -> None:
        definition.encode(buffer, cursor, _values(value))

    def decode(buffer: ReadBuffer, cursor: Cursor) -> M:
        return build_message(model_class, definition.decode(buffer, cursor))

    return DataType(name=model_class.__name__, size=Computed(size), encode=encode, decode=decode)


def MessageArray(model_class: Type[M]) -> DataType[List[M]]:
    """Create a DataType for a count-prefixed list of nested messages.

    Args:
        model_class: Message class of each element

    Returns:
        DataType encoding ``list[model_class]``
    """
    definition = MessageSchema.from_model(model_class).definition

    def size(value: List[Any]) -> int:
        body = 0
        for element in value:
            body += definition.compute_size(_values(element))
        return varint_size(len(value)) + body

    def encode(buffer: bytearray, cursor: Cursor, value: List[Any]) -> None:
        encode_varint(buffer, cursor, len(value))
        for element in value:
            definition.encode(buffer, cursor, _values(element))

    def decode(buffer: ReadBuffer, cursor: Cursor) -> List[M]:
        count = decode_varint(buffer, cursor)
        return [build_message(model_class, definition.decode(buffer, cursor)) for _ in range(count)]

    return DataType(
        name=f"MessageArray[{model_class.__name__}]",
        size=Computed(size),
        encode=encode,
        decode=decode,
    )
