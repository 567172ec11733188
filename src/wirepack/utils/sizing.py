"""Message size calculation utilities.

This module provides functions to calculate the encoded size of messages
without actually encoding them.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from ..codec.definition import PacketDefinition
from ..codec.schema import MessageSchema
from ..codec.varint import varint_size
from ..exceptions import SchemaError


def encoded_size(message_or_class: BaseModel | type[BaseModel]) -> int:
    """Calculate the encoded size of a message in bytes.

    For an instance the size is exact, identifier included. A class only has
    a size when every field is fixed-width.

    Args:
        message_or_class: Message instance or class to calculate size for

    Returns:
        Size in bytes

    Raises:
        SchemaError: If given a class with variable-size fields

    Example:
        >>> class Position(BaseMessage):
        ...     x: Int16Field
        ...     y: Int16Field
        ...     wire_id: ClassVar[Optional[int]] = 3
        >>> encoded_size(Position)
        5  # 1 byte id + 2 + 2
        >>> encoded_size(Login(name="ab", user=5))
        5
    """
    if isinstance(message_or_class, BaseModel):
        schema = MessageSchema.from_model(type(message_or_class))
        definition = schema.definition
        values = schema.values_of(message_or_class)
        if isinstance(definition, PacketDefinition):
            return definition.packet_size(values)
        return definition.compute_size(values)

    schema = MessageSchema.from_model(message_or_class)
    total = 0
    for name, size in _fixed_sizes(schema).items():
        if size is None:
            raise SchemaError(
                f"{message_or_class.__name__}.{name} has a value-dependent size; "
                f"pass a message instance instead"
            )
        total += size
    if schema.wire_id is not None:
        total += varint_size(schema.wire_id)
    return total


def field_sizes(message_or_class: BaseModel | type[BaseModel]) -> dict[str, Optional[int]]:
    """Get the size in bytes of each field in a message, in wire order.

    Args:
        message_or_class: Message instance or class to analyze

    Returns:
        Dictionary mapping field names to their size in bytes. For a class,
        variable-size fields map to None.

    Example:
        >>> field_sizes(Login)
        {'name': None, 'user': 1}
        >>> field_sizes(Login(name="ab", user=5))
        {'name': 3, 'user': 1}
    """
    if isinstance(message_or_class, BaseModel):
        schema = MessageSchema.from_model(type(message_or_class))
        return {
            field.name: field.data_type.size_of(getattr(message_or_class, field.name))
            for field in schema.fields
        }

    return _fixed_sizes(MessageSchema.from_model(message_or_class))


def _fixed_sizes(schema: MessageSchema) -> dict[str, Optional[int]]:
    return {field.name: field.fixed_size for field in schema.fields}
