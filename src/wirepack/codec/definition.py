"""Ordered struct and packet definitions.

A StructDefinition is compiled once from a layout (field name -> DataType)
and an explicit field order. The order, not the layout mapping, decides the
wire layout: fields are written back to back with no delimiters, so decoders
must read them in the identical order.

A PacketDefinition adds a numeric identifier that is written as a VarInt in
front of the struct body:

    Identifier   VarInt
    Body         <field 1> <field 2> ... <field N>
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from ..exceptions import EncodeError, SchemaError
from .cursor import Cursor
from .datatype import DataType, ReadBuffer
from .varint import encode_varint, varint_size

StructLayout = Mapping[str, DataType[Any]]


class StructDefinition:
    """Ordered list of named DataTypes describing one composite wire layout.

    Definitions are immutable after construction and safe to share between
    threads; all pass state lives in the cursor handed to each call.

    Example:
        >>> from wirepack.codec.primitives import UInt8
        >>> from wirepack.codec.composite import Str
        >>> definition = StructDefinition({"user": UInt8, "name": Str}, ["name", "user"])
        >>> definition.compute_size({"name": "ab", "user": 5})
        4
    """

    __slots__ = ("_fields",)

    def __init__(self, layout: StructLayout, order: Sequence[str]) -> None:
        """Compile a layout into its ordered field list.

        Args:
            layout: Mapping of field name to DataType
            order: Field names in wire order; must name every layout field once

        Raises:
            SchemaError: If order is not a permutation of the layout's fields
        """
        _check_order(layout, order)
        self._fields: Tuple[Tuple[str, DataType[Any]], ...] = tuple(
            (name, layout[name]) for name in order
        )

    @property
    def fields(self) -> Tuple[Tuple[str, DataType[Any]], ...]:
        """The ``(name, DataType)`` pairs in wire order."""
        return self._fields

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self._fields)

    def compute_size(self, value: Mapping[str, Any]) -> int:
        """Return the exact encoded size of ``value`` in bytes."""
        size = 0
        for name, data_type in self._fields:
            size += data_type.size.of(value[name])
        return size

    def encode(self, buffer: bytearray, cursor: Cursor, value: Mapping[str, Any]) -> None:
        """Write every field of ``value`` at the cursor in wire order."""
        for name, data_type in self._fields:
            data_type.encode(buffer, cursor, value[name])

    def decode(self, buffer: ReadBuffer, cursor: Cursor) -> Dict[str, Any]:
        """Read every field at the cursor in wire order."""
        out: Dict[str, Any] = {}
        for name, data_type in self._fields:
            out[name] = data_type.decode(buffer, cursor)
        return out

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}: {data_type.name}" for name, data_type in self._fields)
        return f"{type(self).__name__}({fields})"


class PacketDefinition(StructDefinition):
    """A StructDefinition tagged with the identifier used to demultiplex messages.

    Identifiers must be unique among the definitions registered on one
    connection; the registry rejects collisions.

    Example:
        >>> from wirepack.codec.primitives import UInt8
        >>> from wirepack.codec.composite import Str
        >>> packet = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])
        >>> packet.create({"name": "ab", "user": 5}).hex()
        '0202616205'
    """

    __slots__ = ("_id",)

    def __init__(self, packet_id: int, layout: StructLayout, order: Sequence[str]) -> None:
        """Create a packet definition.

        Args:
            packet_id: Non-negative packet identifier
            layout: Mapping of field name to DataType
            order: Field names in wire order

        Raises:
            SchemaError: If the id is negative or the order is invalid
        """
        if not isinstance(packet_id, int) or packet_id < 0:
            raise SchemaError(f"Packet id must be a non-negative integer, got {packet_id!r}")
        super().__init__(layout, order)
        self._id = packet_id

    @property
    def id(self) -> int:
        return self._id

    def packet_size(self, value: Mapping[str, Any]) -> int:
        """Return the size of the identifier plus the encoded body."""
        return varint_size(self._id) + self.compute_size(value)

    def create(self, value: Mapping[str, Any], cursor: Optional[Cursor] = None) -> bytes:
        """Encode ``value`` into a new, exactly sized packet buffer.

        The cursor is reset before returning so it can be reused for the next
        packet. Without a cursor, a fresh one is used for this call only.

        Args:
            value: Mapping of field name to value
            cursor: Optional write cursor, must start at offset 0

        Returns:
            The identifier VarInt followed by the encoded body

        Raises:
            EncodeError: If a codec wrote a different number of bytes than its
                size rule declared
        """
        if cursor is None:
            cursor = Cursor()
        buffer = bytearray(self.packet_size(value))
        try:
            encode_varint(buffer, cursor, self._id)
            self.encode(buffer, cursor, value)
            written = cursor.offset
        finally:
            cursor.reset()

        if written != len(buffer):
            raise EncodeError(
                f"Packet {self._id}: wrote {written} bytes into a {len(buffer)} byte buffer"
            )
        return bytes(buffer)

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}: {data_type.name}" for name, data_type in self.fields)
        return f"PacketDefinition(id={self._id}, {fields})"


def _check_order(layout: StructLayout, order: Sequence[str]) -> None:
    if isinstance(order, str):
        raise SchemaError("Field order must be a sequence of names, not a string")

    seen = set()
    for name in order:
        if name not in layout:
            raise SchemaError(f"Field order names unknown field {name!r}")
        if name in seen:
            raise SchemaError(f"Field {name!r} appears more than once in field order")
        seen.add(name)

    missing = [name for name in layout if name not in seen]
    if missing:
        raise SchemaError(f"Field order omits fields: {', '.join(missing)}")
