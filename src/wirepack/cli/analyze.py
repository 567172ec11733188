"""Load packet definitions from a Python file, print their layouts and decode captures."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from ..codec.decoder import DecodedPacket, build_message, decode_message
from ..codec.definition import PacketDefinition, StructDefinition
from ..codec.schema import MessageSchema
from ..codec.varint import varint_size
from ..exceptions import WirepackError
from ..models.base import BaseMessage

WIDTH = 60


class CatalogError(WirepackError):
    """A definitions file could not be loaded or has no matching packet."""


@dataclass(frozen=True)
class CatalogEntry:
    """One struct or packet found in a definitions file.

    Attributes:
        name: Class or variable name
        definition: Compiled definition
        max_bytes: ``wire_max_bytes`` of a message class, if set
        model: Message class the definition came from, if any
    """

    name: str
    definition: StructDefinition
    max_bytes: Optional[int] = None
    model: Optional[Type[BaseModel]] = None

    @property
    def packet_id(self) -> Optional[int]:
        if isinstance(self.definition, PacketDefinition):
            return self.definition.id
        return None


@dataclass
class Catalog:
    """Every message class and module-level definition of one file."""

    path: Path
    entries: List[CatalogEntry] = field(default_factory=list)

    def packets(self) -> Dict[int, CatalogEntry]:
        """Entries with an identifier. Message classes win identifier clashes."""
        by_id: Dict[int, CatalogEntry] = {}
        for entry in self.entries:
            if entry.packet_id is not None:
                by_id.setdefault(entry.packet_id, entry)
        return by_id

    def select(self, packet_id: int) -> List[CatalogEntry]:
        selected = [entry for entry in self.entries if entry.packet_id == packet_id]
        if not selected:
            raise CatalogError(f"No packet with identifier {packet_id} in {self.path}")
        return selected


def load_catalog(file_path: Path) -> Catalog:
    """Import ``file_path`` and collect its messages and definitions.

    Message classes must be defined in the file itself; imported ones are
    skipped. Definitions are picked up from any module-level name.

    Raises:
        CatalogError: If the file is missing or fails to import
    """
    if not file_path.is_file():
        raise CatalogError(f"File not found: {file_path}")

    module_name = f"_wirepack_catalog_{file_path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise CatalogError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    # Pydantic resolves postponed annotations through sys.modules
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise CatalogError(f"Importing {file_path} failed: {e}") from e

    catalog = Catalog(path=file_path)
    for name, obj in inspect.getmembers(module, inspect.isclass):
        if obj is BaseMessage or not issubclass(obj, BaseMessage):
            continue
        if obj.__module__ != module_name:
            continue
        schema = MessageSchema.from_model(obj)
        catalog.entries.append(CatalogEntry(name, schema.definition, schema.max_bytes, obj))

    for name, obj in inspect.getmembers(module):
        if isinstance(obj, StructDefinition):
            catalog.entries.append(CatalogEntry(name, obj))
    return catalog


def print_catalog(catalog: Catalog, packet_id: Optional[int] = None) -> None:
    """Print the layout of every entry, or only of those with ``packet_id``."""
    entries = catalog.entries if packet_id is None else catalog.select(packet_id)
    if not entries:
        print(f"No messages or packet definitions found in {catalog.path}")
        return

    print("|" * 7, "wirepack: Binary Wire Codec", "|" * 7)
    print(f"{len(entries)} definition{'s' if len(entries) != 1 else ''} loaded.")
    print("Field sizes are in bytes; 'variable' sizes depend on the value.")
    print()

    for entry in entries:
        analyze_definition(entry.name, entry.definition, entry.max_bytes)


def analyze_definition(
    name: str, definition: StructDefinition, max_bytes: Optional[int] = None
) -> None:
    """Print a field-by-field breakdown of one definition.

    Args:
        name: Display name
        definition: Struct or packet definition to analyze
        max_bytes: Allowed maximum size, if the message declares one
    """
    if isinstance(definition, PacketDefinition):
        print(f"{'=' * 19} {definition.id}: {name} {'=' * 19}")
    else:
        print(f"{'=' * 19} {name} {'=' * 19}")

    sizes = [
        data_type.size_of(None) if data_type.is_fixed else None
        for _field_name, data_type in definition.fields
    ]
    body_size = None if None in sizes else sum(sizes)

    if isinstance(definition, PacketDefinition):
        id_size = varint_size(definition.id)
        print(f"        identifier{'.' * (WIDTH - 20 - len(str(id_size)))}{id_size} bytes")

    body = "variable" if body_size is None else f"{body_size} bytes"
    print(f"        body{'.' * (WIDTH - 14 - len(body))}{body}")
    if max_bytes is not None:
        print(f"Allowed maximum size of message: {max_bytes} bytes")
    print()

    print(f"{'-' * 28} Body {'-' * 28}")
    for i, (field_name, data_type) in enumerate(definition.fields, 1):
        field_desc = f"{i}. {field_name} ({data_type.name})"
        size = f"{data_type.size_of(None)} bytes" if data_type.is_fixed else "variable"
        dots = "." * max(1, WIDTH - len(field_desc) - len(size))
        print(f"        {field_desc}{dots}{size}")

    print()


def decode_hex(catalog: Catalog, hex_data: str) -> None:
    """Decode one hex-encoded packet with the catalog's definitions and print it.

    Whitespace and ``:`` separators in ``hex_data`` are ignored.

    Raises:
        CatalogError: If the hex is malformed or the identifier is unknown
        DecodeError: If the packet is truncated
    """
    try:
        data = bytes.fromhex(hex_data.replace(":", " "))
    except ValueError as e:
        raise CatalogError(f"Invalid hex data: {e}") from e

    packets = catalog.packets()
    result = decode_message(data, {packet_id: entry.definition for packet_id, entry in packets.items()})
    if not isinstance(result, DecodedPacket):
        raise CatalogError(f"No definition for packet identifier 0x{result.id:x} in {catalog.path}")

    entry = packets[result.id]
    value: Any = result.value
    if entry.model is not None:
        value = build_message(entry.model, value)

    print(f"Packet {result.id} ({entry.name}), {result.consumed} bytes")
    fields = value.model_dump() if isinstance(value, BaseModel) else value
    for field_name in entry.definition.field_names:
        print(f"  {field_name} = {fields[field_name]!r}")

    trailing = len(data) - result.consumed
    if trailing:
        print(f"{trailing} trailing byte{'s' if trailing != 1 else ''} not decoded")
