"""Packet registry and listener dispatch for wirepack.

This module provides:
- PacketRegistry: maps packet identifiers to definitions and fans decoded
  packets out to listeners
- MESSAGE_REGISTRY / register_message / decode_by_id: a process-wide registry
  of BaseMessage classes for self-describing decoding
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Type, Union

from pydantic import BaseModel

from wirepack.codec.cursor import Cursor
from wirepack.codec.datatype import ReadBuffer
from wirepack.codec.decoder import (
    DecodedPacket,
    DecodeResult,
    UnregisteredPacket,
    build_message,
    decode_message,
)
from wirepack.codec.definition import PacketDefinition
from wirepack.codec.schema import MessageSchema
from wirepack.exceptions import DecodeError

logger = logging.getLogger(__name__)

PacketListener = Callable[[Any], Any]
PacketInterceptor = Callable[[int, Any], Any]
PacketTarget = Union[PacketDefinition, Type[BaseModel]]


class PacketRegistry:
    """Packet definitions for one connection, with their listeners.

    Each identifier maps to one definition. Packets registered through a
    BaseMessage class are delivered to listeners as message instances;
    packets registered as bare definitions are delivered as dicts.

    Example:
        >>> registry = PacketRegistry()
        >>> registry.define_packet(LOGIN)
        >>> registry.add_listener(LOGIN, lambda packet: print(packet["name"]))
        >>> registry.dispatch(b"\\x02\\x02ab\\x05")
        ab
        DecodedPacket(id=2, value={'name': 'ab', 'user': 5}, consumed=5)
    """

    def __init__(self) -> None:
        self._definitions: dict[int, PacketDefinition] = {}
        self._models: dict[int, type[BaseModel]] = {}
        self._listeners: dict[int, list[PacketListener]] = {}
        self._interceptor: Optional[PacketInterceptor] = None

    @property
    def definitions(self) -> Mapping[int, PacketDefinition]:
        """Read-only view of the registered definitions by identifier."""
        return MappingProxyType(self._definitions)

    def __contains__(self, packet_id: object) -> bool:
        return packet_id in self._definitions

    def define_packet(self, definition: PacketDefinition) -> None:
        """Register a packet definition.

        Raises:
            ValueError: If another definition already uses the identifier
        """
        existing = self._definitions.get(definition.id)
        if existing is not None:
            if existing is not definition:
                raise ValueError(
                    f"Packet ID {definition.id} already registered to {existing!r}. "
                    f"Cannot register {definition!r} with the same ID."
                )
            # Already registered, no-op
            return
        self._definitions[definition.id] = definition

    def define_packets(self, *definitions: PacketDefinition) -> None:
        for definition in definitions:
            self.define_packet(definition)

    def register_message(self, message_class: type[BaseModel]) -> None:
        """Register a message class for decoding by identifier.

        Args:
            message_class: BaseMessage subclass with a ``wire_id``

        Raises:
            ValueError: If the class has no wire_id or the ID is already taken
        """
        schema = MessageSchema.from_model(message_class)
        definition = schema.definition
        if not isinstance(definition, PacketDefinition):
            raise ValueError(
                f"{message_class.__name__} has no wire_id attribute. "
                f"Cannot register for decoding by ID."
            )

        existing_model = self._models.get(definition.id)
        if existing_model is not None and existing_model is not message_class:
            raise ValueError(
                f"Message ID {definition.id} already registered to {existing_model.__name__}. "
                f"Cannot register {message_class.__name__} with the same ID."
            )

        self.define_packet(definition)
        self._models[definition.id] = message_class

    def message_class(self, packet_id: int) -> Optional[type[BaseModel]]:
        return self._models.get(packet_id)

    def add_listener(self, target: PacketTarget, handler: PacketListener) -> None:
        """Call ``handler`` with every decoded packet of the target's identifier."""
        self._listeners.setdefault(_packet_id(target), []).append(handler)

    def remove_listener(self, target: PacketTarget, handler: Optional[PacketListener] = None) -> None:
        """Remove one listener, or every listener when ``handler`` is None."""
        packet_id = _packet_id(target)
        listeners = self._listeners.get(packet_id)
        if not listeners:
            return
        if handler is None:
            self._listeners[packet_id] = []
        else:
            self._listeners[packet_id] = [h for h in listeners if h != handler]

    def set_interceptor(self, interceptor: Optional[PacketInterceptor]) -> None:
        """Set a hook that sees ``(id, value)`` of every packet before its listeners."""
        self._interceptor = interceptor

    def decode(
        self, data: ReadBuffer, cursor: Optional[Cursor] = None, strict: bool = False
    ) -> DecodeResult:
        """Decode a packet without notifying anyone.

        Raises:
            DecodeError: If the buffer is truncated or fails model validation
        """
        result = decode_message(data, self._definitions, cursor=cursor, strict=strict)
        if isinstance(result, DecodedPacket):
            message_class = self._models.get(result.id)
            if message_class is not None:
                message = build_message(message_class, result.value)
                return DecodedPacket(id=result.id, value=message, consumed=result.consumed)
        return result

    def dispatch(
        self, data: ReadBuffer, cursor: Optional[Cursor] = None, strict: bool = False
    ) -> DecodeResult:
        """Decode a packet and deliver it to the interceptor and listeners.

        Unregistered identifiers are logged and the buffer is discarded.
        A listener that raises is logged and does not stop the others.

        Raises:
            DecodeError: If the buffer is truncated or fails model validation
        """
        result = self.decode(data, cursor=cursor, strict=strict)

        if isinstance(result, UnregisteredPacket):
            logger.error("No packet definition defined for %x", result.id)
            return result

        logger.debug("Received packet %d (%d bytes)", result.id, result.consumed)
        if self._interceptor is not None:
            self._interceptor(result.id, result.value)

        for listener in list(self._listeners.get(result.id, ())):
            try:
                listener(result.value)
            except Exception:
                logger.exception("Listener %r failed for packet %d", listener, result.id)

        return result


def _packet_id(target: PacketTarget) -> int:
    if isinstance(target, PacketDefinition):
        return target.id
    definition = MessageSchema.from_model(target).definition
    if not isinstance(definition, PacketDefinition):
        raise ValueError(f"{target.__name__} has no wire_id attribute")
    return definition.id


# ============================================================================
# Self-describing messages
# ============================================================================

# Global registry: message_id -> message_class
MESSAGE_REGISTRY = PacketRegistry()


def register_message(message_class: type[BaseModel]) -> None:
    """Register a message class in the global registry for decode_by_id().

    Args:
        message_class: BaseMessage subclass with a ``wire_id``

    Raises:
        ValueError: If message_class has no wire_id or the ID is already registered

    Example:
        >>> register_message(Login)
        >>> register_message(ChatMessage)
        >>> # Now decode_by_id() can auto-detect message type
    """
    MESSAGE_REGISTRY.register_message(message_class)


def decode_by_id(data: ReadBuffer) -> BaseModel:
    """Auto-decode a message using its embedded packet identifier.

    Args:
        data: Encoded packet

    Returns:
        Decoded message (type determined by ID)

    Raises:
        DecodeError: If the ID is not registered or data is invalid

    Example:
        >>> msg = decode_by_id(received_bytes)
        >>> if isinstance(msg, Login):
        ...     print(f"{msg.name} logged in")
    """
    if not data:
        raise DecodeError("Cannot decode empty data")

    result = MESSAGE_REGISTRY.decode(data)
    if isinstance(result, UnregisteredPacket) or MESSAGE_REGISTRY.message_class(result.id) is None:
        registered_ids = sorted(MESSAGE_REGISTRY.definitions.keys())
        raise DecodeError(
            f"Unknown message ID: {result.id}. "
            f"Registered IDs: {registered_ids}. "
            f"Did you forget to call register_message()?"
        )
    return result.value
