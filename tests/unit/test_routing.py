"""Tests for the packet registry and listener dispatch."""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional

import pytest

from wirepack import (
    BaseMessage,
    Bool,
    DecodedPacket,
    DecodeError,
    PacketDefinition,
    PacketRegistry,
    StrField,
    UInt8Field,
    UnregisteredPacket,
    decode_by_id,
    encode,
    register_message,
)


class Ping(BaseMessage):
    """Packet registered by model class."""

    seq: UInt8Field

    wire_id: ClassVar[Optional[int]] = 40


class Pong(BaseMessage):
    """Second packet for the global registry."""

    seq: UInt8Field
    note: StrField

    wire_id: ClassVar[Optional[int]] = 41


class Clash(BaseMessage):
    """Packet reusing Ping's identifier."""

    flag: UInt8Field

    wire_id: ClassVar[Optional[int]] = 40


class Anonymous(BaseMessage):
    """Struct without an identifier."""

    seq: UInt8Field


class TestDefinitions:
    """Test registering packet definitions."""

    def test_define_packet(self, login_packet: PacketDefinition) -> None:
        """Test a defined packet is visible by identifier."""
        registry = PacketRegistry()
        registry.define_packet(login_packet)
        assert 2 in registry
        assert registry.definitions[2] is login_packet

    def test_definitions_read_only(self, registry: PacketRegistry) -> None:
        """Test the definitions view cannot be mutated."""
        with pytest.raises(TypeError):
            registry.definitions[5] = None  # type: ignore[index]

    def test_redefine_same_is_noop(self, registry: PacketRegistry, login_packet: PacketDefinition) -> None:
        """Test defining the same packet twice."""
        registry.define_packet(login_packet)
        assert len(registry.definitions) == 1

    def test_identifier_collision(self, registry: PacketRegistry) -> None:
        """Test a different packet with a taken identifier."""
        other = PacketDefinition(2, {"flag": Bool}, ["flag"])
        with pytest.raises(ValueError, match="Packet ID 2 already registered"):
            registry.define_packet(other)

    def test_define_packets(self) -> None:
        """Test defining several packets at once."""
        registry = PacketRegistry()
        first = PacketDefinition(1, {}, [])
        second = PacketDefinition(2, {}, [])
        registry.define_packets(first, second)
        assert set(registry.definitions) == {1, 2}


class TestModelRegistration:
    """Test registering message classes."""

    def test_register_message(self) -> None:
        """Test a model class defines its packet."""
        registry = PacketRegistry()
        registry.register_message(Ping)
        assert 40 in registry
        assert registry.message_class(40) is Ping

    def test_requires_identifier(self) -> None:
        """Test a struct model cannot be registered."""
        with pytest.raises(ValueError, match="has no wire_id"):
            PacketRegistry().register_message(Anonymous)

    def test_collision(self) -> None:
        """Test two classes with the same identifier."""
        registry = PacketRegistry()
        registry.register_message(Ping)
        with pytest.raises(ValueError, match="already registered to Ping"):
            registry.register_message(Clash)

    def test_decode_builds_model(self) -> None:
        """Test decoding a model-registered packet yields an instance."""
        registry = PacketRegistry()
        registry.register_message(Ping)
        result = registry.decode(encode(Ping(seq=3)))
        assert result == DecodedPacket(id=40, value=Ping(seq=3), consumed=2)


class TestDispatch:
    """Test listener and interceptor delivery."""

    def test_listener_receives_value(self, registry: PacketRegistry, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test listeners get the decoded dict."""
        received: list[Any] = []
        registry.add_listener(login_packet, received.append)

        result = registry.dispatch(login_bytes)

        assert received == [{"name": "ab", "user": 5}]
        assert isinstance(result, DecodedPacket)

    def test_model_listener(self) -> None:
        """Test listeners registered by class get model instances."""
        registry = PacketRegistry()
        registry.register_message(Ping)
        received: list[Any] = []
        registry.add_listener(Ping, received.append)

        registry.dispatch(encode(Ping(seq=9)))

        assert received == [Ping(seq=9)]

    def test_listener_order(self, registry: PacketRegistry, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test the interceptor runs first, then listeners in registration order."""
        calls: list[str] = []
        registry.set_interceptor(lambda packet_id, value: calls.append(f"intercept {packet_id}"))
        registry.add_listener(login_packet, lambda value: calls.append("first"))
        registry.add_listener(login_packet, lambda value: calls.append("second"))

        registry.dispatch(login_bytes)

        assert calls == ["intercept 2", "first", "second"]

    def test_clear_interceptor(self, registry: PacketRegistry, login_bytes: bytes) -> None:
        """Test the interceptor can be removed."""
        calls: list[int] = []
        registry.set_interceptor(lambda packet_id, value: calls.append(packet_id))
        registry.set_interceptor(None)
        registry.dispatch(login_bytes)
        assert calls == []

    def test_remove_listener(self, registry: PacketRegistry, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test removing one listener keeps the others."""
        kept: list[Any] = []
        removed: list[Any] = []
        registry.add_listener(login_packet, kept.append)
        registry.add_listener(login_packet, removed.append)

        registry.remove_listener(login_packet, removed.append)
        registry.dispatch(login_bytes)

        assert len(kept) == 1
        assert removed == []

    def test_remove_all_listeners(self, registry: PacketRegistry, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test removing every listener of a packet."""
        received: list[Any] = []
        registry.add_listener(login_packet, received.append)
        registry.add_listener(login_packet, received.append)

        registry.remove_listener(login_packet)
        registry.dispatch(login_bytes)

        assert received == []

    def test_remove_unknown_listener(self, registry: PacketRegistry, login_packet: PacketDefinition) -> None:
        """Test removing from a packet without listeners does nothing."""
        registry.remove_listener(login_packet, print)

    def test_failing_listener(
        self,
        registry: PacketRegistry,
        login_packet: PacketDefinition,
        login_bytes: bytes,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a raising listener is logged and does not stop the others."""
        received: list[Any] = []

        def broken(value: Any) -> None:
            raise RuntimeError("listener bug")

        registry.add_listener(login_packet, broken)
        registry.add_listener(login_packet, received.append)

        with caplog.at_level(logging.ERROR, logger="wirepack.routing"):
            registry.dispatch(login_bytes)

        assert len(received) == 1
        assert "failed for packet 2" in caplog.text
        assert "listener bug" in caplog.text

    def test_unregistered_logged(self, registry: PacketRegistry, caplog: pytest.LogCaptureFixture) -> None:
        """Test unknown identifiers are logged in hex and discarded."""
        with caplog.at_level(logging.ERROR, logger="wirepack.routing"):
            result = registry.dispatch(b"\xff\x01\x00\x00")

        assert result == UnregisteredPacket(id=255, consumed=2)
        assert "No packet definition defined for ff" in caplog.text

    def test_truncated_raises(self, registry: PacketRegistry, login_bytes: bytes) -> None:
        """Test truncated packets propagate as DecodeError."""
        with pytest.raises(DecodeError):
            registry.dispatch(login_bytes[:2])


class TestGlobalRegistry:
    """Test register_message and decode_by_id."""

    def test_decode_by_id(self) -> None:
        """Test decoding picks the class from the identifier."""
        register_message(Ping)
        register_message(Pong)

        assert decode_by_id(encode(Ping(seq=1))) == Ping(seq=1)
        assert decode_by_id(encode(Pong(seq=2, note="hi"))) == Pong(seq=2, note="hi")

    def test_register_twice(self) -> None:
        """Test registering the same class again is harmless."""
        register_message(Ping)
        register_message(Ping)

    def test_empty_data(self) -> None:
        """Test empty input."""
        with pytest.raises(DecodeError, match="empty"):
            decode_by_id(b"")

    def test_unknown_identifier(self) -> None:
        """Test an identifier no class registered."""
        with pytest.raises(DecodeError, match="Unknown message ID: 127"):
            decode_by_id(b"\x7f")
