"""Unit tests for encoding/decoding."""

from __future__ import annotations

import pytest

from wirepack import (
    ArrayType,
    Bool,
    ByteArray,
    Cursor,
    DecodedPacket,
    DecodeError,
    EncodeError,
    Float32,
    MapType,
    PacketDefinition,
    Str,
    StructArray,
    StructDefinition,
    UInt8,
    UInt16,
    UnregisteredPacket,
    VarInt,
    VarIntOverflowError,
    decode_message,
    decode_struct,
    encode_message,
    encode_struct,
)

# A chat packet that uses every composite
CHAT = PacketDefinition(
    20,
    {
        "room": UInt16,
        "text": Str,
        "attachments": ArrayType(ByteArray),
        "mentions": StructArray({"user": UInt8, "name": Str}, ["user", "name"]),
        "reactions": MapType(Str, VarInt),
        "pinned": Bool,
        "score": Float32,
    },
    ["room", "text", "attachments", "mentions", "reactions", "pinned", "score"],
)


class TestEncodeMessage:
    """Test packet encoding."""

    def test_login(self, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test LOGIN {name: "ab", user: 5}."""
        assert encode_message(login_packet, {"name": "ab", "user": 5}) == login_bytes

    def test_length_is_exact(self) -> None:
        """Test the buffer is identifier size plus body size."""
        value = {
            "room": 1,
            "text": "hello",
            "attachments": [b"\x00\x01", b""],
            "mentions": [{"user": 3, "name": "cy"}],
            "reactions": {"+1": 4},
            "pinned": True,
            "score": 0.5,
        }
        data = encode_message(CHAT, value)
        assert len(data) == 1 + CHAT.compute_size(value)

    def test_missing_field(self, login_packet: PacketDefinition) -> None:
        """Test a value without every field."""
        with pytest.raises(EncodeError, match="missing field 'user'"):
            encode_message(login_packet, {"name": "ab"})

    def test_out_of_range(self, login_packet: PacketDefinition) -> None:
        """Test a value outside its codec's range."""
        with pytest.raises(EncodeError, match="Packet 2"):
            encode_message(login_packet, {"name": "ab", "user": 256})

    def test_wrong_type(self, login_packet: PacketDefinition) -> None:
        """Test a value of the wrong Python type."""
        with pytest.raises(EncodeError):
            encode_message(login_packet, {"name": 12, "user": 1})

    def test_cursor_reused(self, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test a caller cursor is reset after each call."""
        cursor = Cursor()
        for _ in range(3):
            assert encode_message(login_packet, {"name": "ab", "user": 5}, cursor) == login_bytes
            assert cursor.offset == 0


class TestDecodeMessage:
    """Test packet decoding."""

    def test_login(self, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test decoding LOGIN by identifier."""
        result = decode_message(login_bytes, {2: login_packet})
        assert result == DecodedPacket(id=2, value={"name": "ab", "user": 5}, consumed=5)

    def test_unregistered(self, login_bytes: bytes) -> None:
        """Test an identifier with no definition reads only the identifier."""
        result = decode_message(login_bytes, {})
        assert result == UnregisteredPacket(id=2, consumed=1)

    def test_unregistered_multi_byte_identifier(self) -> None:
        """Test consumed is the identifier's VarInt width."""
        result = decode_message(b"\xac\x02\x00\x00", {})
        assert result == UnregisteredPacket(id=300, consumed=2)

    def test_selects_definition_by_identifier(self, login_packet: PacketDefinition) -> None:
        """Test the identifier picks the definition."""
        other = PacketDefinition(3, {"flag": Bool}, ["flag"])
        definitions = {login_packet.id: login_packet, other.id: other}
        result = decode_message(b"\x03\x01", definitions)
        assert isinstance(result, DecodedPacket)
        assert result.value == {"flag": True}

    def test_round_trip(self) -> None:
        """Test a packet with every composite survives."""
        value = {
            "room": 65535,
            "text": "x" * 1000,
            "attachments": [b"", b"\xff" * 300],
            "mentions": [{"user": i, "name": str(i)} for i in range(20)],
            "reactions": {"+1": 2, "heart": 100000},
            "pinned": False,
            "score": -2.25,
        }
        data = encode_message(CHAT, value)
        result = decode_message(data, {CHAT.id: CHAT})
        assert isinstance(result, DecodedPacket)
        assert result.value == value
        assert result.consumed == len(data)

    def test_trailing_bytes_not_consumed(self, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test consumed stops at the end of the packet."""
        result = decode_message(login_bytes + b"\x99", {2: login_packet})
        assert result.consumed == 5

    @pytest.mark.parametrize("cut", [0, 1, 2, 3, 4])
    def test_truncated(self, login_packet: PacketDefinition, login_bytes: bytes, cut: int) -> None:
        """Test every truncation of LOGIN is a DecodeError."""
        with pytest.raises(DecodeError, match="Truncated data"):
            decode_message(login_bytes[:cut], {2: login_packet})

    def test_declared_length_past_end(self, login_packet: PacketDefinition) -> None:
        """Test a string length running past the buffer."""
        with pytest.raises(DecodeError, match="packet 2"):
            decode_message(b"\x02\x09ab\x05", {2: login_packet})

    def test_strict_identifier(self, login_packet: PacketDefinition) -> None:
        """Test strict mode rejects an oversized identifier."""
        data = b"\xff" * 10 + b"\x01"
        with pytest.raises(VarIntOverflowError):
            decode_message(data, {2: login_packet}, strict=True)

    def test_cursor_reset(self, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test a caller cursor is reset, also after a failure."""
        cursor = Cursor()
        decode_message(login_bytes, {2: login_packet}, cursor)
        assert cursor.offset == 0

        with pytest.raises(DecodeError):
            decode_message(login_bytes[:3], {2: login_packet}, cursor)
        assert cursor.offset == 0

    def test_accepts_memoryview(self, login_packet: PacketDefinition, login_bytes: bytes) -> None:
        """Test decoding from a memoryview."""
        result = decode_message(memoryview(login_bytes), {2: login_packet})
        assert result.value == {"name": "ab", "user": 5}


class TestStructBodies:
    """Test encoding without an identifier."""

    def test_round_trip(self) -> None:
        """Test a bare struct body."""
        definition = StructDefinition({"a": UInt8, "b": Str}, ["b", "a"])
        data = encode_struct(definition, {"a": 1, "b": "z"})
        assert data == b"\x01z\x01"
        assert decode_struct(definition, data) == {"a": 1, "b": "z"}

    def test_encode_error(self) -> None:
        """Test bad values are reported as EncodeError."""
        definition = StructDefinition({"a": UInt8}, ["a"])
        with pytest.raises(EncodeError, match="Struct"):
            encode_struct(definition, {"a": -1})

    def test_decode_truncated(self) -> None:
        """Test short bodies are reported as DecodeError."""
        definition = StructDefinition({"a": UInt16}, ["a"])
        with pytest.raises(DecodeError, match="struct"):
            decode_struct(definition, b"\x01")
