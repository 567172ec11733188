#!/usr/bin/env python3
"""Basic usage example for wirepack.

This example demonstrates:
1. Defining a packet from DataTypes
2. Defining the same packet as a Pydantic message
3. Encoding to compact binary format
4. Decoding back by packet identifier
5. Calculating message sizes
"""

from __future__ import annotations

from typing import ClassVar, Optional

from wirepack import (
    BaseMessage,
    PacketDefinition,
    Str,
    StrField,
    UInt8,
    UInt8Field,
    decode,
    decode_message,
    encode,
    encode_message,
    encoded_size,
    field_sizes,
)

# Packet 2: the name is written before the user id
LOGIN = PacketDefinition(2, {"user": UInt8, "name": Str}, ["name", "user"])


class Login(BaseMessage):
    """The LOGIN packet as a Pydantic model."""

    user: UInt8Field
    name: StrField

    wire_id: ClassVar[Optional[int]] = 2
    wire_order: ClassVar[Optional[tuple[str, ...]]] = ("name", "user")


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("wirepack Basic Usage Example")
    print("=" * 60)
    print()

    # Encode from a plain mapping
    print("1. Encoding LOGIN from a dict...")
    data = encode_message(LOGIN, {"name": "ab", "user": 5})
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Hex: {data.hex(' ')}")
    print("   Layout: id=02 | name length=02 'a' 'b' | user=05")
    print()

    # Decode by identifier
    print("2. Decoding by packet identifier...")
    result = decode_message(data, {LOGIN.id: LOGIN})
    print(f"   {result}")
    print()

    # The same packet as a model
    print("3. Encoding the same packet from a Pydantic model...")
    msg = Login(user=5, name="ab")
    model_data = encode(msg)
    print(f"   Hex: {model_data.hex(' ')}")
    print(f"   Identical to the dict encoding: {model_data == data}")
    print()

    # Sizes
    print("4. Analyzing field sizes...")
    for field_name, size in field_sizes(msg).items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total with identifier: {encoded_size(msg)} bytes")
    print()

    # Verify round-trip
    print("5. Verifying round-trip...")
    decoded_msg = decode(Login, model_data)
    if decoded_msg == msg:
        print("   ✓ Round-trip successful! Messages match.")
    else:
        print("   ✗ Round-trip failed! Messages don't match.")
    print()

    # Compare to naive encoding
    print("6. Comparing to naive JSON encoding...")
    json_bytes = msg.model_dump_json().encode("utf-8")
    print(f"   wirepack size: {len(model_data)} bytes")
    print(f"   JSON size: {len(json_bytes)} bytes")
    print(f"   Compression ratio: {len(json_bytes) / len(model_data):.1f}x")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
