#!/usr/bin/env python3
"""Packet socket example for wirepack.

This example demonstrates:
1. Registering packets and listeners on a BinarySocket
2. Sending packets over the in-memory loopback transport
3. Replying from inside a listener
4. Reconnecting after the connection drops
"""

from __future__ import annotations

import logging
import time
from typing import Annotated, ClassVar, Optional

from wirepack import (
    BaseMessage,
    MapType,
    PacketDefinition,
    Str,
    StrField,
    StructArray,
    UInt8,
    UInt16Field,
    VarInt,
)
from wirepack.transport import BinarySocket, LoopbackTransport, TransportConfig

LOGIN = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])
ROSTER = PacketDefinition(
    3,
    {"room": Str, "members": StructArray({"user": UInt8, "name": Str}, ["user", "name"])},
    ["room", "members"],
)


class Scoreboard(BaseMessage):
    """Scores per player, keyed by name."""

    round: UInt16Field
    leader: StrField
    scores: Annotated[dict[str, int], MapType(Str, VarInt)]

    wire_id: ClassVar[Optional[int]] = 4


def main() -> None:
    """Run the loopback session example."""
    logging.basicConfig(level=logging.INFO, format="   %(name)s %(levelname)s: %(message)s")

    print("=" * 60)
    print("wirepack Loopback Session Example")
    print("=" * 60)
    print()

    print("1. Opening socket...")
    transport = LoopbackTransport()
    socket = BinarySocket("loopback://lobby", transport, TransportConfig(reconnect_timeout=0.1))
    socket.define_packets(LOGIN, ROSTER)
    socket.register_message(Scoreboard)
    print()

    # Every LOGIN is answered with the room roster
    members: list[dict] = []

    def on_login(packet: dict) -> None:
        print(f"   LOGIN from {packet['name']} (user {packet['user']})")
        members.append({"user": packet["user"], "name": packet["name"]})
        socket.send(ROSTER, {"room": "lobby", "members": members})

    socket.add_listener(LOGIN, on_login)
    socket.add_listener(ROSTER, lambda packet: print(f"   ROSTER: {packet['members']}"))
    socket.add_listener(Scoreboard, lambda board: print(f"   SCOREBOARD: {board!r}"))

    print("2. Sending LOGIN packets...")
    socket.send(LOGIN, {"name": "ab", "user": 5})
    socket.send(LOGIN, {"name": "cd", "user": 6})
    print()

    print("3. Sending a model...")
    socket.send_message(Scoreboard(round=1, leader="ab", scores={"ab": 300, "cd": 120}))
    print()

    print("4. Dropping the connection...")
    socket.add_event_listener("open", lambda: print("   reconnected"))
    transport.drop()
    time.sleep(0.5)
    print(f"   connected: {socket.connected}")
    print()

    socket.close()
    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
