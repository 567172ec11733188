"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Callable

import pytest

from wirepack import PacketDefinition, PacketRegistry, Str, UInt8
from wirepack.transport import LoopbackTransport


class RecordingScheduler:
    """Stand-in for threading.Timer that records reconnects instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, Callable[[], None]]] = []

    def __call__(self, delay: float, action: Callable[[], None]) -> None:
        self.calls.append((delay, action))

    def run_pending(self) -> None:
        """Run every recorded action once, in order."""
        calls, self.calls = self.calls, []
        for _delay, action in calls:
            action()


@pytest.fixture
def login_packet() -> PacketDefinition:
    """The LOGIN packet: id 2, name then user."""
    return PacketDefinition(2, {"user": UInt8, "name": Str}, ["name", "user"])


@pytest.fixture
def login_bytes() -> bytes:
    """LOGIN {name: "ab", user: 5} on the wire."""
    return bytes([0x02, 0x02, 0x61, 0x62, 0x05])


@pytest.fixture
def registry(login_packet: PacketDefinition) -> PacketRegistry:
    """Registry with the LOGIN packet defined."""
    registry = PacketRegistry()
    registry.define_packet(login_packet)
    return registry


@pytest.fixture
def loopback() -> LoopbackTransport:
    """Echoing in-memory transport."""
    return LoopbackTransport()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    """Reconnect scheduler that runs only when told to."""
    return RecordingScheduler()
