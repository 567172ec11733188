"""In-memory loopback transport for tests and local development.

Every message sent is handed straight back to the rx callbacks, which makes
the full encode -> send -> receive -> decode -> dispatch path testable without
a network. ``drop()`` simulates the remote end closing the connection.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from wirepack.exceptions import TransportError
from wirepack.transport.driver import Transport

logger = logging.getLogger(__name__)


class LoopbackTransport(Transport):
    """Transport that echoes every sent message back to its rx callbacks.

    Delivery is synchronous: ``send`` returns after every rx callback ran.

    Attributes:
        url: URL of the current (or last) connection
        sent: Every message sent, in order
        connect_count: Number of successful connect() calls

    Examples:
        ```python
        transport = LoopbackTransport()
        socket = BinarySocket("loopback://", transport)
        socket.define_packet(LOGIN)
        socket.add_listener(LOGIN, print)
        socket.send(LOGIN, {"name": "ab", "user": 5})   # prints the decoded dict
        ```
    """

    def __init__(self, echo: bool = True) -> None:
        """Initialize the loopback transport.

        Args:
            echo: Deliver sent messages back to the rx callbacks (default True)
        """
        self.echo = echo
        self.url: Optional[str] = None
        self.sent: list[bytes] = []
        self.connect_count = 0
        self._connected = False
        self._rx_callbacks: list[Callable[[bytes], None]] = []
        self._open_callbacks: list[Callable[[], None]] = []
        self._close_callbacks: list[Callable[[], None]] = []

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self, url: str) -> None:
        if self._connected:
            raise TransportError(f"Already connected to {self.url}")

        self.url = url
        self._connected = True
        self.connect_count += 1
        logger.info("Loopback connected to %s", url)
        for callback in list(self._open_callbacks):
            callback()

    def send(self, data: bytes) -> None:
        if not self._connected:
            raise TransportError("Loopback not connected. Call connect() before send().")

        self.sent.append(bytes(data))
        if self.echo:
            self.receive(data)

    def receive(self, data: bytes) -> None:
        """Deliver ``data`` to the rx callbacks as if it arrived from the peer."""
        for callback in list(self._rx_callbacks):
            callback(bytes(data))

    def attach_rx_callback(self, callback: Callable[[bytes], None]) -> None:
        self._rx_callbacks.append(callback)

    def attach_open_callback(self, callback: Callable[[], None]) -> None:
        self._open_callbacks.append(callback)

    def attach_close_callback(self, callback: Callable[[], None]) -> None:
        self._close_callbacks.append(callback)

    def disconnect(self) -> None:
        if not self._connected:
            return
        self._close()

    def drop(self) -> None:
        """Simulate the remote end closing the connection."""
        if not self._connected:
            raise TransportError("Loopback not connected")
        logger.info("Loopback connection to %s dropped", self.url)
        self._close()

    def _close(self) -> None:
        self._connected = False
        for callback in list(self._close_callbacks):
            callback()
