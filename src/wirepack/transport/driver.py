"""Abstract interface for duplex message transports.

The codec never talks to the network itself. A Transport delivers whole
binary messages in both directions and reports when the connection opens and
closes; BinarySocket layers packet encoding, decoding and listener dispatch
on top of it.

- Transport: abstract interface
- LoopbackTransport: in-memory implementation that echoes sent messages
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class Transport(ABC):
    """Abstract interface for a message-oriented duplex connection.

    Implementations must deliver each received message to the rx callbacks as
    one complete buffer; the codec does no reassembly.

    Examples:
        ```python
        transport = LoopbackTransport()
        transport.attach_rx_callback(lambda data: print(data.hex()))
        transport.connect("loopback://")
        transport.send(b"\\x02\\x02ab\\x05")   # prints 0202616205
        transport.disconnect()
        ```
    """

    @abstractmethod
    def connect(self, url: str) -> None:
        """Open the connection to ``url``.

        Open callbacks run once the connection is usable.

        Raises:
            TransportError: If the transport is already connected or the peer
                cannot be reached
        """
        pass

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Send one complete binary message.

        Raises:
            TransportError: If the transport is not connected
        """
        pass

    @abstractmethod
    def attach_rx_callback(self, callback: Callable[[bytes], None]) -> None:
        """Register a callback invoked with every received message."""
        pass

    @abstractmethod
    def attach_open_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked when the connection opens."""
        pass

    @abstractmethod
    def attach_close_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked when the connection closes for any reason."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection. Close callbacks run afterwards."""
        pass

    @property
    @abstractmethod
    def connected(self) -> bool:
        """Whether the connection is currently open."""
        pass
