"""Configuration for binary socket connections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class TransportConfig:
    """Connection settings for a BinarySocket.

    Network transports (WebSocket, TCP) are Transport subclasses supplied by
    the caller. The package itself ships only LoopbackTransport.

    Attributes:
        reconnect_timeout: Seconds to wait after the connection closes before
            reconnecting (default None = never reconnect). An explicit
            ``BinarySocket.close()`` never reconnects.

        max_message_bytes: Largest outgoing packet in bytes (default None =
            unlimited). Larger packets raise EncodeError before anything is sent.

    Examples:
        ```python
        from wirepack.transport import BinarySocket, LoopbackTransport, TransportConfig

        config = TransportConfig(reconnect_timeout=2.0, max_message_bytes=4096)
        socket = BinarySocket("loopback://lobby", LoopbackTransport(), config)
        ```
    """

    reconnect_timeout: Optional[float] = None
    max_message_bytes: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.reconnect_timeout is not None and self.reconnect_timeout < 0:
            raise ValueError(f"reconnect_timeout must be >= 0, got {self.reconnect_timeout}")

        if self.max_message_bytes is not None and self.max_message_bytes <= 0:
            raise ValueError(f"max_message_bytes must be > 0, got {self.max_message_bytes}")
