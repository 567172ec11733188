"""Binary packet socket on top of a Transport.

BinarySocket wires a PacketRegistry to a Transport: outgoing values are
encoded with their packet definition, incoming buffers are decoded by
identifier and fanned out to listeners. Closed connections are reopened after
``TransportConfig.reconnect_timeout`` seconds unless the socket was closed
explicitly.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Literal, Mapping, Optional

from pydantic import BaseModel

from wirepack.codec.cursor import Cursor
from wirepack.codec.definition import PacketDefinition
from wirepack.codec.encoder import encode, encode_message
from wirepack.exceptions import DecodeError, EncodeError, TransportError
from wirepack.routing import PacketInterceptor, PacketListener, PacketRegistry, PacketTarget
from wirepack.transport.config import TransportConfig
from wirepack.transport.driver import Transport

logger = logging.getLogger(__name__)

EventName = Literal["open", "close"]
EventListener = Callable[[], Any]
Scheduler = Callable[[float, Callable[[], None]], Any]


def start_timer(delay: float, action: Callable[[], None]) -> threading.Timer:
    """Run ``action`` once after ``delay`` seconds on a daemon timer thread."""
    timer = threading.Timer(delay, action)
    timer.daemon = True
    timer.start()
    return timer


class BinarySocket:
    """Packet-level wrapper around a duplex Transport.

    Writes share one cursor and reads share another, each guarded by its own
    lock, so concurrent sends (or concurrent receives) never interleave on a
    cursor. The read lock is reentrant: a listener may send, and a loopback
    peer may deliver the reply, while its own packet is being dispatched.

    Attributes:
        url: Address passed to ``Transport.connect``
        transport: Underlying transport
        config: Connection settings

    Examples:
        ```python
        from wirepack import PacketDefinition, Str, UInt8
        from wirepack.transport import BinarySocket, LoopbackTransport, TransportConfig

        LOGIN = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])

        socket = BinarySocket("loopback://", LoopbackTransport(), TransportConfig(reconnect_timeout=1.0))
        socket.define_packet(LOGIN)
        socket.add_listener(LOGIN, lambda packet: print(packet["name"]))
        socket.send(LOGIN, {"name": "ab", "user": 5})
        ```
    """

    def __init__(
        self,
        url: str,
        transport: Transport,
        config: Optional[TransportConfig] = None,
        registry: Optional[PacketRegistry] = None,
        scheduler: Scheduler = start_timer,
        auto_connect: bool = True,
    ) -> None:
        """Create the socket and (by default) open the connection.

        Args:
            url: Address to connect to
            transport: Transport carrying the binary messages
            config: Connection settings; defaults to TransportConfig()
            registry: Packet registry; a new one is created when omitted
            scheduler: ``scheduler(delay, action)`` used to schedule reconnects
            auto_connect: Connect immediately (default True)
        """
        self.url = url
        self.transport = transport
        self.config = config if config is not None else TransportConfig()
        self._registry = registry if registry is not None else PacketRegistry()
        self._scheduler = scheduler

        self._event_listeners: dict[str, list[EventListener]] = {"open": [], "close": []}
        self._write_cursor = Cursor()
        self._read_cursor = Cursor()
        self._write_lock = threading.Lock()
        self._read_lock = threading.RLock()
        self._closing = False

        transport.attach_rx_callback(self._on_message)
        transport.attach_open_callback(self._on_open)
        transport.attach_close_callback(self._on_close)

        if auto_connect:
            self.open()

    @property
    def registry(self) -> PacketRegistry:
        return self._registry

    @property
    def connected(self) -> bool:
        return self.transport.connected

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Open the connection (again, after close())."""
        self._closing = False
        self.transport.connect(self.url)

    def close(self) -> None:
        """Close the connection without scheduling a reconnect."""
        self._closing = True
        self.transport.disconnect()

    def _on_open(self) -> None:
        logger.info("Connection opened to %s", self.url)
        self._event("open")

    def _on_close(self) -> None:
        self._event("close")
        logger.info("Connection closed to %s", self.url)
        if not self._closing:
            self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        timeout = self.config.reconnect_timeout
        if timeout is not None:
            logger.debug("Reconnecting in %.1f seconds", timeout)
            self._scheduler(timeout, self._reconnect)

    def _reconnect(self) -> None:
        if self._closing or self.transport.connected:
            return
        logger.debug("Reconnecting socket")
        try:
            self.transport.connect(self.url)
        except (TransportError, OSError) as e:
            logger.warning("Reconnect to %s failed: %s", self.url, e)
            self._schedule_reconnect()

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def send(self, definition: PacketDefinition, value: Mapping[str, Any]) -> None:
        """Encode ``value`` with ``definition`` and send it.

        Raises:
            EncodeError: If the value cannot be encoded or is too large
            TransportError: If the transport is not connected
        """
        self.send_buffer(self.create_buffer(definition, value))

    def send_message(self, message: BaseModel) -> None:
        """Encode a BaseMessage packet and send it."""
        data = encode(message)
        self._check_size(data)
        self.send_buffer(data)

    def create_buffer(self, definition: PacketDefinition, value: Mapping[str, Any]) -> bytes:
        """Encode ``value`` into a packet buffer without sending it."""
        with self._write_lock:
            data = encode_message(definition, value, cursor=self._write_cursor)
        self._check_size(data)
        return data

    def send_buffer(self, data: bytes) -> None:
        """Send an already encoded packet buffer."""
        logger.debug("Sending %d bytes", len(data))
        self.transport.send(data)

    def _check_size(self, data: bytes) -> None:
        limit = self.config.max_message_bytes
        if limit is not None and len(data) > limit:
            raise EncodeError(
                f"Encoded message size ({len(data)} bytes) exceeds max_message_bytes={limit}"
            )

    # ------------------------------------------------------------------
    # Receiving
    # ------------------------------------------------------------------

    def _on_message(self, data: bytes) -> None:
        with self._read_lock:
            try:
                self._registry.dispatch(data, cursor=self._read_cursor)
            except DecodeError as e:
                logger.error("Dropping undecodable message (%d bytes): %s", len(data), e)

    # ------------------------------------------------------------------
    # Registry passthroughs
    # ------------------------------------------------------------------

    def define_packet(self, definition: PacketDefinition) -> None:
        self._registry.define_packet(definition)

    def define_packets(self, *definitions: PacketDefinition) -> None:
        self._registry.define_packets(*definitions)

    def register_message(self, message_class: type[BaseModel]) -> None:
        self._registry.register_message(message_class)

    def add_listener(self, target: PacketTarget, handler: PacketListener) -> None:
        self._registry.add_listener(target, handler)

    def remove_listener(self, target: PacketTarget, handler: Optional[PacketListener] = None) -> None:
        self._registry.remove_listener(target, handler)

    def set_interceptor(self, interceptor: Optional[PacketInterceptor]) -> None:
        self._registry.set_interceptor(interceptor)

    # ------------------------------------------------------------------
    # Connection events
    # ------------------------------------------------------------------

    def add_event_listener(self, event: EventName, listener: EventListener) -> None:
        """Call ``listener()`` whenever the connection opens or closes."""
        self._listeners_for(event).append(listener)

    def remove_event_listener(self, event: EventName, listener: Optional[EventListener] = None) -> None:
        """Remove one event listener, or all of them when ``listener`` is None."""
        listeners = self._listeners_for(event)
        if listener is None:
            self._event_listeners[event] = []
        else:
            self._event_listeners[event] = [item for item in listeners if item != listener]

    def _listeners_for(self, event: str) -> list[EventListener]:
        if event not in self._event_listeners:
            raise ValueError(f"Unknown event {event!r}, expected 'open' or 'close'")
        return self._event_listeners[event]

    def _event(self, event: str) -> None:
        for listener in list(self._event_listeners[event]):
            listener()
