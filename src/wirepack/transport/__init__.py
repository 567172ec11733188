"""Transport layer for wirepack.

The codec only turns values into buffers and back. This package carries those
buffers over a duplex connection:

- **Transport**: abstract message transport (connect, send, receive, close)
- **LoopbackTransport**: in-memory transport that echoes sent messages
- **BinarySocket**: packet encoding, listener dispatch and reconnects on top
  of any Transport
- **TransportConfig**: reconnect and size settings

## Quick Start

```python
from wirepack import PacketDefinition, Str, UInt8
from wirepack.transport import BinarySocket, LoopbackTransport

LOGIN = PacketDefinition(2, {"name": Str, "user": UInt8}, ["name", "user"])

socket = BinarySocket("loopback://", LoopbackTransport())
socket.define_packet(LOGIN)
socket.add_listener(LOGIN, lambda packet: print(packet))
socket.send(LOGIN, {"name": "ab", "user": 5})
```
"""

from __future__ import annotations

from wirepack.transport.binary_socket import BinarySocket
from wirepack.transport.config import TransportConfig
from wirepack.transport.driver import Transport
from wirepack.transport.loopback import LoopbackTransport

__all__ = [
    "Transport",
    "LoopbackTransport",
    "BinarySocket",
    "TransportConfig",
]
