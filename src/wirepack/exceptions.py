"""Exception hierarchy for wirepack.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from WirepackError for easy catching of any wirepack-specific error.
"""

from __future__ import annotations


class WirepackError(Exception):
    """Base exception for all wirepack errors."""

    pass


class SchemaError(WirepackError):
    """Raised when a struct or packet definition is invalid.

    Examples:
        - Field order is not a permutation of the struct layout
        - Map key codec is not a string or integer codec
        - Negative packet identifier
        - Model field has no wire DataType
    """

    pass


class EncodeError(WirepackError):
    """Raised when encoding a value fails.

    Examples:
        - Value out of range for a fixed-width integer
        - Field missing from the value being encoded
        - A codec wrote a different number of bytes than its size rule declared
        - Message exceeds wire_max_bytes constraint
    """

    pass


class DecodeError(WirepackError):
    """Raised when decoding binary data fails.

    Examples:
        - Truncated data (insufficient bytes)
        - Packet identifier does not match the expected model
        - Decoded fields rejected by the model's validation
    """

    pass


class VarIntOverflowError(DecodeError):
    """Raised by a strict VarInt read that runs into the 10 byte cap."""

    pass


class TransportError(WirepackError):
    """Raised when a transport cannot carry a message.

    Examples:
        - Sending while the connection is closed
        - Connecting an already connected transport
    """

    pass
