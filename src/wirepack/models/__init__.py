"""Pydantic message modeling for wirepack.

This module provides the BaseMessage class and field utilities for defining
binary messages using Pydantic.
"""

from __future__ import annotations

from .base import BaseMessage
from .fields import (
    BoolField,
    BytesField,
    Float32Field,
    Float64Field,
    Int8Field,
    Int16Field,
    Int32Field,
    MessageArray,
    NestedMessage,
    StrField,
    UInt8Field,
    UInt16Field,
    UInt32Field,
    Utf8Field,
)

__all__ = [
    "BaseMessage",
    "NestedMessage",
    "MessageArray",
    "Int8Field",
    "Int16Field",
    "Int32Field",
    "UInt8Field",
    "UInt16Field",
    "UInt32Field",
    "Float32Field",
    "Float64Field",
    "BoolField",
    "BytesField",
    "StrField",
    "Utf8Field",
]
