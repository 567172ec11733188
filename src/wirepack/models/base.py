"""Base message class and wirepack-specific Pydantic configuration.

This module provides the BaseMessage class that all wirepack messages should inherit from.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


class BaseMessage(BaseModel):
    """Base class for all wirepack messages.

    Messages inherit from this class and give every field a wire codec,
    either through the aliases in ``wirepack.models.fields`` or with
    ``Annotated[<type>, <DataType>]``.

    wirepack-specific options are configured as ClassVar attributes:

    Example:
        >>> from typing import ClassVar, Optional
        >>> class Login(BaseMessage):
        ...     user: UInt8Field
        ...     name: StrField
        ...
        ...     wire_id: ClassVar[Optional[int]] = 2
        ...     wire_order: ClassVar[Optional[tuple[str, ...]]] = ("name", "user")

    Attributes:
        wire_id: Packet identifier; messages without one encode as a bare struct
        wire_order: Field names in wire order (defaults to declaration order)
        wire_max_bytes: Maximum encoded size in bytes (optional, for validation)
    """

    model_config = ConfigDict(
        # Allow arbitrary types (for DataType metadata and custom codecs)
        arbitrary_types_allowed=True,
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    wire_id: ClassVar[int | None] = None
    wire_order: ClassVar[tuple[str, ...] | None] = None
    wire_max_bytes: ClassVar[int | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Hook called when a subclass is created.

        Options may also be given on a nested ``Config`` class; they are
        copied onto the class variables for easy access.
        """
        super().__init_subclass__(**kwargs)

        if hasattr(cls, "Config"):
            config = cls.Config
            for option in ("wire_id", "wire_order", "wire_max_bytes"):
                if hasattr(config, option):
                    setattr(cls, option, getattr(config, option))

    @classmethod
    def wire_definition(cls) -> Any:
        """Return the struct or packet definition that encodes this message."""
        from ..codec.schema import MessageSchema

        return MessageSchema.from_model(cls).definition
