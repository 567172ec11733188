"""Schema introspection for Pydantic models.

This module turns a Pydantic model into the struct or packet definition that
encodes it. Each field declares its wire codec as ``Annotated`` metadata:

    class Login(BaseMessage):
        name: Annotated[str, Str]
        user: Annotated[int, UInt8]

        wire_id: ClassVar[Optional[int]] = 2

Fields annotated with another BaseModel subclass, or a list of one, are
encoded as a nested struct or a struct array without extra metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from .datatype import DataType
from .definition import PacketDefinition, StructDefinition


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Field name
        python_type: Python type annotation
        data_type: Wire codec used for the field
    """

    name: str
    python_type: Any
    data_type: DataType[Any]

    @property
    def fixed_size(self) -> Optional[int]:
        """Encoded size in bytes, or None when it depends on the value."""
        if self.data_type.is_fixed:
            return self.data_type.size_of(None)
        return None


class MessageSchema:
    """Wire schema for an entire message.

    Example:
        >>> schema = MessageSchema.from_model(Login)
        >>> [field.name for field in schema.fields]
        ['name', 'user']
        >>> schema.definition.id
        2
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a Pydantic model.

        Args:
            model_class: Pydantic model class to introspect

        Raises:
            SchemaError: If a field has no wire codec or the model options are invalid
        """
        self.model_class = model_class
        self.wire_id: Optional[int] = getattr(model_class, "wire_id", None)
        self.max_bytes: Optional[int] = getattr(model_class, "wire_max_bytes", None)

        layout: Dict[str, FieldSchema] = {}
        for field_name, field_info in model_class.model_fields.items():
            layout[field_name] = self._extract_field_schema(field_name, field_info)

        order = self._field_order(layout)
        data_types = {name: field.data_type for name, field in layout.items()}
        if self.wire_id is None:
            self.definition: StructDefinition = StructDefinition(data_types, order)
        else:
            self.definition = PacketDefinition(self.wire_id, data_types, order)

        self.fields: List[FieldSchema] = [layout[name] for name in self.definition.field_names]

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> MessageSchema:
        """Return the (cached) schema for a Pydantic model.

        Args:
            model_class: Pydantic model class

        Returns:
            MessageSchema instance
        """
        return _schema_for(model_class)

    @property
    def is_packet(self) -> bool:
        return isinstance(self.definition, PacketDefinition)

    def values_of(self, message: BaseModel) -> Dict[str, Any]:
        """Collect a message's field values without converting nested models."""
        return {field.name: getattr(message, field.name) for field in self.fields}

    def _field_order(self, layout: Mapping[str, FieldSchema]) -> Tuple[str, ...]:
        order = getattr(self.model_class, "wire_order", None)
        if order is None:
            return tuple(layout)
        if isinstance(order, str):
            raise SchemaError(
                f"{self.model_class.__name__}.wire_order must be a sequence of field names"
            )
        return tuple(order)

    def _extract_field_schema(self, name: str, field_info: FieldInfo) -> FieldSchema:
        """Extract schema information from a Pydantic FieldInfo.

        Args:
            name: Field name
            field_info: Pydantic FieldInfo object

        Returns:
            FieldSchema with the field's wire codec
        """
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        data_types = [item for item in field_info.metadata if isinstance(item, DataType)]
        if len(data_types) > 1:
            raise SchemaError(f"Field {name}: more than one wire codec declared")
        if data_types:
            return FieldSchema(name=name, python_type=annotation, data_type=data_types[0])

        # Import here to avoid circular dependency
        from ..models.fields import MessageArray, NestedMessage

        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return FieldSchema(name=name, python_type=annotation, data_type=NestedMessage(annotation))

        if get_origin(annotation) is list:
            args = get_args(annotation)
            if args and isinstance(args[0], type) and issubclass(args[0], BaseModel):
                return FieldSchema(
                    name=name, python_type=annotation, data_type=MessageArray(args[0])
                )

        raise SchemaError(
            f"Field {name}: no wire codec for {annotation!r}. "
            f"Declare one with Annotated[..., <DataType>]."
        )


@lru_cache(maxsize=None)
def _schema_for(model_class: Type[BaseModel]) -> MessageSchema:
    return MessageSchema(model_class)
