"""Field table introspection for the options model.

This module reads the ``WireSpec`` metadata attached to each model field and
builds the field table used for decode dispatch, encoding, sizing and default
resolution. The ``tag -> field`` map built here is the single source of truth
for which records are known.
"""

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Optional, Type, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from ..models.fields import FieldKind, WireSpec
from ..models.values import EnumValue
from .wire import MAX_TAG, WireType, tag_size, varint_size

_UINT64_MASK = (1 << 64) - 1


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Field name
        tag: Field tag number
        kind: Value kind
        default: Documented default (None if the field has none)
        enum_type: Enum class if the field is an enum
        repeated: Whether the field is a repeated collection
        description: Field description from the model, if any
    """

    name: str
    tag: int
    kind: FieldKind
    default: Any
    enum_type: Optional[Type[enum.IntEnum]]
    repeated: bool
    description: Optional[str] = None

    @property
    def wire_type(self) -> WireType:
        """Wire type that records of this field must carry."""
        if self.kind is FieldKind.STRING:
            return WireType.LEN
        return WireType.VARINT

    def require_enum_type(self) -> Type[enum.IntEnum]:
        """Return the enum class of an ENUM field.

        Raises:
            SchemaError: If the field has no enum type
        """
        if self.enum_type is None:
            raise SchemaError(f"Field {self.name}: no enum type declared")
        return self.enum_type

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def value_size(self, value: Any) -> int:
        """Calculate the encoded size of one value, excluding the record key.

        Args:
            value: A single element (for repeated fields) or the scalar value

        Returns:
            Number of bytes
        """
        if self.kind is FieldKind.BOOL:
            return 1
        if self.kind is FieldKind.STRING:
            length = len(value.encode("utf-8"))
            return varint_size(length) + length
        if self.kind is FieldKind.ENUM:
            value = value.raw
        return varint_size(int(value) & _UINT64_MASK)

    def record_size(self, value: Any) -> int:
        """Calculate the encoded size of one record (key + value)."""
        return tag_size(self.tag) + self.value_size(value)


class MessageSchema:
    """Field table for a model class.

    Example:
        >>> schema = MessageSchema.from_model(NanoPbOptions)
        >>> schema.by_tag[4].name
        'long_names'
        >>> schema.by_name["fallback_type"].default
        <FieldType.FT_CALLBACK: 1>
    """

    def __init__(self, model_class: Type[BaseModel]) -> None:
        """Initialize schema from a pydantic model.

        Args:
            model_class: Model whose fields carry WireSpec metadata

        Raises:
            SchemaError: If tags collide or a declaration is inconsistent
        """
        self.model_class = model_class
        self.fields: List[FieldSchema] = []
        self.by_tag: Dict[int, FieldSchema] = {}
        self.by_name: Dict[str, FieldSchema] = {}
        self._introspect()

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> MessageSchema:
        """Return the (cached) schema for a model class."""
        return _schema_for(model_class)

    def _introspect(self) -> None:
        for field_name, field_info in self.model_class.model_fields.items():
            spec = _find_wire_spec(field_info)
            if spec is None:
                # Not a wire field (e.g. unknown_fields)
                continue

            field_schema = self._extract_field_schema(field_name, field_info, spec)
            if field_schema.tag in self.by_tag:
                other = self.by_tag[field_schema.tag].name
                raise SchemaError(
                    f"Field {field_name}: tag {field_schema.tag} already used by {other}"
                )

            self.fields.append(field_schema)
            self.by_tag[field_schema.tag] = field_schema
            self.by_name[field_schema.name] = field_schema

    def _extract_field_schema(
        self, name: str, field_info: FieldInfo, spec: WireSpec
    ) -> FieldSchema:
        if spec.tag < 1 or spec.tag > MAX_TAG:
            raise SchemaError(f"Field {name}: tag {spec.tag} out of range 1-{MAX_TAG}")
        if spec.kind is FieldKind.ENUM and spec.enum_type is None:
            raise SchemaError(f"Field {name}: enum field requires an enum type")
        if spec.repeated and spec.default is not None:
            raise SchemaError(f"Field {name}: repeated fields cannot declare a default")

        base_type = _base_type(field_info.annotation)
        if spec.repeated:
            if get_origin(base_type) is not tuple:
                raise SchemaError(f"Field {name}: repeated fields must be declared as tuple")
        else:
            expected = _EXPECTED_TYPES[spec.kind]
            if not (isinstance(base_type, type) and issubclass(base_type, expected)):
                raise SchemaError(
                    f"Field {name}: annotation {field_info.annotation} does not match "
                    f"kind {spec.kind.value}"
                )

        return FieldSchema(
            name=name,
            tag=spec.tag,
            kind=spec.kind,
            default=spec.default,
            enum_type=spec.enum_type,
            repeated=spec.repeated,
            description=field_info.description,
        )

    def tags(self) -> List[int]:
        """Return all known tags in ascending order."""
        return sorted(self.by_tag)

    def fields_by_tag(self) -> List[FieldSchema]:
        """Return the field table sorted by tag number."""
        return [self.by_tag[tag] for tag in self.tags()]


def _find_wire_spec(field_info: FieldInfo) -> Optional[WireSpec]:
    for item in field_info.metadata:
        if isinstance(item, WireSpec):
            return item
    return None


def _base_type(annotation: Any) -> Any:
    """Strip Optional[...] and Annotated[...] wrappers from an annotation."""
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation = get_args(annotation)[0]
            continue
        if origin is Union or type(annotation).__name__ == "UnionType":
            non_none = [arg for arg in get_args(annotation) if arg is not type(None)]
            if len(non_none) != 1:
                raise SchemaError(f"Complex Union types not supported: {annotation}")
            annotation = non_none[0]
            continue
        return annotation


_EXPECTED_TYPES: Dict[FieldKind, type] = {
    FieldKind.INT32: int,
    FieldKind.UINT32: int,
    FieldKind.BOOL: bool,
    FieldKind.STRING: str,
    FieldKind.ENUM: EnumValue,
}


@functools.lru_cache(maxsize=None)
def _schema_for(model_class: Type[BaseModel]) -> MessageSchema:
    return MessageSchema(model_class)
