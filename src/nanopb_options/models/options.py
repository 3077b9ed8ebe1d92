"""The options message attached to files, messages and fields.

Every scalar field is ``None`` when absent and holds a value when the
producer set it explicitly; a value equal to the documented default is still
present. Documented defaults are only applied by the resolution step
(``effective()``, see ``nanopb_options.resolve``).
"""

from __future__ import annotations

import enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ..codec.wire import INT32_MAX, INT32_MIN
from .enums import DescriptorSize, FieldDescriptorType, FieldType, IntSize, TypenameMangling
from .fields import (
    BoolField,
    EnumField,
    Int32,
    Int32Field,
    RepeatedStringField,
    StringField,
    UInt32,
    UInt32Field,
)
from .values import EnumValue, Known, Unrecognized, UnknownField

_ENUM_FIELDS = (
    "int_size",
    "type",
    "mangle_names",
    "descriptorsize",
    "type_override",
    "fallback_type",
)


class NanoPbOptions(BaseModel):
    """Code generation options for a file, message or field.

    Instances are immutable. Build them directly, or with ``decode()``;
    derive modified copies with ``model_copy(update=...)`` or
    ``merge_options()``.

    Example:
        >>> opts = NanoPbOptions(max_size=64, long_names=False, include=["a.h", "b.h"])
        >>> opts.has("long_names"), opts.long_names
        (True, False)
        >>> opts.has("sort_by_tag"), opts.effective("sort_by_tag")
        (False, True)

    Enum fields accept an ``EnumValue``, an enum member, an int or a .proto
    member name; all are stored as ``Known`` or ``Unrecognized``.
    """

    model_config = ConfigDict(
        frozen=True,
        # EnumValue and UnknownField are validated by isinstance
        arbitrary_types_allowed=True,
        extra="forbid",
        # Field docstrings become descriptions (rendered by to_proto_schema)
        use_attribute_docstrings=True,
    )

    max_size: Annotated[Optional[Int32], Int32Field(1)] = None
    """Allocated size for bytes and string fields (strings include the terminator)."""
    max_length: Annotated[Optional[Int32], Int32Field(14)] = None
    """Maximum length for string fields; equivalent to max_size = length + 1."""
    max_count: Annotated[Optional[Int32], Int32Field(2)] = None
    """Allocated number of entries in arrays (repeated fields)."""
    int_size: Annotated[
        Optional[EnumValue], EnumField(7, IntSize, default=IntSize.IS_DEFAULT)
    ] = None
    """Storage width of integer fields."""
    type: Annotated[
        Optional[EnumValue], EnumField(3, FieldType, default=FieldType.FT_DEFAULT)
    ] = None
    """Force the field storage type (callback, static, pointer ...)."""
    long_names: Annotated[Optional[bool], BoolField(4, default=True)] = None
    """Use long names for enums, i.e. EnumName_EnumValue."""
    packed_struct: Annotated[Optional[bool], BoolField(5, default=False)] = None
    """Add the packed attribute to generated structs."""
    packed_enum: Annotated[Optional[bool], BoolField(10, default=False)] = None
    """Add the packed attribute to generated enums."""
    skip_message: Annotated[Optional[bool], BoolField(6, default=False)] = None
    """Skip this message."""
    no_unions: Annotated[Optional[bool], BoolField(8, default=False)] = None
    """Generate oneof fields as normal optional fields instead of a union."""
    msgid: Annotated[Optional[UInt32], UInt32Field(9)] = None
    """Integer type tag for a message."""
    anonymous_oneof: Annotated[Optional[bool], BoolField(11, default=False)] = None
    """Decode oneof as an anonymous union."""
    proto3: Annotated[Optional[bool], BoolField(12, default=False)] = None
    """Proto3 singular field does not generate a has_ flag."""
    proto3_singular_msgs: Annotated[Optional[bool], BoolField(21, default=False)] = None
    """Force proto3 messages to have no has_ flag."""
    enum_to_string: Annotated[Optional[bool], BoolField(13, default=False)] = None
    """Generate an enum to string mapping function."""
    fixed_length: Annotated[Optional[bool], BoolField(15, default=False)] = None
    """Generate bytes arrays with fixed length."""
    fixed_count: Annotated[Optional[bool], BoolField(16, default=False)] = None
    """Generate repeated fields with fixed count."""
    submsg_callback: Annotated[Optional[bool], BoolField(22, default=False)] = None
    """Generate a message-level callback called before decoding submessages."""
    mangle_names: Annotated[
        Optional[EnumValue], EnumField(17, TypenameMangling, default=TypenameMangling.M_NONE)
    ] = None
    """Shorten or remove package names from type names (file level only)."""
    callback_datatype: Annotated[
        Optional[str], StringField(18, default="pb_callback_t")
    ] = None
    """Data type for storage associated with callback fields."""
    callback_function: Annotated[
        Optional[str], StringField(19, default="pb_default_field_callback")
    ] = None
    """Callback function used for encoding and decoding."""
    descriptorsize: Annotated[
        Optional[EnumValue], EnumField(20, DescriptorSize, default=DescriptorSize.DS_AUTO)
    ] = None
    """Size of field descriptors (whole message, not per field)."""
    default_has: Annotated[Optional[bool], BoolField(23, default=False)] = None
    """Default value for has_ fields."""
    include: Annotated[tuple[str, ...], RepeatedStringField(24)] = ()
    """Extra files to include in the generated header."""
    exclude: Annotated[tuple[str, ...], RepeatedStringField(26)] = ()
    """Automatic includes to exclude from the generated header."""
    package: Annotated[Optional[str], StringField(25)] = None
    """Package name that applies only to generated code."""
    type_override: Annotated[Optional[EnumValue], EnumField(27, FieldDescriptorType)] = None
    """Override the type of the field in generated code."""
    sort_by_tag: Annotated[Optional[bool], BoolField(28, default=True)] = None
    """Order struct members by tag number instead of .proto order."""
    fallback_type: Annotated[
        Optional[EnumValue], EnumField(29, FieldType, default=FieldType.FT_CALLBACK)
    ] = None
    """Storage type used when FT_DEFAULT cannot produce a static field."""

    unknown_fields: tuple[UnknownField, ...] = ()
    """Records with tags not in the field table, in encounter order."""

    @field_validator(*_ENUM_FIELDS, mode="before")
    @classmethod
    def coerce_enum_value(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return value

        enum_type = cls._enum_type_of(info.field_name)
        if isinstance(value, Unrecognized):
            value = value.raw
        if isinstance(value, Known):
            if not isinstance(value.member, enum_type):
                raise ValueError(
                    f"expected a {enum_type.__name__} member, got {value.member!r}"
                )
            return value
        if isinstance(value, enum.Enum):
            if not isinstance(value, enum_type):
                raise ValueError(f"expected a {enum_type.__name__} member, got {value!r}")
            return Known(value)
        if isinstance(value, str):
            member = enum_type.__members__.get(value)
            if member is None:
                raise ValueError(f"{value!r} is not a {enum_type.__name__} name")
            return Known(member)
        if isinstance(value, int) and not isinstance(value, bool):
            if not INT32_MIN <= value <= INT32_MAX:
                raise ValueError(f"enum number {value} out of int32 range")
            return EnumValue.from_number(enum_type, value)
        return value

    @field_validator("unknown_fields")
    @classmethod
    def reject_known_tags(cls, value: tuple[UnknownField, ...]) -> tuple[UnknownField, ...]:
        from ..codec.schema import MessageSchema

        by_tag = MessageSchema.from_model(cls).by_tag
        for unknown in value:
            if unknown.tag in by_tag:
                raise ValueError(
                    f"tag {unknown.tag} belongs to field {by_tag[unknown.tag].name}, "
                    f"not an unknown field"
                )
        return value

    @classmethod
    def _enum_type_of(cls, name: Optional[str]) -> type[enum.IntEnum]:
        from ..codec.schema import MessageSchema

        return MessageSchema.from_model(cls).by_name[str(name)].require_enum_type()

    def has(self, name: str) -> bool:
        """Return True if the field was explicitly set.

        For repeated fields, presence means at least one element.

        Raises:
            ResolutionError: If ``name`` is not an option field
        """
        from ..resolve import field_schema_for

        field_schema = field_schema_for(self, name)
        value = getattr(self, field_schema.name)
        if field_schema.repeated:
            return len(value) > 0
        return value is not None

    def present_fields(self) -> list[str]:
        """Return the names of explicitly set fields, in tag order."""
        from ..codec.schema import MessageSchema

        schema = MessageSchema.from_model(type(self))
        return [f.name for f in schema.fields_by_tag() if self.has(f.name)]

    def effective(self, name: str, *, strict_enums: bool = False) -> Any:
        """Return the value a consumer should use for ``name``.

        Shorthand for ``nanopb_options.resolve.effective_value``.
        """
        from ..resolve import effective_value

        return effective_value(self, name, strict_enums=strict_enums)

    def to_owned(self) -> NanoPbOptions:
        """Return a copy that borrows nothing from a decode input buffer."""
        if not any(field.is_borrowed() for field in self.unknown_fields):
            return self
        owned = tuple(field.to_owned() for field in self.unknown_fields)
        return self.model_copy(update={"unknown_fields": owned})
