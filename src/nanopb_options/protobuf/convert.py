"""Protobuf schema rendering for the options message.

This module renders the .proto definition of the options message from the
field table, so the wire contract implemented by the codec can be checked
against (or handed to) other protobuf tooling.
"""

from __future__ import annotations

import enum
from typing import Any

from ..codec.schema import FieldSchema, MessageSchema
from ..exceptions import SchemaError
from ..models.enums import FieldDescriptorType
from ..models.fields import FieldKind
from ..models.options import NanoPbOptions

_EXTERNAL_ENUMS: dict[type[enum.IntEnum], str] = {
    FieldDescriptorType: "google.protobuf.FieldDescriptorProto.Type",
}


def to_proto_schema(
    *,
    package: str = "nanopb",
    message_name: str = "NanoPBOptions",
) -> str:
    """Generate the proto2 .proto definition of the options message.

    Enum definitions come first (in order of first use), then the message
    with one line per field: label, type, name, tag and ``[default = ...]``
    when the field documents a default.

    Args:
        package: Protobuf package name ("" for none)
        message_name: Name of the rendered message

    Returns:
        .proto schema as a string

    Raises:
        SchemaError: If a field kind has no protobuf equivalent

    Example:
        >>> proto = to_proto_schema()
        >>> "optional bool long_names = 4 [default = true];" in proto
        True
    """
    schema = MessageSchema.from_model(NanoPbOptions)

    lines = ['syntax = "proto2";']
    if package:
        lines.append(f"package {package};")
    if any(f.enum_type in _EXTERNAL_ENUMS for f in schema.fields):
        lines.append('import "google/protobuf/descriptor.proto";')
    lines.append("")

    # Enum definitions first
    enum_types: list[type[enum.IntEnum]] = []
    for field in schema.fields:
        if field.enum_type is not None and field.enum_type not in _EXTERNAL_ENUMS:
            if field.enum_type not in enum_types:
                enum_types.append(field.enum_type)

    for enum_type in enum_types:
        lines.extend(_enum_to_proto(enum_type))
        lines.append("")

    lines.append(f"message {message_name} {{")
    for field in schema.fields:
        if field.description:
            lines.append(f"  // {field.description}")
        label = "repeated" if field.repeated else "optional"
        line = f"  {label} {_proto_type(field)} {field.name} = {field.tag}"
        if field.has_default:
            line += f" [default = {_proto_default(field.default)}]"
        lines.append(line + ";")
    lines.append("}")

    return "\n".join(lines) + "\n"


def _proto_type(field_schema: FieldSchema) -> str:
    """Return the protobuf type name of a field."""
    if field_schema.kind is FieldKind.ENUM:
        enum_type = field_schema.require_enum_type()
        return _EXTERNAL_ENUMS.get(enum_type, enum_type.__name__)
    if field_schema.kind is FieldKind.INT32:
        return "int32"
    if field_schema.kind is FieldKind.UINT32:
        return "uint32"
    if field_schema.kind is FieldKind.BOOL:
        return "bool"
    if field_schema.kind is FieldKind.STRING:
        return "string"

    raise SchemaError(f"Cannot convert kind {field_schema.kind} to a protobuf type")


def _proto_default(value: Any) -> str:
    """Render a default value as it appears in a [default = ...] option."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, str):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


def _enum_to_proto(enum_type: type[enum.IntEnum]) -> list[str]:
    """Convert an enum to a protobuf enum definition, keeping declared numbers."""
    lines = [f"enum {enum_type.__name__} {{"]
    for member in enum_type:
        lines.append(f"  {member.name} = {int(member)};")
    lines.append("}")
    return lines
