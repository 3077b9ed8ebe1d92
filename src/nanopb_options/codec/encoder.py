"""Options encoder.

This module provides the encode() function that converts a NanoPbOptions
instance to protobuf wire data.
"""

from __future__ import annotations

from typing import Any

from ..config import CodecOption
from ..exceptions import EncodeError
from ..models.fields import FieldKind
from ..models.options import NanoPbOptions
from ..models.values import EnumValue, UnknownField
from .schema import FieldSchema, MessageSchema
from .wire import WireWriter


def encode(options: NanoPbOptions, *, option: CodecOption = CodecOption.NONE) -> bytes:
    """Encode an options value to protobuf wire data.

    Exactly one record is emitted per present scalar field, whether or not
    its value equals the documented default; absent fields emit nothing.
    Known fields are emitted in ascending tag order, repeated elements in
    stored order, then unknown fields in stored order with their original
    payload bytes.

    Args:
        options: Options value to encode
        option: Codec flags (DISCARD_UNKNOWN omits unknown fields)

    Returns:
        Encoded message body

    Raises:
        EncodeError: If a field value cannot be encoded

    Examples:
        ```python
        from nanopb_options import NanoPbOptions, encode

        data = encode(NanoPbOptions(max_size=64, long_names=False))
        assert data == b"\\x08\\x40\\x20\\x00"
        ```
    """
    schema = MessageSchema.from_model(type(options))
    writer = WireWriter()

    for field_schema in schema.fields_by_tag():
        value = getattr(options, field_schema.name)
        if field_schema.repeated:
            for element in value:
                _encode_record(writer, field_schema, element)
        elif value is not None:
            _encode_record(writer, field_schema, value)

    if not option & CodecOption.DISCARD_UNKNOWN:
        for unknown in options.unknown_fields:
            _encode_unknown(writer, unknown)

    return writer.to_bytes()


def _encode_record(writer: WireWriter, field_schema: FieldSchema, value: Any) -> None:
    """Encode one record (key + value) of a known field.

    Args:
        writer: WireWriter to append to
        field_schema: Schema information for the field
        value: Field value (one element for repeated fields)

    Raises:
        EncodeError: If value is invalid
    """
    writer.write_tag(field_schema.tag, field_schema.wire_type)

    # Boolean
    if field_schema.kind is FieldKind.BOOL:
        if not isinstance(value, bool):
            raise EncodeError(
                f"Field {field_schema.name}: expected bool, got {type(value).__name__}"
            )
        writer.write_bool(value)
        return

    # Enum (Known or Unrecognized, both carry the wire number)
    if field_schema.kind is FieldKind.ENUM:
        if not isinstance(value, EnumValue):
            raise EncodeError(
                f"Field {field_schema.name}: expected EnumValue, got {type(value).__name__}"
            )
        try:
            writer.write_enum(value.raw)
        except ValueError as err:
            raise EncodeError(f"Field {field_schema.name}: {err}") from err
        return

    # Integers
    if field_schema.kind in (FieldKind.INT32, FieldKind.UINT32):
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodeError(
                f"Field {field_schema.name}: expected int, got {type(value).__name__}"
            )
        try:
            if field_schema.kind is FieldKind.INT32:
                writer.write_int32(value)
            else:
                writer.write_uint32(value)
        except ValueError as err:
            raise EncodeError(f"Field {field_schema.name}: {err}") from err
        return

    # String
    if field_schema.kind is FieldKind.STRING:
        if not isinstance(value, str):
            raise EncodeError(
                f"Field {field_schema.name}: expected str, got {type(value).__name__}"
            )
        try:
            writer.write_string(value)
        except UnicodeEncodeError as err:
            raise EncodeError(f"Field {field_schema.name}: cannot encode as UTF-8: {err}") from err
        return

    raise EncodeError(f"Field {field_schema.name}: unsupported kind {field_schema.kind}")


def _encode_unknown(writer: WireWriter, unknown: Any) -> None:
    if not isinstance(unknown, UnknownField):
        raise EncodeError(f"unknown_fields: expected UnknownField, got {type(unknown).__name__}")
    try:
        writer.write_unknown(unknown.tag, unknown.wire_type, unknown.payload)
    except ValueError as err:
        raise EncodeError(f"Unknown field tag {unknown.tag}: {err}") from err
