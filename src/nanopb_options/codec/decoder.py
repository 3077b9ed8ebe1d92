"""Options decoder.

This module provides the decode() function that converts protobuf wire data
into a NanoPbOptions instance.
"""

from __future__ import annotations

from typing import Any

from ..config import CodecOption
from ..exceptions import DecodeError, WireTypeMismatchError
from ..log import get_hexdump, logger
from ..models.fields import FieldKind
from ..models.options import NanoPbOptions
from ..models.values import EnumValue, UnknownField
from .schema import FieldSchema, MessageSchema
from .wire import WireReader


def decode(
    data: bytes | bytearray | memoryview, *, option: CodecOption = CodecOption.NONE
) -> NanoPbOptions:
    """Decode protobuf wire data to an options value.

    Records are processed in the order they occur. Known scalar fields are
    last-occurrence-wins, repeated fields append, undeclared enum numbers
    become ``Unrecognized`` and unknown tags are kept verbatim in
    ``unknown_fields``.

    Args:
        data: Encoded options message body
        option: Codec flags (ZERO_COPY, DISCARD_UNKNOWN)

    Returns:
        Decoded options; fields not present in the input are None

    Raises:
        TruncatedInputError: If a varint or payload runs past the buffer end
        MalformedVarintError: If a varint is longer than 10 bytes
        WireTypeMismatchError: If a known tag carries the wrong wire type
        MalformedRecordError: If a record is structurally unreadable

    Examples:
        ```python
        from nanopb_options import decode

        opts = decode(b"\\x08\\x40\\x20\\x00")
        assert opts.max_size == 64
        assert opts.long_names is False
        assert opts.msgid is None
        ```
    """
    schema = MessageSchema.from_model(NanoPbOptions)
    reader = WireReader(data)

    scalars: dict[str, Any] = {}
    repeated: dict[str, list[Any]] = {f.name: [] for f in schema.fields if f.repeated}
    unknown: list[UnknownField] = []

    try:
        while not reader.at_end():
            record_start = reader.position()
            tag, wire_type = reader.read_tag()
            field_schema = schema.by_tag.get(tag)

            if field_schema is None:
                payload = reader.read_unknown_payload(tag, wire_type)
                if option & CodecOption.DISCARD_UNKNOWN:
                    continue
                if not option & CodecOption.ZERO_COPY:
                    payload = bytes(payload)
                unknown.append(UnknownField(tag, wire_type, payload))
                logger.debug(
                    "Unknown field tag %d (%s) at offset %d", tag, wire_type.name, record_start
                )
                continue

            if wire_type != field_schema.wire_type:
                raise WireTypeMismatchError(
                    tag, int(field_schema.wire_type), int(wire_type), record_start
                )

            value = _decode_value(reader, field_schema)
            if field_schema.repeated:
                repeated[field_schema.name].append(value)
            else:
                scalars[field_schema.name] = value
    except DecodeError as e:
        if e.offset is not None:
            logger.debug("Decode failed: %s\n%s", e, get_hexdump(reader.buffer, e.offset))
        raise

    logger.debug(
        "Decoded %d scalar, %d repeated, %d unknown records",
        len(scalars),
        sum(len(v) for v in repeated.values()),
        len(unknown),
    )

    try:
        return NanoPbOptions(
            **scalars,
            **{name: tuple(values) for name, values in repeated.items()},
            unknown_fields=tuple(unknown),
        )
    except Exception as e:
        raise DecodeError(f"Failed to construct NanoPbOptions: {e}") from e


def _decode_value(reader: WireReader, field_schema: FieldSchema) -> Any:
    """Decode a single value of a known field.

    Args:
        reader: Reader positioned after the record key
        field_schema: Schema information for the field

    Returns:
        Decoded field value
    """
    if field_schema.kind is FieldKind.BOOL:
        return reader.read_bool()

    if field_schema.kind is FieldKind.ENUM:
        return EnumValue.from_number(field_schema.require_enum_type(), reader.read_enum())

    if field_schema.kind is FieldKind.INT32:
        return reader.read_int32()

    if field_schema.kind is FieldKind.UINT32:
        return reader.read_uint32()

    if field_schema.kind is FieldKind.STRING:
        return reader.read_string()

    raise DecodeError(f"Field {field_schema.name}: unsupported kind {field_schema.kind}")

