"""Encoded size calculation utilities.

This module provides functions to calculate the encoded size of an options
value without actually encoding it.
"""

from __future__ import annotations

from ..codec.schema import MessageSchema
from ..codec.wire import WireType, tag_size, varint_size
from ..models.options import NanoPbOptions
from ..models.values import UnknownField


def encoded_size(options: NanoPbOptions) -> int:
    """Calculate the encoded size of an options value in bytes.

    Always equal to ``len(encode(options))``.

    Args:
        options: Options value

    Returns:
        Size in bytes

    Example:
        >>> encoded_size(NanoPbOptions(max_size=64, long_names=False))
        4
    """
    return sum(field_sizes(options).values())


def field_sizes(options: NanoPbOptions) -> dict[str, int]:
    """Get the encoded size in bytes of each present field.

    Absent fields are omitted. Repeated fields report the total of all their
    records. Unknown fields are reported together under ``"unknown_fields"``.

    Args:
        options: Options value to analyze

    Returns:
        Dictionary mapping field names to their size in bytes, in tag order

    Example:
        >>> field_sizes(NanoPbOptions(max_size=64, include=["a.h", "b.h"]))
        {'max_size': 2, 'include': 12}
    """
    schema = MessageSchema.from_model(type(options))
    sizes: dict[str, int] = {}

    for field_schema in schema.fields_by_tag():
        value = getattr(options, field_schema.name)
        if field_schema.repeated:
            if value:
                sizes[field_schema.name] = sum(field_schema.record_size(v) for v in value)
        elif value is not None:
            sizes[field_schema.name] = field_schema.record_size(value)

    if options.unknown_fields:
        sizes["unknown_fields"] = sum(unknown_field_size(f) for f in options.unknown_fields)

    return sizes


def unknown_field_size(field: UnknownField) -> int:
    """Calculate the encoded size of one unknown-field record."""
    payload_length = len(field.payload)
    size = tag_size(field.tag) + payload_length
    if field.wire_type == WireType.LEN:
        size += varint_size(payload_length)
    elif field.wire_type == WireType.SGROUP:
        size += tag_size(field.tag)
    return size
