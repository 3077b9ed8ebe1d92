"""Options inspection CLI command."""

from __future__ import annotations

import binascii
import enum
from typing import Any, Optional

from ..codec.schema import MessageSchema
from ..models.options import NanoPbOptions
from ..models.values import Known, Unrecognized
from ..resolve import effective_value
from ..scope import OptionScope, ScopedOptions, scope_warnings
from ..utils.sizing import field_sizes

_WIDTH = 54


def format_value(value: Any) -> str:
    """Render a stored or effective option value for display."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Known):
        return value.member.name
    if isinstance(value, Unrecognized):
        return f"<unrecognized {value.raw}>"
    if isinstance(value, enum.Enum):
        return value.name
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, tuple):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    return str(value)


def _dotted(label: str, value: str) -> str:
    dots = "." * max(1, _WIDTH - len(label) - len(value))
    return f"        {label}{dots}{value}"


def print_report(
    options: NanoPbOptions,
    *,
    scope: Optional[OptionScope] = None,
    effective: bool = False,
) -> None:
    """Print a field-by-field breakdown of an options value.

    Args:
        options: Decoded options
        scope: Attachment scope, enables scope warnings
        effective: If True, list every field with its effective value;
            otherwise only explicitly set fields are listed
    """
    schema = MessageSchema.from_model(type(options))
    sizes = field_sizes(options)
    total = sum(sizes.values())

    print("|" * 7, "nanopb-options: code generation options", "|" * 7)
    if scope is not None:
        print(f"Scope: {scope.name.lower()}")
    present = options.present_fields()
    print(f"{len(present)} field{'s' if len(present) != 1 else ''} set, "
          f"{len(options.unknown_fields)} unknown, {total} bytes encoded.")
    print()

    print(f"{'-' * 27} Fields {'-' * 27}")
    for field_schema in schema.fields_by_tag():
        label = f"{field_schema.tag:>2}. {field_schema.name}"
        if options.has(field_schema.name):
            text = format_value(getattr(options, field_schema.name))
            text += f"  ({sizes[field_schema.name]} bytes)"
        elif effective:
            default = effective_value(options, field_schema.name)
            if field_schema.repeated or default is None:
                text = "(unset)"
            else:
                text = f"(default {format_value(default)})"
        else:
            continue
        print(_dotted(label, text))
    print()

    if options.unknown_fields:
        print(f"{'-' * 24} Unknown fields {'-' * 23}")
        for unknown in options.unknown_fields:
            payload = binascii.hexlify(bytes(unknown.payload)).decode("ascii") or "(empty)"
            label = f"{unknown.tag:>2}. {unknown.wire_type.name}"
            print(_dotted(label, payload))
        print()

    if scope is not None:
        warnings = scope_warnings(ScopedOptions(scope, options))
        if warnings:
            print(f"{'=' * 24} Warnings {'=' * 24}")
            for warning in warnings:
                print(f"        {warning}")
            print()
