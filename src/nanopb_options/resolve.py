"""Default resolution for options values.

Decoding always reports true presence. This module is the separate step that
turns a possibly-sparse options value into the effective values a code
generator uses: absent fields take the default documented for that field,
``Known`` enum values are unwrapped to their member, and ``Unrecognized``
enum numbers are either treated as absent or rejected.
"""

from __future__ import annotations

from typing import Any

from .codec.schema import FieldSchema, MessageSchema
from .exceptions import ResolutionError
from .log import logger
from .models.fields import FieldKind
from .models.options import NanoPbOptions
from .models.values import Known, Unrecognized


def field_schema_for(options: NanoPbOptions, name: str) -> FieldSchema:
    """Look up the field table entry for ``name``.

    Raises:
        ResolutionError: If ``name`` is not an option field
    """
    schema = MessageSchema.from_model(type(options))
    try:
        return schema.by_name[name]
    except KeyError:
        raise ResolutionError(f"Unknown option {name!r}") from None


def effective_value(options: NanoPbOptions, name: str, *, strict_enums: bool = False) -> Any:
    """Return the effective value of one option.

    Args:
        options: Options value, typically from decode()
        name: Field name
        strict_enums: If True, an unrecognized enum number raises instead of
            falling back to the field default

    Returns:
        - the explicit value if the field is present
        - the enum member for a present ``Known`` enum value
        - the field's documented default if absent (None when the field has
          no default)
        - a tuple for repeated fields (empty if absent)

    Raises:
        ResolutionError: If ``name`` is unknown, or on an unrecognized enum
            number with ``strict_enums=True``

    Example:
        >>> opts = decode(encode(NanoPbOptions(type=FieldType.FT_STATIC)))
        >>> effective_value(opts, "type")
        <FieldType.FT_STATIC: 2>
        >>> effective_value(opts, "fallback_type")
        <FieldType.FT_CALLBACK: 1>
    """
    field_schema = field_schema_for(options, name)
    value = getattr(options, field_schema.name)

    if field_schema.repeated:
        return tuple(value)

    if value is None:
        return field_schema.default

    if field_schema.kind is FieldKind.ENUM:
        if isinstance(value, Known):
            return value.member
        if isinstance(value, Unrecognized):
            enum_name = field_schema.enum_type.__name__ if field_schema.enum_type else "enum"
            if strict_enums:
                raise ResolutionError(
                    f"Option {name}: {value.raw} is not a declared {enum_name} value"
                )
            logger.warning(
                "Option %s: unrecognized %s value %d, using default %r",
                name,
                enum_name,
                value.raw,
                field_schema.default,
            )
            return field_schema.default

    return value


def resolve(options: NanoPbOptions, *, strict_enums: bool = False) -> dict[str, Any]:
    """Return the effective value of every option, keyed by field name.

    Fields are listed in declaration order; ``unknown_fields`` is not part of
    the result.

    Raises:
        ResolutionError: On an unrecognized enum number with ``strict_enums=True``
    """
    schema = MessageSchema.from_model(type(options))
    return {
        field_schema.name: effective_value(options, field_schema.name, strict_enums=strict_enums)
        for field_schema in schema.fields
    }


def explicit_values(options: NanoPbOptions) -> dict[str, Any]:
    """Return only the explicitly set options, keyed by field name, in tag order.

    Values are returned as stored (enum fields stay wrapped).
    """
    return {name: getattr(options, name) for name in options.present_fields()}
