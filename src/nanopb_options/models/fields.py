"""Field wire metadata helpers.

Each field of the options model carries a ``WireSpec`` in its ``Annotated``
metadata: the tag number, the wire kind and the documented default. The
codec introspects these into the field table (see ``codec.schema``).

Example:
    >>> class Options(BaseModel):
    ...     max_size: Annotated[Optional[Int32], Int32Field(1)] = None
    ...     long_names: Annotated[Optional[bool], BoolField(4, default=True)] = None
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Annotated, Any, Optional

from pydantic import Field

from ..codec.wire import INT32_MAX, INT32_MIN, UINT32_MAX

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]
UInt32 = Annotated[int, Field(ge=0, le=UINT32_MAX)]


class FieldKind(str, enum.Enum):
    """Value kind of a field, which also fixes its wire type."""

    INT32 = "int32"
    UINT32 = "uint32"
    BOOL = "bool"
    ENUM = "enum"
    STRING = "string"


@dataclass(frozen=True)
class WireSpec:
    """Wire metadata for one field.

    Attributes:
        tag: Field tag number
        kind: Value kind
        default: Documented default used by the resolution step (None if
            the field has no default)
        enum_type: Enum class for ENUM fields
        repeated: Whether the field is a repeated (ordered) collection
    """

    tag: int
    kind: FieldKind
    default: Any = None
    enum_type: Optional[type[enum.IntEnum]] = None
    repeated: bool = False


def Int32Field(tag: int) -> WireSpec:
    """Signed 32-bit integer field without a default."""
    return WireSpec(tag=tag, kind=FieldKind.INT32)


def UInt32Field(tag: int) -> WireSpec:
    """Unsigned 32-bit integer field without a default."""
    return WireSpec(tag=tag, kind=FieldKind.UINT32)


def BoolField(tag: int, *, default: Optional[bool] = None) -> WireSpec:
    """Boolean field.

    Args:
        tag: Field tag number
        default: Documented default (True/False), or None
    """
    return WireSpec(tag=tag, kind=FieldKind.BOOL, default=default)


def EnumField(
    tag: int, enum_type: type[enum.IntEnum], *, default: Optional[enum.IntEnum] = None
) -> WireSpec:
    """Closed enumeration field.

    The default is specific to this field; two fields of the same enum type
    may have different defaults.

    Args:
        tag: Field tag number
        enum_type: Enum class
        default: Documented default member, or None

    Raises:
        ValueError: If ``default`` is not a member of ``enum_type``
    """
    if default is not None and not isinstance(default, enum_type):
        raise ValueError(f"Default {default!r} is not a member of {enum_type.__name__}")
    return WireSpec(tag=tag, kind=FieldKind.ENUM, default=default, enum_type=enum_type)


def StringField(tag: int, *, default: Optional[str] = None) -> WireSpec:
    """UTF-8 string field.

    Args:
        tag: Field tag number
        default: Documented default string literal, or None
    """
    return WireSpec(tag=tag, kind=FieldKind.STRING, default=default)


def RepeatedStringField(tag: int) -> WireSpec:
    """Repeated UTF-8 string field; element order is preserved."""
    return WireSpec(tag=tag, kind=FieldKind.STRING, repeated=True)
