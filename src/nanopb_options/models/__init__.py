"""Options message data model.

This module provides the NanoPbOptions model, its enumerations and the value
types (enum variants, unknown fields) it stores.
"""

from __future__ import annotations

from .enums import (
    DescriptorSize,
    FieldDescriptorType,
    FieldType,
    IntSize,
    ProtoEnum,
    TypenameMangling,
)
from .fields import FieldKind, WireSpec
from .options import NanoPbOptions
from .values import EnumValue, Known, Unrecognized, UnknownField

__all__ = [
    "NanoPbOptions",
    # Enumerations
    "ProtoEnum",
    "FieldType",
    "IntSize",
    "TypenameMangling",
    "DescriptorSize",
    "FieldDescriptorType",
    # Values
    "EnumValue",
    "Known",
    "Unrecognized",
    "UnknownField",
    # Field metadata
    "FieldKind",
    "WireSpec",
]
