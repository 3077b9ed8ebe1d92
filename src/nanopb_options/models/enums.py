"""Closed enumerations used by the options message.

Discriminants are fixed by the wire format and are neither sequential nor
gap-free. The default for a field that uses one of these enums is attached to
the field, not to the enum type (see ``models.options``).
"""

from __future__ import annotations

import enum


class ProtoEnum(enum.IntEnum):
    """IntEnum whose member names are the names used in the .proto definition."""

    def as_str_name(self) -> str:
        """Return the .proto name of this member."""
        return self.name

    @classmethod
    def from_str_name(cls, value: str) -> ProtoEnum | None:
        """Return the member with the given .proto name, or None."""
        return cls.__members__.get(value)

    @classmethod
    def from_number(cls, value: int) -> ProtoEnum | None:
        """Return the member with the given number, or None if undeclared."""
        try:
            return cls(value)
        except ValueError:
            return None


class FieldType(ProtoEnum):
    """Storage strategy for a generated field."""

    FT_DEFAULT = 0  # Static if possible, otherwise fallback_type
    FT_CALLBACK = 1
    FT_POINTER = 4
    FT_STATIC = 2  # Error if static allocation is not possible
    FT_IGNORE = 3
    FT_INLINE = 5  # Legacy, superseded by fixed_length


class IntSize(ProtoEnum):
    """Storage width for integer fields."""

    IS_DEFAULT = 0  # 32/64 bit based on the .proto type
    IS_8 = 8
    IS_16 = 16
    IS_32 = 32
    IS_64 = 64


class TypenameMangling(ProtoEnum):
    """How package names are shortened in generated type names."""

    M_NONE = 0
    M_STRIP_PACKAGE = 1
    M_FLATTEN = 2  # Only the last path component
    M_PACKAGE_INITIALS = 3


class DescriptorSize(ProtoEnum):
    """Width of generated field descriptors."""

    DS_AUTO = 0
    DS_1 = 1  # up to 15 byte fields, no arrays
    DS_2 = 2  # up to 4095 byte fields, 4095 entry arrays
    DS_4 = 4  # up to 2^32-1 byte fields, 2^16-1 entry arrays
    DS_8 = 8  # up to 2^32-1 entry arrays


class FieldDescriptorType(ProtoEnum):
    """Field types of ``google.protobuf.FieldDescriptorProto.Type``.

    Used by ``type_override`` to replace the type of a field in generated code.
    """

    TYPE_DOUBLE = 1
    TYPE_FLOAT = 2
    TYPE_INT64 = 3
    TYPE_UINT64 = 4
    TYPE_INT32 = 5
    TYPE_FIXED64 = 6
    TYPE_FIXED32 = 7
    TYPE_BOOL = 8
    TYPE_STRING = 9
    TYPE_GROUP = 10
    TYPE_MESSAGE = 11
    TYPE_BYTES = 12
    TYPE_UINT32 = 13
    TYPE_ENUM = 14
    TYPE_SFIXED32 = 15
    TYPE_SFIXED64 = 16
    TYPE_SINT32 = 17
    TYPE_SINT64 = 18
