"""nanopb_options: code generation options message and codec

A Python implementation of the options message a schema-driven C code
generator reads from .proto files: which fields to allocate statically, how
large buffers are, how names are mangled and so on. The options message is
attached to a file, a message or a field; this package decodes and encodes
its protobuf wire form with exact presence semantics.

Key Features:
- Pydantic-based immutable options model
- True presence: absent and "set to the default" are distinguishable
- Per-field defaults applied only by an explicit resolution step
- Closed enums that tolerate undeclared numbers (``Unrecognized``)
- Lossless retention of unknown fields, byte for byte
- File/message/field scope inheritance

Quick Start:
    >>> from nanopb_options import NanoPbOptions, decode, encode
    >>>
    >>> opts = NanoPbOptions(max_size=64, long_names=False, include=["a.h", "b.h"])
    >>> data = encode(opts)
    >>> decoded = decode(data)
    >>> decoded.max_size, decoded.long_names, decoded.include
    (64, False, ('a.h', 'b.h'))
    >>> decoded.sort_by_tag is None, decoded.effective("sort_by_tag")
    (True, True)
"""

from __future__ import annotations

from .codec import decode, encode
from .config import CodecOption
from .exceptions import (
    DecodeError,
    EncodeError,
    MalformedRecordError,
    MalformedVarintError,
    NanopbOptionsError,
    ResolutionError,
    SchemaError,
    ScopeError,
    TruncatedInputError,
    WireTypeMismatchError,
)
from .models import (
    DescriptorSize,
    EnumValue,
    FieldDescriptorType,
    FieldType,
    IntSize,
    Known,
    NanoPbOptions,
    TypenameMangling,
    Unrecognized,
    UnknownField,
)
from .protobuf import to_proto_schema
from .resolve import effective_value, explicit_values, resolve
from .scope import OptionScope, ScopedOptions, inherit, merge_options, scope_warnings
from .utils import encoded_size, field_sizes

__version__ = "0.1.0"

__all__ = [
    # Core API
    "NanoPbOptions",
    "encode",
    "decode",
    "CodecOption",
    # Enumerations
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
    # Exceptions
    "NanopbOptionsError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "TruncatedInputError",
    "MalformedVarintError",
    "WireTypeMismatchError",
    "MalformedRecordError",
    "ResolutionError",
    "ScopeError",
    # Resolution
    "effective_value",
    "explicit_values",
    "resolve",
    # Scopes
    "OptionScope",
    "ScopedOptions",
    "merge_options",
    "inherit",
    "scope_warnings",
    # Sizing
    "encoded_size",
    "field_sizes",
    # Protobuf
    "to_proto_schema",
    # Version
    "__version__",
]
