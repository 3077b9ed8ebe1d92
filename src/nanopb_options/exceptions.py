"""Exception hierarchy for nanopb_options.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from NanopbOptionsError for easy catching of any
package-specific error.
"""

from __future__ import annotations


class NanopbOptionsError(Exception):
    """Base exception for all nanopb_options errors."""

    pass


class SchemaError(NanopbOptionsError):
    """Raised when the options field table is invalid.

    Examples:
        - Two fields declare the same tag
        - A field has no wire metadata or an unsupported annotation
        - An enum field is declared without its enum type
    """

    pass


class EncodeError(NanopbOptionsError):
    """Raised when encoding an options value fails.

    Examples:
        - Integer outside the int32/uint32 range
        - Value of the wrong Python type (only reachable via model_construct)
    """

    pass


class DecodeError(NanopbOptionsError):
    """Raised when decoding binary data fails.

    Every decode error is fatal to the current decode call; no partial
    result is returned.

    Attributes:
        offset: Byte offset in the input where the problem was detected
    """

    def __init__(self, msg: str, offset: int | None = None) -> None:
        super().__init__(msg)
        self.offset = offset

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.offset is not None:
            return f"{base_msg} (at offset {self.offset})"
        return base_msg


class TruncatedInputError(DecodeError):
    """A varint or length-delimited payload extends past the end of the buffer."""

    pass


class MalformedVarintError(DecodeError):
    """A varint has no terminating byte within the maximum width (10 bytes)."""

    pass


class WireTypeMismatchError(DecodeError):
    """A known field's tag appeared with an incompatible wire type.

    Attributes:
        tag: Field tag number
        expected: Wire type required by the field table
        actual: Wire type found in the input
    """

    def __init__(self, tag: int, expected: int, actual: int, offset: int | None = None) -> None:
        self.tag = tag
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Field tag {tag}: expected wire type {expected}, got {actual}", offset
        )


class MalformedRecordError(DecodeError):
    """A record cannot be read at all.

    Examples:
        - Tag number 0
        - Reserved wire types 6 and 7
        - End-group record without a matching start-group
        - Invalid UTF-8 in a string field
    """

    pass


class ResolutionError(NanopbOptionsError):
    """Raised when an effective value cannot be resolved.

    Examples:
        - Unrecognized enum number under strict resolution
        - Unknown option name
    """

    pass


class ScopeError(NanopbOptionsError):
    """Raised when a scope chain is not ordered file -> message -> field."""

    pass
