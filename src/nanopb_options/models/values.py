"""Value types stored inside an options message.

``EnumValue`` is a tagged variant: ``Known(member)`` for a declared enum
number and ``Unrecognized(raw)`` for a number the enum does not declare.
``UnknownField`` holds a record whose tag is not in the field table.
"""

from __future__ import annotations

import abc
import enum
from typing import Any

from ..codec.wire import MAX_TAG, WireReader, WireType
from ..exceptions import DecodeError


class EnumValue(abc.ABC):
    """Base class of the enum value variants.

    Attributes:
        raw: Enum number as it appears on the wire
    """

    __slots__ = ()

    @property
    @abc.abstractmethod
    def raw(self) -> int:
        """Enum number as it appears on the wire."""

    def is_known(self) -> bool:
        """Return True if the number is a declared member of its enum."""
        return isinstance(self, Known)

    @staticmethod
    def from_number(enum_type: type[enum.IntEnum], value: int) -> EnumValue:
        """Wrap a wire number for ``enum_type``.

        Args:
            enum_type: Enum class of the field
            value: Enum number read from the wire

        Returns:
            Known(member) if ``value`` is declared, otherwise Unrecognized(value)
        """
        try:
            return Known(enum_type(value))
        except ValueError:
            return Unrecognized(value)


class Known(EnumValue):
    """A declared enum member."""

    __slots__ = ("_member",)

    def __init__(self, member: enum.IntEnum) -> None:
        if not isinstance(member, enum.IntEnum):
            raise TypeError(f"Known() requires an IntEnum member, got {type(member).__name__}")
        self._member = member

    @property
    def member(self) -> enum.IntEnum:
        return self._member

    @property
    def raw(self) -> int:
        return int(self._member)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Known):
            return type(self._member) is type(other._member) and self._member == other._member
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("known", type(self._member).__name__, int(self._member)))

    def __repr__(self) -> str:
        return f"Known({type(self._member).__name__}.{self._member.name})"


class Unrecognized(EnumValue):
    """An enum number that the enum type does not declare."""

    __slots__ = ("_raw",)

    def __init__(self, raw: int) -> None:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(f"Unrecognized() requires an int, got {type(raw).__name__}")
        self._raw = raw

    @property
    def raw(self) -> int:
        return self._raw

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Unrecognized):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("unrecognized", self._raw))

    def __repr__(self) -> str:
        return f"Unrecognized({self._raw})"


class UnknownField:
    """A record whose tag is not in the field table, kept verbatim.

    The payload is either owned ``bytes`` or a ``memoryview`` borrowing the
    buffer it was decoded from (``CodecOption.ZERO_COPY``). A borrowed
    payload must not be used after that buffer is released or mutated; call
    ``to_owned()`` to detach it.

    Attributes:
        tag: Record tag
        wire_type: Record wire type
        payload: Payload bytes without key, length prefix or end-group key
    """

    __slots__ = ("tag", "wire_type", "payload")

    def __init__(self, tag: int, wire_type: WireType | int, payload: Any) -> None:
        if not isinstance(payload, (bytes, memoryview)):
            if isinstance(payload, bytearray):
                payload = bytes(payload)
            else:
                raise TypeError(
                    f"UnknownField payload must be bytes or memoryview, "
                    f"got {type(payload).__name__}"
                )
        if isinstance(tag, bool) or not isinstance(tag, int) or not 1 <= tag <= MAX_TAG:
            raise ValueError(f"UnknownField tag must be 1-{MAX_TAG}, got {tag!r}")
        wire_type = WireType(wire_type)
        if wire_type == WireType.EGROUP:
            raise ValueError("UnknownField cannot hold an end-group record")
        _check_payload(tag, wire_type, payload)
        object.__setattr__(self, "tag", tag)
        object.__setattr__(self, "wire_type", wire_type)
        object.__setattr__(self, "payload", payload)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"UnknownField is immutable, cannot set {name!r}")

    def is_borrowed(self) -> bool:
        """Return True if the payload is a view into another buffer."""
        return isinstance(self.payload, memoryview)

    def to_owned(self) -> UnknownField:
        """Return an equivalent field whose payload is an owned copy."""
        if not self.is_borrowed():
            return self
        return UnknownField(self.tag, self.wire_type, bytes(self.payload))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UnknownField):
            return (
                self.tag == other.tag
                and self.wire_type == other.wire_type
                and bytes(self.payload) == bytes(other.payload)
            )
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.tag, int(self.wire_type), bytes(self.payload)))

    def __repr__(self) -> str:
        return (
            f"UnknownField(tag={self.tag}, wire_type={self.wire_type.name}, "
            f"payload={bytes(self.payload)!r})"
        )


_FIXED_WIDTHS = {WireType.I32: 4, WireType.I64: 8}


def _check_payload(tag: int, wire_type: WireType, payload: bytes | memoryview) -> None:
    """Check that ``payload`` re-encodes as exactly one record of ``wire_type``.

    Raises:
        ValueError: If the payload would corrupt the records that follow it
    """
    width = _FIXED_WIDTHS.get(wire_type)
    if width is not None:
        if len(payload) != width:
            raise ValueError(
                f"Unknown field tag {tag}: {wire_type.name} payload must be {width} bytes, "
                f"got {len(payload)}"
            )
        return
    if wire_type == WireType.LEN:
        return

    reader = WireReader(payload)
    try:
        if wire_type == WireType.VARINT:
            reader.read_varint()
        else:
            # Group content: a sequence of complete records, no stray end-group
            while not reader.at_end():
                inner_tag, inner_wire_type = reader.read_tag()
                reader.read_unknown_payload(inner_tag, inner_wire_type, depth=1)
    except DecodeError as err:
        raise ValueError(
            f"Unknown field tag {tag}: malformed {wire_type.name} payload: {err}"
        ) from err
    if not reader.at_end():
        raise ValueError(f"Unknown field tag {tag}: VARINT payload must be a single varint")
