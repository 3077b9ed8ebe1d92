"""Protobuf wire-format primitives.

This module provides the low-level record layer used by the options codec:
base-128 varints, record keys (tag + wire type), length-delimited payloads
and verbatim capture of records the field table does not know about.
All reads are bounds-checked against the input buffer.
"""

from __future__ import annotations

import enum

from ..exceptions import MalformedRecordError, MalformedVarintError, TruncatedInputError

MAX_VARINT_BYTES = 10
MAX_TAG = (1 << 29) - 1
MAX_GROUP_DEPTH = 100

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
UINT32_MAX = (1 << 32) - 1
_UINT64_MASK = (1 << 64) - 1


class WireType(enum.IntEnum):
    """Wire type carried in the low three bits of every record key."""

    VARINT = 0
    I64 = 1
    LEN = 2
    SGROUP = 3
    EGROUP = 4
    I32 = 5


def varint_size(value: int) -> int:
    """Return the number of bytes needed to encode ``value`` as a varint.

    Args:
        value: Unsigned integer (0 to 2**64 - 1)

    Returns:
        Encoded size in bytes (1-10)
    """
    size = 1
    while value > 0x7F:
        value >>= 7
        size += 1
    return size


def tag_size(tag: int) -> int:
    """Return the encoded size of a record key for ``tag``."""
    return varint_size(tag << 3)


class WireWriter:
    """Appends protobuf records to a byte buffer.

    Example:
        >>> writer = WireWriter()
        >>> writer.write_tag(4, WireType.VARINT)
        >>> writer.write_bool(True)
        >>> writer.to_bytes()
        b' \\x01'
    """

    def __init__(self) -> None:
        """Initialize an empty writer."""
        self._buffer = bytearray()

    def write_varint(self, value: int) -> None:
        """Write an unsigned base-128 varint.

        Args:
            value: Unsigned integer (0 to 2**64 - 1)

        Raises:
            ValueError: If value is negative or wider than 64 bits
        """
        if value < 0:
            raise ValueError(f"write_varint requires non-negative value, got {value}")
        if value > _UINT64_MASK:
            raise ValueError(f"Value {value} does not fit in 64 bits")

        while value > 0x7F:
            self._buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        self._buffer.append(value)

    def write_tag(self, tag: int, wire_type: WireType) -> None:
        """Write a record key.

        Raises:
            ValueError: If tag is outside 1..2**29-1
        """
        if tag < 1 or tag > MAX_TAG:
            raise ValueError(f"Tag must be 1-{MAX_TAG}, got {tag}")
        self.write_varint((tag << 3) | int(wire_type))

    def write_int32(self, value: int) -> None:
        """Write a signed 32-bit integer.

        Negative values are sign-extended to 64 bits and take 10 bytes.

        Raises:
            ValueError: If value is outside the int32 range
        """
        if value < INT32_MIN or value > INT32_MAX:
            raise ValueError(f"Value {value} out of int32 range [{INT32_MIN}, {INT32_MAX}]")
        self.write_varint(value & _UINT64_MASK)

    def write_uint32(self, value: int) -> None:
        """Write an unsigned 32-bit integer.

        Raises:
            ValueError: If value is outside the uint32 range
        """
        if value < 0 or value > UINT32_MAX:
            raise ValueError(f"Value {value} out of uint32 range [0, {UINT32_MAX}]")
        self.write_varint(value)

    def write_bool(self, value: bool) -> None:
        """Write a boolean as a one-byte varint."""
        self._buffer.append(1 if value else 0)

    def write_enum(self, value: int) -> None:
        """Write an enum number (int32 on the wire)."""
        self.write_int32(value)

    def write_length_delimited(self, data: bytes | bytearray | memoryview) -> None:
        """Write a length prefix followed by ``data``."""
        self.write_varint(len(data))
        self._buffer.extend(data)

    def write_string(self, value: str) -> None:
        """Write a UTF-8 string as a length-delimited payload."""
        self.write_length_delimited(value.encode("utf-8"))

    def write_raw(self, data: bytes | bytearray | memoryview) -> None:
        """Write bytes verbatim."""
        self._buffer.extend(data)

    def write_unknown(
        self, tag: int, wire_type: WireType, payload: bytes | bytearray | memoryview
    ) -> None:
        """Re-emit a record captured by ``WireReader.read_unknown_payload``.

        Args:
            tag: Record tag
            wire_type: Original wire type
            payload: Original payload bytes (without key, length prefix
                or end-group key)
        """
        self.write_tag(tag, wire_type)
        if wire_type == WireType.LEN:
            self.write_length_delimited(payload)
        elif wire_type == WireType.SGROUP:
            self.write_raw(payload)
            self.write_tag(tag, WireType.EGROUP)
        else:
            self.write_raw(payload)

    def byte_length(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the written records as immutable bytes."""
        return bytes(self._buffer)


class WireReader:
    """Reads protobuf records from a byte buffer.

    The reader never copies the input: length-delimited and unknown payloads
    are returned as memoryview slices of the original buffer.

    Example:
        >>> reader = WireReader(b" \\x01")
        >>> reader.read_tag()
        (4, <WireType.VARINT: 0>)
        >>> reader.read_bool()
        True
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        """Initialize a reader over ``data``.

        Args:
            data: Buffer to read
        """
        view = memoryview(data)
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        self._view = view
        self._position = 0

    @property
    def buffer(self) -> memoryview:
        """The byte view being read."""
        return self._view

    def at_end(self) -> bool:
        """Return True when every byte has been consumed."""
        return self._position >= len(self._view)

    def position(self) -> int:
        """Return the current byte offset."""
        return self._position

    def bytes_remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._view) - self._position

    def read_varint(self) -> int:
        """Read an unsigned base-128 varint.

        Returns:
            Value masked to 64 bits

        Raises:
            TruncatedInputError: If the buffer ends inside the varint
            MalformedVarintError: If no terminating byte appears within 10 bytes
        """
        start = self._position
        result = 0
        shift = 0
        for _ in range(MAX_VARINT_BYTES):
            if self._position >= len(self._view):
                raise TruncatedInputError("Truncated varint", start)
            byte = self._view[self._position]
            self._position += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result & _UINT64_MASK
            shift += 7
        raise MalformedVarintError(
            f"Varint exceeds {MAX_VARINT_BYTES} bytes without terminating", start
        )

    def read_tag(self) -> tuple[int, WireType]:
        """Read a record key.

        Returns:
            Tuple of (tag, wire type)

        Raises:
            MalformedRecordError: If the tag is 0 or out of range, or the wire
                type is reserved
        """
        start = self._position
        key = self.read_varint()
        tag = key >> 3
        raw_wire_type = key & 0x07

        if tag < 1 or tag > MAX_TAG:
            raise MalformedRecordError(f"Invalid field tag {tag}", start)
        try:
            wire_type = WireType(raw_wire_type)
        except ValueError as err:
            raise MalformedRecordError(
                f"Field tag {tag}: invalid wire type {raw_wire_type}", start
            ) from err
        return tag, wire_type

    def read_int32(self) -> int:
        """Read a varint and truncate it to a signed 32-bit integer."""
        value = self.read_varint() & UINT32_MAX
        if value > INT32_MAX:
            value -= 1 << 32
        return value

    def read_uint32(self) -> int:
        """Read a varint and truncate it to an unsigned 32-bit integer."""
        return self.read_varint() & UINT32_MAX

    def read_bool(self) -> bool:
        """Read a varint as a boolean (any non-zero value is True)."""
        return self.read_varint() != 0

    def read_enum(self) -> int:
        """Read an enum number (int32 on the wire)."""
        return self.read_int32()

    def read_fixed(self, num_bytes: int) -> memoryview:
        """Read exactly ``num_bytes`` bytes.

        Raises:
            TruncatedInputError: If not enough bytes are available
        """
        if num_bytes > self.bytes_remaining():
            raise TruncatedInputError(
                f"Not enough bytes: need {num_bytes}, have {self.bytes_remaining()}",
                self._position,
            )
        start = self._position
        self._position += num_bytes
        return self._view[start : self._position]

    def read_length_delimited(self) -> memoryview:
        """Read a length prefix and the payload it covers.

        Raises:
            TruncatedInputError: If the payload extends past the buffer end
        """
        start = self._position
        length = self.read_varint()
        if length > self.bytes_remaining():
            raise TruncatedInputError(
                f"Length-delimited payload of {length} bytes exceeds "
                f"{self.bytes_remaining()} remaining bytes",
                start,
            )
        return self.read_fixed(length)

    def read_string(self) -> str:
        """Read a length-delimited UTF-8 string.

        Raises:
            MalformedRecordError: If the payload is not valid UTF-8
        """
        start = self._position
        payload = self.read_length_delimited()
        try:
            return str(payload, "utf-8")
        except UnicodeDecodeError as e:
            raise MalformedRecordError(f"Invalid UTF-8 in string payload: {e}", start) from e

    def read_unknown_payload(self, tag: int, wire_type: WireType, depth: int = 0) -> memoryview:
        """Consume the payload of a record whose key was just read.

        The returned slice is exactly what ``WireWriter.write_unknown`` needs
        to reproduce the record: the varint bytes, the fixed-width bytes, the
        length-delimited content, or everything between a start-group key
        and its matching end-group key.

        Args:
            tag: Tag of the record
            wire_type: Wire type of the record
            depth: Current group nesting depth

        Raises:
            MalformedRecordError: On an unmatched end-group or excessive nesting
        """
        if wire_type == WireType.VARINT:
            start = self._position
            self.read_varint()
            return self._view[start : self._position]
        if wire_type == WireType.I64:
            return self.read_fixed(8)
        if wire_type == WireType.I32:
            return self.read_fixed(4)
        if wire_type == WireType.LEN:
            return self.read_length_delimited()
        if wire_type == WireType.SGROUP:
            return self._read_group(tag, depth)

        raise MalformedRecordError(
            f"Unexpected end-group record for tag {tag}", self._position
        )

    def _read_group(self, tag: int, depth: int) -> memoryview:
        if depth >= MAX_GROUP_DEPTH:
            raise MalformedRecordError(
                f"Group nesting exceeds {MAX_GROUP_DEPTH} levels", self._position
            )

        start = self._position
        while True:
            if self.at_end():
                raise TruncatedInputError(f"Unterminated group for tag {tag}", start)
            key_start = self._position
            inner_tag, inner_wire_type = self.read_tag()
            if inner_wire_type == WireType.EGROUP:
                if inner_tag != tag:
                    raise MalformedRecordError(
                        f"End-group tag {inner_tag} does not match start-group tag {tag}",
                        key_start,
                    )
                return self._view[start:key_start]
            self.read_unknown_payload(inner_tag, inner_wire_type, depth + 1)
