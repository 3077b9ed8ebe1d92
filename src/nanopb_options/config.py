"""Codec option flags.

Flags control the behaviour of ``decode()`` and ``encode()`` and can be
combined with bitwise or:

    option = CodecOption.ZERO_COPY | CodecOption.DISCARD_UNKNOWN
"""

from __future__ import annotations

from enum import IntFlag


class CodecOption(IntFlag):
    """Codec behaviour flags."""

    # Default: unknown fields are kept, payloads are copied into bytes
    NONE = 0x0000

    # Unknown-field payloads are memoryview slices of the input buffer
    ZERO_COPY = 0x0001

    # Unknown fields are dropped on decode and not emitted on encode
    DISCARD_UNKNOWN = 0x0002
