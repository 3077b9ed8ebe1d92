"""Package logger and debug helpers."""

from __future__ import annotations

import binascii
import logging

logger = logging.getLogger("nanopb_options")


def get_hexdump(data: bytes | bytearray | memoryview, pos: int, window: int = 16) -> str:
    """Return a hex dump of the bytes surrounding ``pos``.

    Args:
        data: Input buffer
        pos: Byte offset of interest
        window: Number of bytes to show on each side of ``pos``

    Returns:
        Single-line description followed by space-separated hex bytes
    """
    start = max(0, pos - window)
    end = min(len(data), pos + window)
    chunk = bytes(data[start:end])

    hex_str = binascii.hexlify(chunk).decode("ascii")
    hex_str = " ".join(hex_str[i : i + 2] for i in range(0, len(hex_str), 2))

    return f"context around offset {pos} (bytes {start}-{end}):\n{hex_str}"
