"""Protobuf wire codec for the options message.

This module provides encoding and decoding of NanoPbOptions, the field table
introspection and the underlying wire primitives.
"""

from __future__ import annotations

from .decoder import decode
from .encoder import encode
from .schema import FieldSchema, MessageSchema
from .wire import WireReader, WireType, WireWriter

__all__ = [
    "encode",
    "decode",
    "MessageSchema",
    "FieldSchema",
    "WireReader",
    "WireWriter",
    "WireType",
]
