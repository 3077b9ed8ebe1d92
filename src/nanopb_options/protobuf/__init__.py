"""Protobuf interoperability for nanopb_options.

This module renders the .proto definition of the options message.
"""

from __future__ import annotations

from .convert import to_proto_schema

__all__ = [
    "to_proto_schema",
]
