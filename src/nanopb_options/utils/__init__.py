"""Utility functions for nanopb_options.

This module provides encoded size calculation.
"""

from __future__ import annotations

from .sizing import encoded_size, field_sizes, unknown_field_size

__all__ = [
    "encoded_size",
    "field_sizes",
    "unknown_field_size",
]
