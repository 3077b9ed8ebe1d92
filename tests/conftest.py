"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from nanopb_options import NanoPbOptions


@pytest.fixture
def scenario_options() -> NanoPbOptions:
    """Options with a mix of present scalars and a repeated field."""
    return NanoPbOptions(max_size=64, long_names=False, include=["a.h", "b.h"])


@pytest.fixture
def scenario_bytes() -> bytes:
    """Wire form of ``scenario_options``."""
    return b"\x08\x40\x20\x00\xc2\x01\x03a.h\xc2\x01\x03b.h"


@pytest.fixture
def unknown_varint_record() -> bytes:
    """Record with unknown tag 30, varint payload 150."""
    return b"\xf0\x01\x96\x01"
