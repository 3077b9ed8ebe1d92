#!/usr/bin/env python3
"""Basic usage example for nanopb_options.

This example demonstrates:
1. Building an options value with Pydantic validation
2. Encoding to protobuf wire format
3. Decoding back, with exact presence
4. Resolving effective values and sizing
"""

from __future__ import annotations

from nanopb_options import (
    FieldType,
    NanoPbOptions,
    decode,
    encode,
    encoded_size,
    field_sizes,
    resolve,
)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("nanopb_options Basic Usage Example")
    print("=" * 60)
    print()

    # Create an options value
    print("1. Creating field options...")
    opts = NanoPbOptions(
        max_size=64,
        long_names=False,
        type=FieldType.FT_STATIC,
        include=["a.h", "b.h"],
    )
    for name in opts.present_fields():
        print(f"   {name}: {getattr(opts, name)!r}")
    print()

    # Analyze field sizes
    print("2. Analyzing field sizes...")
    sizes = field_sizes(opts)
    for field_name, size in sizes.items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(opts)} bytes")
    print()

    # Encode
    print("3. Encoding to protobuf wire format...")
    encoded_data = encode(opts)
    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Hex: {encoded_data.hex()}")
    print()

    # Decode
    print("4. Decoding from binary...")
    decoded = decode(encoded_data)
    print(f"   Round trip OK: {decoded == opts}")
    print(f"   sort_by_tag present: {decoded.has('sort_by_tag')}")
    print()

    # Resolve
    print("5. Effective values (defaults applied)...")
    resolved = resolve(decoded)
    for name in ("type", "fallback_type", "long_names", "sort_by_tag", "callback_datatype"):
        print(f"   {name}: {resolved[name]!r}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
