#!/usr/bin/env python3
"""Scope inheritance example for nanopb_options.

Options attached to a file apply to every message and field inside it unless
an inner scope overrides them. This example merges a file/message/field
chain, resolves the result and reports misplaced options.
"""

from __future__ import annotations

from nanopb_options import (
    FieldType,
    IntSize,
    NanoPbOptions,
    OptionScope,
    ScopedOptions,
    TypenameMangling,
    inherit,
    scope_warnings,
)


def main() -> None:
    """Run the scope inheritance example."""
    chain = [
        ScopedOptions(
            OptionScope.FILE,
            NanoPbOptions(mangle_names=TypenameMangling.M_STRIP_PACKAGE, long_names=False),
        ),
        ScopedOptions(OptionScope.MESSAGE, NanoPbOptions(msgid=12, max_count=4)),
        ScopedOptions(
            OptionScope.FIELD,
            NanoPbOptions(type=FieldType.FT_STATIC, int_size=IntSize.IS_16, max_count=8),
        ),
    ]

    print("Scope chain:")
    for scoped in chain:
        print(f"   {scoped.scope.name.lower():8} {scoped.options.present_fields()}")
        for warning in scope_warnings(scoped):
            print(f"   warning: {warning}")
    print()

    in_force = inherit(chain)
    print("Options in force for the field:")
    for name in ("mangle_names", "long_names", "msgid", "max_count", "type", "int_size"):
        print(f"   {name}: {in_force.effective(name)!r}")

    # Misplaced: include is only read at file scope
    misplaced = ScopedOptions(OptionScope.FIELD, NanoPbOptions(include=["extra.h"]))
    print()
    for warning in scope_warnings(misplaced):
        print(f"warning: {warning}")


if __name__ == "__main__":
    main()
