"""Attachment scopes and scope-chain inheritance.

An options message can be attached to a file, a message or a field. The
message shape is the same at every scope; only the consumer's interpretation
differs. Options set at an outer scope apply to everything inside it unless
an inner scope overrides them, so the options in force for a field are the
merge of its file, enclosing message(s) and field options, in that order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable

from .codec.schema import MessageSchema
from .exceptions import ScopeError
from .log import logger
from .models.options import NanoPbOptions


class OptionScope(enum.IntEnum):
    """Where an options message is attached, ordered outer to inner."""

    FILE = 0
    MESSAGE = 1
    FIELD = 2


@dataclass(frozen=True)
class ScopedOptions:
    """An options value together with the scope it was attached at.

    Attributes:
        scope: Attachment scope
        options: The options message
    """

    scope: OptionScope
    options: NanoPbOptions


# Options the generator only reads at some scopes
_ALLOWED_SCOPES: dict[str, frozenset[OptionScope]] = {
    "mangle_names": frozenset({OptionScope.FILE}),
    "include": frozenset({OptionScope.FILE}),
    "exclude": frozenset({OptionScope.FILE}),
    "package": frozenset({OptionScope.FILE}),
    "descriptorsize": frozenset({OptionScope.FILE, OptionScope.MESSAGE}),
    "msgid": frozenset({OptionScope.FILE, OptionScope.MESSAGE}),
    "skip_message": frozenset({OptionScope.FILE, OptionScope.MESSAGE}),
}


def merge_options(base: NanoPbOptions, override: NanoPbOptions) -> NanoPbOptions:
    """Merge two options values with protobuf merge semantics.

    Present scalars of ``override`` replace those of ``base``; absent scalars
    of ``override`` leave ``base`` untouched. Repeated fields and unknown
    fields are concatenated, ``base`` first.

    Args:
        base: Outer (or earlier) options
        override: Inner (or later) options

    Returns:
        New merged options value

    Example:
        >>> file_opts = NanoPbOptions(max_size=32, include=["a.h"])
        >>> field_opts = NanoPbOptions(max_size=64, include=["b.h"])
        >>> merged = merge_options(file_opts, field_opts)
        >>> merged.max_size, merged.include
        (64, ('a.h', 'b.h'))
    """
    schema = MessageSchema.from_model(type(base))
    values = {}
    for field_schema in schema.fields:
        outer = getattr(base, field_schema.name)
        inner = getattr(override, field_schema.name)
        if field_schema.repeated:
            values[field_schema.name] = tuple(outer) + tuple(inner)
        elif inner is not None:
            values[field_schema.name] = inner
        elif outer is not None:
            values[field_schema.name] = outer

    return type(base)(
        **values, unknown_fields=tuple(base.unknown_fields) + tuple(override.unknown_fields)
    )


def inherit(chain: Iterable[ScopedOptions]) -> NanoPbOptions:
    """Compute the options in force at the innermost scope of a chain.

    Args:
        chain: Scoped options ordered outer to inner, e.g. file, message,
            nested message, field. Scopes may repeat (nested messages) but
            must never move outward.

    Returns:
        Merged options; an empty chain yields an empty options value

    Raises:
        ScopeError: If the chain moves from an inner scope to an outer one
    """
    result = NanoPbOptions()
    previous: OptionScope | None = None
    for scoped in chain:
        if previous is not None and scoped.scope < previous:
            raise ScopeError(
                f"Scope chain goes outward: {scoped.scope.name} after {previous.name}"
            )
        result = merge_options(result, scoped.options)
        previous = scoped.scope
    return result


def scope_warnings(scoped: ScopedOptions) -> list[str]:
    """Report options set at a scope where the generator does not read them.

    Each warning is also logged at WARNING level.

    Returns:
        Human-readable warnings, in tag order (empty if none)
    """
    warnings = []
    for name in scoped.options.present_fields():
        allowed = _ALLOWED_SCOPES.get(name)
        if allowed is None or scoped.scope in allowed:
            continue
        where = " or ".join(s.name.lower() for s in sorted(allowed))
        message = (
            f"Option {name} is ignored at {scoped.scope.name.lower()} scope "
            f"(only read at {where} scope)"
        )
        logger.warning(message)
        warnings.append(message)
    return warnings
