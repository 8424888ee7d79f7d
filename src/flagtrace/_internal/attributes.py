"""Flattening of arbitrary values into span attributes.

Every value is classified once into a ``ValueKind`` and then walked
structurally. Scalars become a single attribute keyed by the current prefix;
keyed collections and sequences recurse with a dotted child prefix.

Depth convention: ``current_depth`` is the depth of the value being encoded.
A value deeper than ``max_depth`` contributes nothing, so with
``max_depth=2`` and ``current_depth=0`` leaves two levels below the top-level
value are still emitted. The depth bound is the only guard against
self-referencing values.
"""

from __future__ import annotations

import dataclasses
import enum
import numbers
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Union

from flagtrace._internal.logging import log_debug

AttributeValue = Union[str, bool, int, float]

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

# Dataclass field metadata key; field(metadata={"exported": False}) hides a field
EXPORTED_METADATA_KEY = "exported"

_MISSING = object()

# Sequences of raw bytes are not walked element by element
_BINARY_TYPES = (bytes, bytearray, memoryview)


class ValueKind(enum.Enum):
    """Closed set of value shapes the encoder knows how to walk."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    KEYED = "keyed"
    SEQUENCE = "sequence"
    UNSUPPORTED = "unsupported"


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def kind_of(value: Any) -> ValueKind:
    """Classify a runtime value.

    ``bool`` is checked before integers since it subclasses ``int``. Named
    tuples are keyed by their field names rather than by position.
    """
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, numbers.Integral):
        return ValueKind.INT
    if isinstance(value, numbers.Real):
        return ValueKind.FLOAT
    if isinstance(value, Mapping) or _is_namedtuple(value):
        return ValueKind.KEYED
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return ValueKind.KEYED
    if isinstance(value, Sequence) and not isinstance(value, _BINARY_TYPES):
        return ValueKind.SEQUENCE
    return ValueKind.UNSUPPORTED


def is_visible(name: str) -> bool:
    """Return True if a member name is public."""
    return not name.startswith("_")


def _coerce_scalar(value: Any, kind: ValueKind) -> AttributeValue | None:
    """Convert a scalar to a plain attribute value, or None if it does not fit."""
    if kind is ValueKind.BOOL:
        return bool(value)
    if kind is ValueKind.STRING:
        # str.__str__ strips subclasses such as str-based enums
        return str.__str__(value)
    if kind is ValueKind.INT:
        try:
            number = int(value)
        except (OverflowError, ValueError, TypeError):
            return None
        if not INT64_MIN <= number <= INT64_MAX:
            return None
        return number
    if kind is ValueKind.FLOAT:
        try:
            return float(value)
        except (OverflowError, ValueError, TypeError):
            return None
    return None


def _members(value: Any) -> Iterator[tuple[str, Any]]:
    """Yield (name, member) pairs of a keyed value, private members included."""
    if isinstance(value, Mapping):
        for key, item in value.items():
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                continue
            yield str(key), item
    elif _is_namedtuple(value):
        yield from zip(type(value)._fields, value)
    else:
        for f in dataclasses.fields(value):
            if not f.metadata.get(EXPORTED_METADATA_KEY, True):
                continue
            member = getattr(value, f.name, _MISSING)
            if member is _MISSING:
                continue
            yield f.name, member


def _join(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _walk(
    value: Any,
    prefix: str,
    max_depth: int,
    current_depth: int,
    out: dict[str, AttributeValue],
) -> None:
    if current_depth > max_depth:
        log_debug("Dropping attribute subtree '%s' beyond depth %d", prefix, max_depth)
        return

    kind = kind_of(value)
    if kind is ValueKind.KEYED:
        for name, member in _members(value):
            if is_visible(name):
                _walk(member, _join(prefix, name), max_depth, current_depth + 1, out)
    elif kind is ValueKind.SEQUENCE:
        for index, item in enumerate(value):
            _walk(item, _join(prefix, str(index)), max_depth, current_depth + 1, out)
    elif kind is not ValueKind.UNSUPPORTED:
        scalar = _coerce_scalar(value, kind)
        if scalar is None:
            return
        if prefix in out:
            log_debug("Attribute key '%s' already set, keeping first value", prefix)
            return
        out[prefix] = scalar


def value_to_attributes(
    value: Any,
    prefix: str,
    max_depth: int,
    current_depth: int = 0,
) -> dict[str, AttributeValue]:
    """Flatten ``value`` into attributes keyed by dotted paths under ``prefix``.

    Args:
        value: Any runtime value. Unsupported shapes contribute no attributes.
        prefix: Key of a scalar ``value``, and the root of every child key.
        max_depth: Deepest level that is still encoded.
        current_depth: Depth of ``value`` itself.

    Returns:
        Mapping of attribute key to str, bool, int (64-bit range) or float.
        Keys are unique; if two members render to the same key, the first
        one walked is kept.
    """
    attributes: dict[str, AttributeValue] = {}
    _walk(value, prefix, max_depth, current_depth, attributes)
    return attributes
