"""Structural equality for workflow data.

Values are classified into a small set of kinds before they are compared, so
the rules stay the same no matter which Python container carried the data:

* ``None`` only equals ``None`` and never equals :data:`MISSING`;
* ``int`` and ``float`` share the ``number`` kind, ``bool`` is its own kind;
* lists and tuples compare element-wise by index;
* mappings compare by key set and then value by value;
* values of different kinds are never equal.
"""

from collections.abc import Mapping
from typing import Any


class _Missing:
    """Marker for a value that is absent, as opposed to an explicit ``None``."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def value_kind(value: Any) -> str:
    """Return the comparison kind of ``value``."""
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "list"
    if isinstance(value, Mapping):
        return "map"
    return "other"


def deep_equal(a: Any, b: Any) -> bool:
    """Compare two values structurally.

    Terminates on any finite, acyclic input and never raises.
    """
    kind = value_kind(a)
    if kind != value_kind(b):
        return False

    if kind in ("missing", "null"):
        return True

    if kind == "list":
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    if kind == "map":
        if a.keys() != b.keys():
            return False
        return all(deep_equal(a[key], b[key]) for key in a)

    if kind == "other" and type(a) is not type(b):
        return False

    try:
        return bool(a == b)
    except (TypeError, ValueError):
        # Objects with array-like __eq__ cannot be reduced to a single bool
        return False
