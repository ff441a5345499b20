"""
Runtime values for the Lox expression language.

Values map onto Python builtins with no wrapper classes:

- Number  -> float
- String  -> str
- Boolean -> bool
- Nil     -> None

No implicit coercion happens between variants. ``bool`` is checked before
anything numeric since ``bool`` is an ``int`` subclass in Python.
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import StrEnum

Value = float | str | bool | None


class ValueType(StrEnum):
    """Variant tags for runtime values."""

    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    NIL = "nil"


def type_of(value: Value) -> ValueType:
    """Return the variant tag of a runtime value."""
    if value is None:
        return ValueType.NIL
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if isinstance(value, float):
        return ValueType.NUMBER
    if isinstance(value, str):
        return ValueType.STRING
    raise TypeError(f"Not a Lox value: {value!r}")


def is_number(value: Value) -> bool:
    return isinstance(value, float) and not isinstance(value, bool)


def values_equal(left: Value, right: Value) -> bool:
    """Structural equality, only between values of the same variant."""
    if type_of(left) != type_of(right):
        return False
    return left == right


def stringify(value: Value) -> str:
    """Render a value the way the REPL prints it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            # Shortest round-trip digits, expanded without an exponent
            return format(Decimal(repr(value)).to_integral_value(), "f")
        return repr(value)
    return value
