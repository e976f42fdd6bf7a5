from __future__ import annotations

import math
from enum import Enum
from typing import Any, Callable

from pydantic import ConfigDict, JsonValue, TypeAdapter, ValidationError

from .errors import DivisionByZero, InvalidValue

Number = int | float

# NaN and infinities have no JSON spelling.
_JSON_VALUE = TypeAdapter(JsonValue, config=ConfigDict(allow_inf_nan=False))

# Marks a key with no entry; distinct from a stored JSON null.
MISSING: Any = object()


class ValueKind(str, Enum):
    """
    The shapes a stored value can take.

    Every operation that cares about the shape of an entry asks `kind_of`
    instead of poking at the value itself.
    """

    MISSING = "missing"
    NULL = "null"
    NUMBER = "number"
    BOOL = "bool"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> ValueKind:
    if value is MISSING:
        return ValueKind.MISSING
    if value is None:
        return ValueKind.NULL
    # bool is an int subclass; check it first.
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    raise InvalidValue(f"Unsupported value type: {type(value).__name__}")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def require_str(*values: Any) -> None:
    for v in values:
        if not isinstance(v, str):
            raise InvalidValue(f"Expected a string key, got {type(v).__name__}")


def require_number(value: Any) -> Number:
    if not is_number(value):
        raise InvalidValue(f"Expected a number, got {type(value).__name__}")
    return value


def to_storable(value: Any) -> JsonValue:
    """
    Validate a value for storage and return a detached JSON copy of it.

    Top-level None is rejected; nested nulls are plain JSON and pass.
    Anything that cannot round-trip through JSON (sets, cycles, NaN or
    infinite floats, non-string mapping keys) raises InvalidValue.
    """
    if value is None:
        raise InvalidValue()
    try:
        return _JSON_VALUE.validate_python(value)
    except ValidationError as e:
        raise InvalidValue(f"Value is not storable as JSON: {e.errors()[0]['msg']}") from e


def same_value(a: Any, b: Any) -> bool:
    """Kind-aware equality: True never matches 1, but 1 matches 1.0."""
    if kind_of(a) is not kind_of(b):
        return False
    return a == b


def _mod(a: Number, b: Number) -> Number:
    # Truncated remainder, sign follows the dividend.
    if isinstance(a, int) and isinstance(b, int):
        r = abs(a) % abs(b)
        return -r if a < 0 else r
    return math.fmod(a, b)


def _power(a: Number, b: Number) -> Number:
    try:
        result = a**b
    except ZeroDivisionError as e:
        raise DivisionByZero("Cannot raise zero to a negative power.") from e
    if isinstance(result, complex):
        raise InvalidValue("Result is not a real number.")
    return result


ARITHMETIC: dict[str, Callable[[Number, Number], Number]] = {
    "add": lambda a, b: a + b,
    "subtract": lambda a, b: a - b,
    "multiply": lambda a, b: a * b,
    "divide": lambda a, b: a / b,
    "mod": _mod,
    "power": _power,
}

ZERO_GUARDED = frozenset({"divide", "mod"})


def apply_arithmetic(operation: str, current: Number, operand: Number) -> Number:
    """Run one arithmetic operation; the result must still be a finite JSON number."""
    try:
        result = ARITHMETIC[operation](current, operand)
    except OverflowError as e:
        raise InvalidValue("Result is too large to store.") from e
    if isinstance(result, float) and not math.isfinite(result):
        raise InvalidValue("Result is not a finite number.")
    return result
