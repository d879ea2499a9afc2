"""Preference value shapes, conversion rules and errors."""

from __future__ import annotations

from enum import Enum
from typing import Any, FrozenSet, Tuple, Union

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

PreferenceValue = Union[str, int, float, bool, FrozenSet[str]]


class ValueType(str, Enum):
    """The six storable shapes."""

    STRING = "string"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    BOOLEAN = "boolean"
    STRING_SET = "string-set"


# A stored value together with the shape it was written as
Entry = Tuple[ValueType, PreferenceValue]


class PreferencesError(Exception):
    """Base error for the preferences package."""


class PreferenceConversionError(PreferencesError, TypeError):
    """Stored value does not have the requested shape."""

    def __init__(self, key: str, expected: ValueType, actual: Any):
        super().__init__(
            f"Preference {key!r} holds {type(actual).__name__} {actual!r}, not {expected.value}"
        )
        self.key = key
        self.expected = expected
        self.actual = actual


class UnsupportedValueError(PreferencesError, TypeError):
    """A write was given a value outside the supported shapes."""


def _is_int(value: Any) -> bool:
    # bool is a subclass of int but is its own shape here
    return isinstance(value, int) and not isinstance(value, bool)


def _is_string_set(value: Any) -> bool:
    return isinstance(value, (set, frozenset)) and all(isinstance(v, str) for v in value)


def validate(key: str, value_type: ValueType, value: Any) -> PreferenceValue:
    """Check a value staged for writing and return its stored form."""
    if value_type is ValueType.STRING and isinstance(value, str):
        return value
    if value_type is ValueType.INT and _is_int(value) and INT32_MIN <= value <= INT32_MAX:
        return value
    if value_type is ValueType.LONG and _is_int(value) and INT64_MIN <= value <= INT64_MAX:
        return value
    if value_type is ValueType.FLOAT and (_is_int(value) or isinstance(value, float)):
        try:
            return float(value)
        except OverflowError:
            raise UnsupportedValueError(
                f"Value for {key!r} is out of range for float: {value!r}"
            ) from None
    if value_type is ValueType.BOOLEAN and isinstance(value, bool):
        return value
    if value_type is ValueType.STRING_SET and _is_string_set(value):
        return frozenset(value)
    raise UnsupportedValueError(
        f"Unexpected value for {key!r} as {value_type.value}: {value!r}"
    )


def infer_type(key: str, value: Any) -> ValueType:
    """Pick the shape a bare Python value is stored as."""
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if _is_int(value):
        return ValueType.INT if INT32_MIN <= value <= INT32_MAX else ValueType.LONG
    if isinstance(value, float):
        return ValueType.FLOAT
    if isinstance(value, str):
        return ValueType.STRING
    if _is_string_set(value):
        return ValueType.STRING_SET
    raise UnsupportedValueError(f"Unexpected value for {key!r}: {value!r}")


def convert(key: str, value_type: ValueType, stored: Any) -> Any:
    """Convert a stored value to the requested shape, failing loudly on mismatch."""
    if value_type is ValueType.STRING_SET:
        if isinstance(stored, (set, frozenset, list, tuple)) and all(
            isinstance(v, str) for v in stored
        ):
            return set(stored)
        raise PreferenceConversionError(key, value_type, stored)
    if value_type is ValueType.FLOAT and not isinstance(stored, float):
        raise PreferenceConversionError(key, value_type, stored)
    try:
        return validate(key, value_type, stored)
    except UnsupportedValueError:
        raise PreferenceConversionError(key, value_type, stored) from None

