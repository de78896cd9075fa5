"""
Parameter types for command arguments.

Maps declared type names (and their short forms) to checking and
conversion functions. Every raw token starts life as a string.
"""

import math
import re
from enum import Enum


class ParameterType(str, Enum):
    """Canonical parameter types."""
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NUMBER = "number"
    STRING = "string"


# Short forms accepted in type declarations
TYPE_ALIASES: dict[str, ParameterType] = {
    "boolean": ParameterType.BOOLEAN,
    "bool": ParameterType.BOOLEAN,
    "integer": ParameterType.INTEGER,
    "int": ParameterType.INTEGER,
    "number": ParameterType.NUMBER,
    "num": ParameterType.NUMBER,
    "string": ParameterType.STRING,
    "str": ParameterType.STRING,
}

_NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INTEGRAL_PATTERN = re.compile(r"^[+-]?\d+$")


def resolve_type(name: "str | ParameterType") -> ParameterType | None:
    """
    Resolve a declared type name to its canonical type.

    Args:
        name: Type name or alias, case-insensitive.

    Returns:
        The canonical type, or None if the name is not recognized.
    """
    if isinstance(name, ParameterType):
        return name
    if not isinstance(name, str):
        raise TypeError(f"Expected type name to be a string, got {type(name).__name__}")
    return TYPE_ALIASES.get(name.strip().lower())


def _require_type(name: "str | ParameterType") -> ParameterType:
    resolved = resolve_type(name)
    if resolved is None:
        raise ValueError(f"Unrecognized type: '{name}'")
    return resolved


def _is_numeric(value: str) -> bool:
    text = value.strip()
    if not _NUMERIC_PATTERN.match(text):
        return False
    return math.isfinite(float(text))


def is_type(value: str, expected: "str | ParameterType") -> bool:
    """
    Check whether a raw token can be read as the given type.

    Args:
        value: The raw token.
        expected: Type name or alias.

    Returns:
        True if the token is of the expected type.

    Raises:
        TypeError: If the token is not a string.
        ValueError: If the type name is not recognized.
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected value to be a string, got {type(value).__name__}")

    kind = _require_type(expected)
    if kind is ParameterType.BOOLEAN:
        return value.lower() in ("true", "false")
    if kind in (ParameterType.INTEGER, ParameterType.NUMBER):
        return _is_numeric(value)
    return True


def convert_type(value: str, target: "str | ParameterType") -> bool | int | float | str:
    """
    Convert a raw token to the given type.

    The token is assumed to have passed is_type() for the same type.
    Integers truncate toward zero.
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected value to be a string, got {type(value).__name__}")

    kind = _require_type(target)
    if kind is ParameterType.BOOLEAN:
        return value.lower() == "true"
    if kind is ParameterType.INTEGER:
        text = value.strip()
        if _INTEGRAL_PATTERN.match(text):
            return int(text)
        return math.trunc(float(text))
    if kind is ParameterType.NUMBER:
        text = value.strip()
        if _INTEGRAL_PATTERN.match(text):
            return int(text)
        return float(text)
    return value
