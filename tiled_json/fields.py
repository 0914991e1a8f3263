"""
Typed field access on the JSON value tree.

The standard library ``json`` module turns the document into plain dicts,
lists, strings, numbers, booleans and None. This module is the thin layer
between that tree and the model classes:

- ``get_*`` functions look a field up in a record and check its JSON kind.
  Without a ``default`` a missing field is a ParsingError; with one, the
  default is returned. A present field of the wrong kind is always a
  ParsingError.
- ``is_*`` predicates answer "does this value have kind X" without raising.
  The shape resolver uses them to test whether a record matches a shape,
  which is a "did not match" answer rather than a malformed-input error.

Paths are threaded through every call so error messages point at the exact
field (``layers[3].objects[0].x``).
"""

import math
from typing import Any, Dict, List, Optional

from .errors import ParsingError

# Sentinel default: the field must be present.
REQUIRED = object()

U32_MAX = 0xFFFFFFFF
I32_MIN = -(1 << 31)
I32_MAX = (1 << 31) - 1


# =============================================================================
# KIND PREDICATES
# =============================================================================
# bool is a subclass of int in Python, so every numeric check excludes it
# explicitly: JSON true/false are never numbers.

def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_unsigned(value: Any) -> bool:
    return is_integer(value) and value >= 0


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_array(value: Any) -> bool:
    return isinstance(value, list)


def is_record(value: Any) -> bool:
    return isinstance(value, dict)


def kind_name(value: Any) -> str:
    """JSON name of a value's kind, for error messages."""
    if value is None:
        return "null"
    if is_bool(value):
        return "boolean"
    if is_number(value):
        return "number"
    if is_string(value):
        return "string"
    if is_array(value):
        return "array"
    if is_record(value):
        return "object"
    return type(value).__name__


def as_float(value: Any) -> Optional[float]:
    """*value* as a finite float, or None if it is not a number or too large."""
    if not is_number(value):
        return None
    try:
        result = float(value)
    except OverflowError:
        return None
    return result if math.isfinite(result) else None


# =============================================================================
# PATHS
# =============================================================================

def child_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def index_path(path: str, index: int) -> str:
    return f"{path}[{index}]"


# =============================================================================
# FIELD LOOKUP
# =============================================================================

def expect_record(value: Any, path: str = "") -> Dict[str, Any]:
    """Return *value* if it is a JSON object, else raise ParsingError."""
    if not is_record(value):
        raise ParsingError(f"expected object, found {kind_name(value)}", path)
    return value


def _lookup(record: Dict[str, Any], key: str, path: str, default: Any,
            check, expected: str) -> Any:
    value = record.get(key, REQUIRED)
    if value is REQUIRED:
        if default is REQUIRED:
            raise ParsingError(f"missing field '{key}'", path)
        return default
    # An explicit null reads as absence for optional fields.
    if value is None and default is not REQUIRED:
        return default
    if not check(value):
        raise ParsingError(
            f"expected {expected}, found {kind_name(value)}",
            child_path(path, key),
        )
    return value


def get_value(record: Dict[str, Any], key: str, path: str = "",
              default: Any = REQUIRED) -> Any:
    """Any JSON value; only presence is checked."""
    return _lookup(record, key, path, default, lambda v: True, "any value")


def get_str(record: Dict[str, Any], key: str, path: str = "",
            default: Any = REQUIRED) -> str:
    return _lookup(record, key, path, default, is_string, "string")


def get_bool(record: Dict[str, Any], key: str, path: str = "",
             default: Any = REQUIRED) -> bool:
    return _lookup(record, key, path, default, is_bool, "boolean")


def get_float(record: Dict[str, Any], key: str, path: str = "",
              default: Any = REQUIRED) -> float:
    value = _lookup(record, key, path, default, is_number, "number")
    if value is None:
        return value
    result = as_float(value)
    if result is None:
        raise ParsingError("number out of range", child_path(path, key))
    return result


def get_uint(record: Dict[str, Any], key: str, path: str = "",
             default: Any = REQUIRED) -> int:
    """Unsigned 32-bit integer field (sizes, IDs, GIDs)."""
    return _lookup(record, key, path, default,
                   lambda v: is_unsigned(v) and v <= U32_MAX,
                   "unsigned 32-bit integer")


def get_list(record: Dict[str, Any], key: str, path: str = "",
             default: Any = REQUIRED) -> List[Any]:
    return _lookup(record, key, path, default, is_array, "array")
