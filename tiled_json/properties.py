"""
Custom properties attached to maps, layers, objects and tiles.

Tiled exports properties as an array of records:

    "properties": [
        {"name": "pi",     "type": "float",  "value": 3.14},
        {"name": "answer", "type": "int",    "value": 42},
        {"name": "tint",   "type": "color",  "value": "#ff336699"}
    ]

The "type" field selects which Property variant the "value" becomes.
Decoded properties are a plain dict keyed by name.

==========================================================================
LENIENCY
==========================================================================

Properties are optional metadata. A missing section, a section that is
not an array, or ANY element that does not match a known type turns the
whole section into None ("no properties") instead of failing the map.
This is an explicit "no match" path: the element matcher returns None,
nothing is raised and caught.

==========================================================================
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple

from .color import Color, match_color
from .fields import (
    I32_MAX, I32_MIN, as_float, is_array, is_bool, is_integer, is_record,
    is_string,
)

logger = logging.getLogger(__name__)


# =============================================================================
# PROPERTY VARIANTS
# =============================================================================

@dataclass(frozen=True)
class Property:
    """Base class of the closed set of property variants below."""
    value: Any
    type_name: ClassVar[str] = ""


@dataclass(frozen=True)
class BoolProperty(Property):
    value: bool
    type_name: ClassVar[str] = "bool"


@dataclass(frozen=True)
class FloatProperty(Property):
    value: float
    type_name: ClassVar[str] = "float"


@dataclass(frozen=True)
class IntProperty(Property):
    """Signed 32-bit integer."""
    value: int
    type_name: ClassVar[str] = "int"


@dataclass(frozen=True)
class ColorProperty(Property):
    value: Color
    type_name: ClassVar[str] = "color"


@dataclass(frozen=True)
class StringProperty(Property):
    value: str
    type_name: ClassVar[str] = "string"


@dataclass(frozen=True)
class FileProperty(Property):
    """Path to a file, relative to the map."""
    value: str
    type_name: ClassVar[str] = "file"


Properties = Dict[str, Property]


# =============================================================================
# VALUE CONVERTERS
# =============================================================================
# Each converter returns the Python value for a JSON value, or None if the
# JSON value does not fit the type.

def _to_bool(value: Any) -> Optional[bool]:
    return value if is_bool(value) else None


def _to_float(value: Any) -> Optional[float]:
    return as_float(value)


def _to_int(value: Any) -> Optional[int]:
    if is_integer(value) and I32_MIN <= value <= I32_MAX:
        return value
    return None


def _to_color(value: Any) -> Optional[Color]:
    return match_color(value) if is_string(value) else None


def _to_string(value: Any) -> Optional[str]:
    return value if is_string(value) else None


# type tag -> (variant, converter)
PROPERTY_TYPES: Dict[str, Tuple[type, Callable[[Any], Any]]] = {
    BoolProperty.type_name: (BoolProperty, _to_bool),
    FloatProperty.type_name: (FloatProperty, _to_float),
    IntProperty.type_name: (IntProperty, _to_int),
    ColorProperty.type_name: (ColorProperty, _to_color),
    StringProperty.type_name: (StringProperty, _to_string),
    FileProperty.type_name: (FileProperty, _to_string),
}


# =============================================================================
# DECODING
# =============================================================================

def match_property(element: Any) -> Optional[Tuple[str, Property]]:
    """
    Match one ``{name, type, value}`` record.

    Returns:
    --------
    (name, Property) on success, None if the record does not have that shape
    or its value does not fit the declared type.
    """
    if not is_record(element):
        return None

    name = element.get('name')
    type_tag = element.get('type')
    if not is_string(name) or not is_string(type_tag):
        return None

    entry = PROPERTY_TYPES.get(type_tag)
    if entry is None:
        return None
    variant, convert = entry

    if 'value' not in element:
        return None
    value = convert(element['value'])
    if value is None:
        return None

    return name, variant(value)


def decode_properties(value: Any) -> Optional[Properties]:
    """
    Decode a JSON properties array into a name -> Property dict.

    Parameters:
    -----------
    value : Any
        The raw "properties" field, or None when the field is absent

    Returns:
    --------
    dict or None : None when the field is absent or cannot be decoded as
    a properties array. Duplicate names: the last one wins.
    """
    if value is None:
        return None

    if not is_array(value):
        logger.debug("Ignoring properties: expected array, got %s",
                     type(value).__name__)
        return None

    properties: Properties = {}
    for index, element in enumerate(value):
        matched = match_property(element)
        if matched is None:
            logger.debug("Ignoring properties: element %d is not a valid "
                         "property record: %r", index, element)
            return None
        name, prop = matched
        properties[name] = prop

    return properties
