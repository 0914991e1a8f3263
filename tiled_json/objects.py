"""
Objects in object layers and the resolution of their shapes.

==========================================================================
OBJECT SHAPES
==========================================================================

Tiled stores every object as one flat JSON record. There is no "shape"
field; the shape is implied by which keys are present:

    {"point": true, ...}                           -> PointShape (any boolean)
    {"ellipse": true, "width": 8, "height": 8}     -> EllipseShape
    {"polyline": [{"x": 0, "y": 0}, ...]}          -> PolylineShape
    {"polygon":  [{"x": 0, "y": 0}, ...]}          -> PolygonShape
    {"text": {"text": "Hi"}, "width": .., ...}     -> TextShape
    {"width": 32, "height": 16}                    -> RectShape
    anything else                                  -> UnknownShape

Tiled writes width/height on points and polygons too (usually 0), so the
checks run in the fixed order of SHAPE_RESOLVERS below and the first match
wins. An object whose shape matches nothing is still decoded, with
UnknownShape, so newer Tiled features never break loading a map.

==========================================================================
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .fields import (
    as_float, get_bool, get_float, get_str, get_uint, get_value, is_array,
    is_bool, is_record, is_string, is_unsigned,
)
from .properties import Properties, decode_properties

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    """Vertex of a polyline or polygon, relative to the object position."""
    x: float
    y: float


@dataclass(frozen=True)
class Text:
    text: str
    wrap: bool = False
    font_family: Optional[str] = None
    pixel_size: Optional[int] = None


# =============================================================================
# SHAPE VARIANTS
# =============================================================================

class ObjectShape:
    """Base class of the closed set of object shapes."""
    __slots__ = ()


@dataclass(frozen=True)
class PointShape(ObjectShape):
    pass


@dataclass(frozen=True)
class RectShape(ObjectShape):
    width: float
    height: float


@dataclass(frozen=True)
class EllipseShape(ObjectShape):
    width: float
    height: float


@dataclass(frozen=True)
class PolylineShape(ObjectShape):
    points: Tuple[Point, ...]


@dataclass(frozen=True)
class PolygonShape(ObjectShape):
    points: Tuple[Point, ...]


@dataclass(frozen=True)
class TextShape(ObjectShape):
    text: Text
    width: float
    height: float


@dataclass(frozen=True)
class UnknownShape(ObjectShape):
    """Fallback for records that match none of the known shapes."""


# =============================================================================
# SHAPE MATCHERS
# =============================================================================
# Each matcher returns the shape, or None when the record does not have the
# fields that shape requires. They never raise.

def _size(record: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    width = as_float(record.get('width'))
    height = as_float(record.get('height'))
    if width is None or height is None:
        return None
    return width, height


def _match_points(value: Any) -> Optional[Tuple[Point, ...]]:
    if not is_array(value):
        return None
    points = []
    for item in value:
        if not is_record(item):
            return None
        x, y = as_float(item.get('x')), as_float(item.get('y'))
        if x is None or y is None:
            return None
        points.append(Point(x, y))
    return tuple(points)


def _match_text(value: Any) -> Optional[Text]:
    if not is_record(value) or not is_string(value.get('text')):
        return None

    wrap = value.get('wrap', False)
    font_family = value.get('fontfamily')
    pixel_size = value.get('pixelsize')

    if not is_bool(wrap):
        return None
    if font_family is not None and not is_string(font_family):
        return None
    if pixel_size is not None and not is_unsigned(pixel_size):
        return None

    return Text(value['text'], wrap, font_family, pixel_size)


def _match_point(record: Dict[str, Any]) -> Optional[ObjectShape]:
    # Any boolean selects the shape; Tiled only writes the key when it is true.
    if is_bool(record.get('point')):
        return PointShape()
    return None


def _match_ellipse(record: Dict[str, Any]) -> Optional[ObjectShape]:
    size = _size(record)
    if is_bool(record.get('ellipse')) and size is not None:
        return EllipseShape(*size)
    return None


def _match_polyline(record: Dict[str, Any]) -> Optional[ObjectShape]:
    points = _match_points(record.get('polyline'))
    return PolylineShape(points) if points is not None else None


def _match_polygon(record: Dict[str, Any]) -> Optional[ObjectShape]:
    points = _match_points(record.get('polygon'))
    return PolygonShape(points) if points is not None else None


def _match_text_shape(record: Dict[str, Any]) -> Optional[ObjectShape]:
    text = _match_text(record.get('text'))
    size = _size(record)
    if text is not None and size is not None:
        return TextShape(text, *size)
    return None


def _match_rect(record: Dict[str, Any]) -> Optional[ObjectShape]:
    size = _size(record)
    return RectShape(*size) if size is not None else None


# Priority order matters: first match wins.
SHAPE_RESOLVERS: List[Callable[[Dict[str, Any]], Optional[ObjectShape]]] = [
    _match_point,
    _match_ellipse,
    _match_polyline,
    _match_polygon,
    _match_text_shape,
    _match_rect,
]


def resolve_shape(record: Dict[str, Any]) -> ObjectShape:
    """Classify an object record. Never fails; see module docstring."""
    for matcher in SHAPE_RESOLVERS:
        shape = matcher(record)
        if shape is not None:
            return shape

    logger.debug("Object %r has no recognized shape", record.get('id'))
    return UnknownShape()


# =============================================================================
# MAP OBJECT
# =============================================================================

@dataclass(frozen=True)
class MapObject:
    """
    Object in an object layer.

    Objects are vector shapes placed on the map, used for collision
    shapes, spawn points, trigger areas and entity placement. Tile objects
    carry a ``gid`` and display a tile graphic at their position.
    """
    id: int                                          # Unique object ID
    name: str                                        # Object name
    type: str                                        # Object type/class
    x: float                                         # X position (pixels)
    y: float                                         # Y position (pixels)
    rotation: float                                  # Degrees clockwise
    visible: bool                                    # Is object visible?
    shape: ObjectShape                               # Resolved shape
    gid: Optional[int] = None                        # Tile GID (tile objects)
    properties: Optional[Properties] = None          # Custom properties

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'MapObject':
        """Decode an object record. Raises ParsingError for bad fields."""
        # Tiled 1.9 renamed "type" to "class"; 1.10 went back to "type".
        obj_type = get_str(record, 'type', path, default=None)
        if obj_type is None:
            obj_type = get_str(record, 'class', path, default="")

        return cls(
            id=get_uint(record, 'id', path),
            name=get_str(record, 'name', path, default=""),
            type=obj_type,
            x=get_float(record, 'x', path),
            y=get_float(record, 'y', path),
            rotation=get_float(record, 'rotation', path, default=0.0),
            visible=get_bool(record, 'visible', path, default=True),
            shape=resolve_shape(record),
            gid=get_uint(record, 'gid', path, default=None),
            properties=decode_properties(get_value(record, 'properties', path,
                                                   default=None)),
        )
