"""
Map layers and the resolution of their kinds.

==========================================================================
LAYER KINDS
==========================================================================

Every layer record carries a "type" tag that decides which other fields
it must have:

    "tilelayer"    -> TileLayer      width, height, data (+ encoding, compression)
    "objectgroup"  -> ObjectGroup    objects, color
    "imagelayer"   -> ImageLayer     image, offsetx, offsety, transparentcolor
    "group"        -> LayerGroup     layers (nested, recursive)

Unlike object shapes there is no fallback: a layer with an unknown tag
cannot be placed in the model, so decoding the map fails with FormatError.

The fields shared by all kinds (name, opacity, visible, properties) live on
Layer; the kind-specific part is Layer.data.

==========================================================================
TILE LAYERS
==========================================================================

A tile layer is decoded in two steps. First its raw fields are read into
a private _TileLayerRecord; then TileLayer.from_record runs the tile data
codec on it. Codec errors (bad base64, bad compression stream, partial
tile IDs) propagate unchanged and fail the whole map.

==========================================================================
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple, Union

import numpy as np

from .color import Color, get_color
from .errors import FormatError
from .fields import (
    child_path, expect_record, get_float, get_list, get_bool, get_str,
    get_uint, get_value, index_path,
)
from .objects import MapObject
from .properties import Properties, decode_properties
from .tiledata import Compression, Encoding, decode_tiledata

logger = logging.getLogger(__name__)


# =============================================================================
# TILE LAYER
# =============================================================================

@dataclass(frozen=True)
class _TileLayerRecord:
    """Raw tile layer fields, before the tile data is decoded."""
    width: int
    height: int
    data: Any
    encoding: Optional[Encoding]
    compression: Optional[Compression]

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str) -> '_TileLayerRecord':
        return cls(
            width=get_uint(record, 'width', path),
            height=get_uint(record, 'height', path),
            data=get_value(record, 'data', path),
            encoding=Encoding.from_json(
                get_str(record, 'encoding', path, default=None),
                child_path(path, 'encoding')),
            compression=Compression.from_json(
                get_str(record, 'compression', path, default=None),
                child_path(path, 'compression')),
        )


@dataclass(frozen=True)
class TileLayer:
    """
    Grid of tile IDs (GIDs).

    ``tiles`` is row-major: the tile at column x, row y is
    ``tiles[x + y * width]``. GID 0 means no tile.

    The length of ``tiles`` is normally width * height but is not enforced;
    see tiledata.decode_tiledata.
    """
    width: int                                       # Columns
    height: int                                      # Rows
    tiles: Tuple[int, ...]                           # Row-major GIDs

    @classmethod
    def from_record(cls, record: _TileLayerRecord) -> 'TileLayer':
        return cls(
            width=record.width,
            height=record.height,
            tiles=decode_tiledata(record.data, record.width, record.height,
                                  record.encoding, record.compression),
        )

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'TileLayer':
        return cls.from_record(_TileLayerRecord.from_json(record, path))

    def get_tile(self, x: int, y: int) -> int:
        """
        GID at column x, row y.

        Returns 0 (empty) outside the layer, or when the decoded data is
        shorter than the layer.
        """
        if 0 <= x < self.width and 0 <= y < self.height:
            index = x + y * self.width
            if index < len(self.tiles):
                return self.tiles[index]
        return 0

    def as_array(self) -> np.ndarray:
        """
        Tiles as a read-only ``uint32`` array of shape (height, width),
        indexed ``grid[y, x]``.

        Raises FormatError when the tile count is not width * height.
        """
        if len(self.tiles) != self.width * self.height:
            raise FormatError(
                f"Cannot reshape {len(self.tiles)} tiles to "
                f"{self.height}x{self.width}"
            )
        grid = np.array(self.tiles, dtype=np.uint32).reshape(self.height, self.width)
        grid.flags.writeable = False
        return grid


# =============================================================================
# IMAGE LAYER
# =============================================================================

@dataclass(frozen=True)
class ImageLayer:
    """Single image drawn at an offset (backgrounds, overlays)."""
    offset_x: float
    offset_y: float
    transparent_color: Optional[Color]
    image: str

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'ImageLayer':
        return cls(
            offset_x=get_float(record, 'offsetx', path, default=0.0),
            offset_y=get_float(record, 'offsety', path, default=0.0),
            transparent_color=get_color(record, 'transparentcolor', path,
                                        default=None),
            image=get_str(record, 'image', path),
        )


# =============================================================================
# OBJECT GROUP
# =============================================================================

@dataclass(frozen=True)
class ObjectGroup:
    """Object layer. Order of ``objects`` is the drawing order."""
    objects: Tuple[MapObject, ...]
    color: Optional[Color] = None

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'ObjectGroup':
        objects_path = child_path(path, 'objects')
        objects = tuple(
            MapObject.from_json(expect_record(obj, index_path(objects_path, i)),
                                index_path(objects_path, i))
            for i, obj in enumerate(get_list(record, 'objects', path))
        )
        return cls(
            objects=objects,
            color=get_color(record, 'color', path, default=None),
        )


# =============================================================================
# LAYER GROUP
# =============================================================================

@dataclass(frozen=True)
class LayerGroup:
    """
    Folder of layers. Groups can be nested.

        Layers:
        ├── Background (group)
        │   ├── Sky
        │   └── Mountains
        └── Foreground
    """
    layers: Tuple['Layer', ...]

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'LayerGroup':
        return cls(layers=decode_layers(get_list(record, 'layers', path),
                                        child_path(path, 'layers')))


LayerData = Union[TileLayer, ImageLayer, ObjectGroup, LayerGroup]

# type tag -> layer kind
LAYER_TYPES = {
    "tilelayer": TileLayer,
    "imagelayer": ImageLayer,
    "objectgroup": ObjectGroup,
    "group": LayerGroup,
}

SUPPORTED_LAYER_TYPES = tuple(LAYER_TYPES)


# =============================================================================
# LAYER
# =============================================================================

@dataclass(frozen=True)
class Layer:
    """A layer of any kind plus the fields every kind shares."""
    name: str                                        # Layer name
    opacity: float                                   # 0 = invisible, 1 = opaque
    visible: bool                                    # Is layer rendered?
    data: LayerData                                  # Kind-specific content
    id: int = 0                                      # Unique layer ID
    properties: Optional[Properties] = None          # Custom properties

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'Layer':
        """
        Decode a layer record.

        Raises:
        -------
        ParsingError : missing "type" tag or a bad shared field
        FormatError : unrecognized "type" tag
        """
        type_tag = get_str(record, 'type', path)
        kind = LAYER_TYPES.get(type_tag)
        if kind is None:
            raise FormatError(
                f"Unknown layer type {type_tag!r} at {path or 'layer'}; "
                f"expected one of {', '.join(SUPPORTED_LAYER_TYPES)}"
            )

        name = get_str(record, 'name', path, default="")
        logger.debug("Decoding %s %r", type_tag, name)

        return cls(
            name=name,
            opacity=get_float(record, 'opacity', path, default=1.0),
            visible=get_bool(record, 'visible', path, default=True),
            data=kind.from_json(record, path),
            id=get_uint(record, 'id', path, default=0),
            properties=decode_properties(get_value(record, 'properties', path,
                                                   default=None)),
        )


def decode_layers(records: Any, path: str = "layers") -> Tuple[Layer, ...]:
    """Decode a JSON array of layer records."""
    return tuple(
        Layer.from_json(expect_record(record, index_path(path, i)),
                        index_path(path, i))
        for i, record in enumerate(records)
    )


def iter_layers(layers: Tuple[Layer, ...]) -> Iterator[Layer]:
    """Depth-first walk over layers, descending into groups."""
    for layer in layers:
        yield layer
        if isinstance(layer.data, LayerGroup):
            yield from iter_layers(layer.data.layers)
