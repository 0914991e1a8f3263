"""
Tiled map - the root of a decoded Tiled JSON file.

=============================================================================
USAGE
=============================================================================

    from tiled_json import parse_file

    tiled_map = parse_file("level1.json")
    print(f"Map size: {tiled_map.width}x{tiled_map.height}")

    ground = tiled_map.get_layer_by_name("Ground")
    gid = ground.data.get_tile(5, 10)

The whole document is decoded up front; every model object is immutable.
Decoding either returns a complete TiledMap or raises one TiledError
subclass. There is no partially decoded map.

=============================================================================
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Any, Iterator, List, Optional, Tuple, Union

from .color import Color, get_color
from .errors import FormatError, ParsingError
from .fields import (
    as_float, expect_record, get_bool, get_list, get_str, get_uint, get_value,
    index_path, is_number, is_string, kind_name,
)
from .layers import Layer, LayerGroup, ObjectGroup, TileLayer, decode_layers, iter_layers
from .properties import Properties, decode_properties
from .tileset import Tileset

logger = logging.getLogger(__name__)


class Orientation(Enum):
    ORTHOGONAL = "orthogonal"        # Square grid
    ISOMETRIC = "isometric"          # Diamond tiles
    STAGGERED = "staggered"          # Offset rows/columns
    HEXAGONAL = "hexagonal"          # Hexagon tiles


def decode_version(value: Any, path: str = "version") -> str:
    """
    Map format version as a string.

    Older Tiled versions write the version as a JSON number (``1.2``);
    the decimal text of that number is returned unchanged. Newer versions
    already write a string, which passes through.

    No check is made that the version is one this package understands.
    """
    if is_string(value):
        return value
    if not is_number(value):
        raise ParsingError(f"expected number, found {kind_name(value)}", path)
    if as_float(value) is None:
        raise ParsingError("number out of range", path)
    # repr gives the shortest round-tripping text: 1.2 -> "1.2", 1 -> "1".
    # Exponents are written without sign padding: 1e+20 -> "1e20".
    text = repr(value)
    mantissa, sep, exponent = text.partition('e')
    if not sep:
        return text
    return f"{mantissa}e{int(exponent)}"


# =============================================================================
# TILED MAP CLASS (Main Entry Point)
# =============================================================================

@dataclass(frozen=True)
class TiledMap:
    """
    Complete Tiled map.

    ==========================================================================
    GLOBAL TILE IDs (GIDs)
    ==========================================================================

    Tile layers reference tiles by Global ID across all tilesets:

        Tileset A (first_gid=1):   tiles 1-100
        Tileset B (first_gid=101): tiles 101-200

        GID 0   = empty tile
        GID 150 = local tile 49 of tileset B

    get_tileset_for_gid() does that lookup.

    ==========================================================================
    """
    version: str                                     # Format version
    orientation: Orientation                         # Map orientation
    width: int                                       # Map width in tiles
    height: int                                      # Map height in tiles
    tile_width: int                                  # Grid cell width (px)
    tile_height: int                                 # Grid cell height (px)
    tilesets: Tuple[Tileset, ...]
    layers: Tuple[Layer, ...]
    background_color: Optional[Color] = None
    properties: Optional[Properties] = None
    tiled_version: str = ""                          # Editor version
    infinite: bool = False

    @classmethod
    def from_json(cls, document: Any) -> 'TiledMap':
        """
        Build a map from an already parsed JSON document.

        Raises:
        -------
        ParsingError : missing field or field of the wrong type
        FormatError : bad color, unknown layer type, bad tile data layout
        Base64DecodingError, DecompressionError : bad tile data
        """
        root = expect_record(document)

        version = decode_version(get_value(root, 'version'))

        orientation_tag = get_str(root, 'orientation')
        try:
            orientation = Orientation(orientation_tag)
        except ValueError as err:
            raise ParsingError(f"unknown orientation {orientation_tag!r}",
                               'orientation', err) from err

        tile_width = get_uint(root, 'tilewidth')
        tile_height = get_uint(root, 'tileheight')

        tilesets = tuple(
            Tileset.from_json(expect_record(record, index_path('tilesets', i)),
                              index_path('tilesets', i), tile_width, tile_height)
            for i, record in enumerate(get_list(root, 'tilesets'))
        )

        tiled_map = cls(
            version=version,
            orientation=orientation,
            width=get_uint(root, 'width'),
            height=get_uint(root, 'height'),
            tile_width=tile_width,
            tile_height=tile_height,
            tilesets=tilesets,
            layers=decode_layers(get_list(root, 'layers'), 'layers'),
            background_color=get_color(root, 'backgroundcolor', default=None),
            properties=decode_properties(get_value(root, 'properties', default=None)),
            tiled_version=get_str(root, 'tiledversion', default=""),
            infinite=get_bool(root, 'infinite', default=False),
        )

        logger.debug("Decoded %s map %dx%d: %d tilesets, %d layers",
                     orientation.value, tiled_map.width, tiled_map.height,
                     len(tilesets), len(tiled_map.layers))
        return tiled_map

    # =========================================================================
    # QUERIES
    # =========================================================================

    def iter_layers(self) -> Iterator[Layer]:
        """All layers depth-first, including groups and their children."""
        return iter_layers(self.layers)

    def get_layer_by_name(self, name: str) -> Optional[Layer]:
        """First layer with this name, searching inside groups too."""
        for layer in self.iter_layers():
            if layer.name == name:
                return layer
        return None

    def get_all_layers_flat(self) -> List[Layer]:
        """Every non-group layer, with groups expanded in place."""
        return [layer for layer in self.iter_layers()
                if not isinstance(layer.data, LayerGroup)]

    def tile_layers(self) -> List[Layer]:
        return [layer for layer in self.iter_layers()
                if isinstance(layer.data, TileLayer)]

    def object_groups(self) -> List[Layer]:
        return [layer for layer in self.iter_layers()
                if isinstance(layer.data, ObjectGroup)]

    def get_tileset_for_gid(self, gid: int) -> Optional[Tileset]:
        """
        Tileset that contains *gid*: the one with the largest
        ``first_gid <= gid``. Returns None for GID 0 or when no tileset
        starts at or below it.
        """
        if gid <= 0:
            return None
        best = None
        for tileset in self.tilesets:
            if tileset.first_gid <= gid and (best is None
                                             or tileset.first_gid > best.first_gid):
                best = tileset
        return best


# =============================================================================
# ENTRY POINTS
# =============================================================================

def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not a JSON value")


def load(text: Union[str, bytes, bytearray]) -> TiledMap:
    """Decode a map from JSON text (str or UTF-8 bytes)."""
    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as err:
        # ValueError covers JSONDecodeError, UnicodeDecodeError and the
        # interpreter's limit on integer literal digits.
        raise ParsingError(f"Invalid JSON: {err}", cause=err) from err
    return TiledMap.from_json(document)


def parse_bytes(data: Union[bytes, bytearray]) -> TiledMap:
    """Decode a map from a UTF-8 encoded byte buffer."""
    try:
        text = bytes(data).decode('utf-8')
    except UnicodeDecodeError as err:
        raise ParsingError(f"Map is not valid UTF-8: {err}", cause=err) from err
    return load(text)


def parse(reader: IO) -> TiledMap:
    """Decode a map from a binary or text file object."""
    data = reader.read()
    if isinstance(data, str):
        return load(data)
    return parse_bytes(data)


def parse_file(filepath: Union[str, Path]) -> TiledMap:
    """
    Read and decode a map file.

    Raises:
    -------
    FormatError : the file cannot be opened or read
    TiledError : any decoding failure
    """
    filepath = Path(filepath)
    try:
        with filepath.open('rb') as reader:
            data = reader.read()
    except OSError as err:
        raise FormatError(f"Cannot read {filepath}: {err}", err) from err

    logger.debug("Read %d bytes from %s", len(data), filepath)
    return parse_bytes(data)
