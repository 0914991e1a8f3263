"""
Tiled JSON map decoder

Decodes maps exported by the Tiled map editor in its JSON format into
immutable, typed Python objects:

    from tiled_json import parse_file

    tiled_map = parse_file("level1.json")
    for layer in tiled_map.tile_layers():
        print(layer.name, layer.data.get_tile(0, 0))

Requisitos:
    pip install numpy
    pip install zstandard      (only for zstd-compressed tile data)
"""

import logging

from .color import Color, parse_color
from .errors import (
    Base64DecodingError, DecompressionError, FormatError, ParsingError, TiledError,
)
from .layers import ImageLayer, Layer, LayerGroup, ObjectGroup, TileLayer
from .objects import (
    EllipseShape, MapObject, ObjectShape, Point, PointShape, PolygonShape,
    PolylineShape, RectShape, Text, TextShape, UnknownShape,
)
from .properties import (
    BoolProperty, ColorProperty, FileProperty, FloatProperty, IntProperty,
    Properties, Property, StringProperty, decode_properties,
)
from .tiledata import Compression, Encoding, decode_tiledata
from .tiled_map import (
    Orientation, TiledMap, decode_version, load, parse, parse_bytes, parse_file,
)
from .tileset import Frame, Tile, Tileset

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "parse",
    "parse_bytes",
    "parse_file",
    "load",
    "TiledMap",
    "Orientation",
    "Tileset",
    "Tile",
    "Frame",
    "Layer",
    "TileLayer",
    "ImageLayer",
    "ObjectGroup",
    "LayerGroup",
    "MapObject",
    "ObjectShape",
    "PointShape",
    "RectShape",
    "EllipseShape",
    "PolylineShape",
    "PolygonShape",
    "TextShape",
    "UnknownShape",
    "Point",
    "Text",
    "Property",
    "Properties",
    "BoolProperty",
    "FloatProperty",
    "IntProperty",
    "ColorProperty",
    "StringProperty",
    "FileProperty",
    "Color",
    "Encoding",
    "Compression",
    "decode_tiledata",
    "decode_properties",
    "decode_version",
    "parse_color",
    "TiledError",
    "DecompressionError",
    "Base64DecodingError",
    "FormatError",
    "ParsingError",
]
