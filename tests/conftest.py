"""Shared pytest fixtures and helpers for tiled_json tests."""

import base64
import copy
import gzip
import struct
import zlib
from typing import Any, Dict, List, Optional

import pytest

GROUND_TILES = [
    1, 2, 3, 4,
    5, 6, 7, 8,
    0, 0, 9, 0x80000005,       # last tile has the horizontal flip flag
]


def pack_tiles(tiles: List[int]) -> bytes:
    return struct.pack(f"<{len(tiles)}I", *tiles)


def encode_tiles(tiles: List[int], compression: Optional[str] = None) -> str:
    """Base64 text for *tiles*, compressed the way Tiled would."""
    raw = pack_tiles(tiles)
    if compression == "zlib":
        raw = zlib.compress(raw)
    elif compression == "gzip":
        raw = gzip.compress(raw)
    elif compression == "zstd":
        import zstandard
        raw = zstandard.ZstdCompressor().compress(raw)
    return base64.b64encode(raw).decode("ascii")


def tile_layer(name: str, tiles: List[int], width: int, height: int,
               encoding: Optional[str] = None,
               compression: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "type": "tilelayer",
        "id": extra.pop("id", 1),
        "name": name,
        "width": width,
        "height": height,
        "opacity": 1,
        "visible": True,
        "x": 0,
        "y": 0,
    }
    if encoding == "base64":
        record["encoding"] = "base64"
        record["data"] = encode_tiles(tiles, compression)
        if compression:
            record["compression"] = compression
    else:
        if encoding:
            record["encoding"] = encoding
        record["data"] = list(tiles)
    record.update(extra)
    return record


def make_map(layers: List[Dict[str, Any]], **extra: Any) -> Dict[str, Any]:
    document: Dict[str, Any] = {
        "version": 1.2,
        "tiledversion": "1.2.4",
        "orientation": "orthogonal",
        "renderorder": "right-down",
        "width": 4,
        "height": 3,
        "tilewidth": 32,
        "tileheight": 32,
        "infinite": False,
        "nextobjectid": 5,
        "type": "map",
        "tilesets": [
            {
                "firstgid": 1,
                "name": "terrain",
                "tilewidth": 32,
                "tileheight": 32,
                "tilecount": 64,
                "columns": 8,
                "spacing": 0,
                "margin": 0,
                "image": "terrain.png",
                "imagewidth": 256,
                "imageheight": 256,
            },
            {"firstgid": 65, "source": "tilesets/props.json"},
        ],
        "layers": layers,
    }
    document.update(extra)
    return document


OBJECTS = [
    {"id": 1, "name": "spawn", "type": "spawn", "x": 16, "y": 16,
     "width": 0, "height": 0, "rotation": 0, "visible": True, "point": True},
    {"id": 2, "name": "wall", "type": "collision", "x": 0, "y": 64,
     "width": 128, "height": 32, "rotation": 0, "visible": True},
    {"id": 3, "name": "pond", "type": "", "x": 40, "y": 40,
     "width": 24, "height": 16, "rotation": 0, "visible": True,
     "ellipse": True},
    {"id": 4, "name": "path", "type": "", "x": 10, "y": 10,
     "width": 0, "height": 0, "rotation": 0, "visible": False,
     "polyline": [{"x": 0, "y": 0}, {"x": 30, "y": 5.5}]},
]

MAP_PROPERTIES = [
    {"name": "pi", "type": "float", "value": 3.14},
    {"name": "answer", "type": "int", "value": 42},
    {"name": "title", "type": "string", "value": "Level 1"},
    {"name": "fog", "type": "color", "value": "#80336699"},
]


def _map_with(encoding: Optional[str], compression: Optional[str]) -> Dict[str, Any]:
    return make_map(
        [
            tile_layer("Ground", GROUND_TILES, 4, 3, encoding, compression),
            {
                "type": "objectgroup", "id": 2, "name": "Objects",
                "opacity": 1, "visible": True, "x": 0, "y": 0,
                "draworder": "topdown", "color": "#a0a0a4",
                "objects": copy.deepcopy(OBJECTS),
            },
            {
                "type": "imagelayer", "id": 3, "name": "Sky",
                "opacity": 0.5, "visible": True, "x": 0, "y": 0,
                "offsetx": 4, "offsety": -2.5, "image": "sky.png",
                "transparentcolor": "#ff00ff",
            },
        ],
        properties=copy.deepcopy(MAP_PROPERTIES),
        backgroundcolor="#203040",
    )


@pytest.fixture
def map_document() -> Dict[str, Any]:
    """Map with base64 + zlib tile data, as Tiled saves by default."""
    return _map_with("base64", "zlib")


@pytest.fixture
def map_csv_document() -> Dict[str, Any]:
    """The same map with its tile data re-encoded as a plain array."""
    return _map_with("csv", None)
