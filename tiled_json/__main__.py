#!/usr/bin/env python3

"""
Tiled JSON map decoder - print a summary of a map

Usage:
    python -m tiled_json <map.json> [--debug]
"""

import logging
import sys
from pathlib import Path

from . import parse_file
from .errors import TiledError
from .layers import ImageLayer, LayerGroup, ObjectGroup, TileLayer


def describe(tiled_map):
    print(f"Map {tiled_map.width}x{tiled_map.height} "
          f"({tiled_map.orientation.value}, version {tiled_map.version})")
    print(f"Tile size: {tiled_map.tile_width}x{tiled_map.tile_height}")

    for tileset in tiled_map.tilesets:
        print(f"Tileset: {tileset.name} (firstgid={tileset.first_gid})")

    for layer in tiled_map.iter_layers():
        data = layer.data
        if isinstance(data, TileLayer):
            used = sum(1 for gid in data.tiles if gid)
            print(f"Tile layer: {layer.name} {data.width}x{data.height}, "
                  f"{used} tiles set")
        elif isinstance(data, ObjectGroup):
            print(f"Object layer: {layer.name}, {len(data.objects)} objects")
        elif isinstance(data, ImageLayer):
            print(f"Image layer: {layer.name} ({data.image})")
        elif isinstance(data, LayerGroup):
            print(f"Group: {layer.name}, {len(data.layers)} layers")

    if tiled_map.properties:
        for name, prop in sorted(tiled_map.properties.items()):
            print(f"Property: {name} = {prop.value!r} ({prop.type_name})")


def main():
    args = sys.argv[1:]
    debug = '--debug' in args
    args = [a for a in args if a != '--debug']

    if len(args) != 1:
        print(__doc__)
        sys.exit(1)

    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    source_path = args[0]
    if not Path(source_path).exists():
        print(f"Error: File '{source_path}' not found")
        sys.exit(1)

    try:
        tiled_map = parse_file(source_path)
    except TiledError as e:
        print(f"Error: {e}")
        sys.exit(1)

    describe(tiled_map)


if __name__ == "__main__":
    main()
