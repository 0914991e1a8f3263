"""Tilesets referenced by a map."""

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Optional, Tuple

from .fields import (
    child_path, expect_record, get_list, get_str, get_uint, get_value,
    index_path,
)
from .properties import Properties, decode_properties


@dataclass(frozen=True)
class Frame:
    """One step of a tile animation."""
    tile_id: int                 # Local tile ID shown during this frame
    duration: int                # Milliseconds

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'Frame':
        return cls(
            tile_id=get_uint(record, 'tileid', path),
            duration=get_uint(record, 'duration', path),
        )


@dataclass(frozen=True)
class Tile:
    """
    Metadata for one tile of a tileset.

    Only tiles with properties, animations or a type are listed, so a
    tileset usually has far fewer Tile records than tiles. ``id`` is local
    to the tileset: ``gid = tileset.first_gid + tile.id``.
    """
    id: int
    type: str = ""
    animation: Optional[Tuple[Frame, ...]] = None
    properties: Optional[Properties] = None

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "") -> 'Tile':
        tile_type = get_str(record, 'type', path, default=None)
        if tile_type is None:
            tile_type = get_str(record, 'class', path, default="")

        animation = None
        frames = get_list(record, 'animation', path, default=None)
        if frames is not None:
            frames_path = child_path(path, 'animation')
            animation = tuple(
                Frame.from_json(expect_record(frame, index_path(frames_path, i)),
                                index_path(frames_path, i))
                for i, frame in enumerate(frames)
            )

        return cls(
            id=get_uint(record, 'id', path),
            type=tile_type,
            animation=animation,
            properties=decode_properties(get_value(record, 'properties', path,
                                                   default=None)),
        )


@dataclass(frozen=True)
class Tileset:
    """
    A tileset, usually one spritesheet image cut into a grid of tiles.

    ==========================================================================
    EMBEDDED vs EXTERNAL TILESETS
    ==========================================================================

    EMBEDDED: the whole tileset is inside the map JSON.

    EXTERNAL: the map only holds a reference,
        {"firstgid": 1, "source": "terrain.json"}
    The referenced file is NOT loaded (no file I/O during decode). Such a
    tileset keeps ``source``, takes its name from the file stem and its
    tile size from the map; the other fields are empty.

    ==========================================================================
    """
    first_gid: int                                   # GID of the first tile
    name: str                                        # Tileset name
    tile_width: int                                  # Max tile width (px)
    tile_height: int                                 # Max tile height (px)
    spacing: int = 0                                 # Pixels between tiles
    margin: int = 0                                  # Pixels around edge
    image: str = ""                                  # Spritesheet path
    tile_count: int = 0                              # Number of tiles
    columns: int = 0                                 # Tiles per row
    tiles: Optional[Tuple[Tile, ...]] = None         # Per-tile metadata
    properties: Optional[Properties] = None
    source: Optional[str] = None                     # External tileset path

    @classmethod
    def from_json(cls, record: Dict[str, Any], path: str = "",
                  map_tile_width: int = 0, map_tile_height: int = 0) -> 'Tileset':
        """
        Decode a tileset record.

        Parameters:
        -----------
        record : dict
            The tileset JSON object
        map_tile_width, map_tile_height : int
            Map tile size, used for external tileset references
        """
        first_gid = get_uint(record, 'firstgid', path)

        source = get_str(record, 'source', path, default=None)
        if source is not None:
            return cls(
                first_gid=first_gid,
                name=PurePosixPath(source).stem,
                tile_width=map_tile_width,
                tile_height=map_tile_height,
                source=source,
            )

        tiles = None
        tile_records = get_list(record, 'tiles', path, default=None)
        if tile_records is not None:
            tiles_path = child_path(path, 'tiles')
            tiles = tuple(
                Tile.from_json(expect_record(tile, index_path(tiles_path, i)),
                               index_path(tiles_path, i))
                for i, tile in enumerate(tile_records)
            )

        return cls(
            first_gid=first_gid,
            name=get_str(record, 'name', path),
            tile_width=get_uint(record, 'tilewidth', path),
            tile_height=get_uint(record, 'tileheight', path),
            spacing=get_uint(record, 'spacing', path, default=0),
            margin=get_uint(record, 'margin', path, default=0),
            # Image collection tilesets have no sheet image.
            image=get_str(record, 'image', path, default=""),
            tile_count=get_uint(record, 'tilecount', path, default=0),
            columns=get_uint(record, 'columns', path, default=0),
            tiles=tiles,
            properties=decode_properties(get_value(record, 'properties', path,
                                                   default=None)),
        )

    def get_tile(self, local_id: int) -> Optional[Tile]:
        """Metadata for a local tile ID, or None if the tile has none."""
        for tile in self.tiles or ():
            if tile.id == local_id:
                return tile
        return None

    def contains_gid(self, gid: int) -> bool:
        """True if *gid* falls inside this tileset (needs ``tile_count``)."""
        return self.first_gid <= gid < self.first_gid + self.tile_count
