"""
Tile layer data decoding.

Turns the "data" field of a tile layer into a flat, row-major sequence of
32-bit tile IDs (GIDs): ``tiles[x + y * width]``.

==========================================================================
DATA ENCODINGS
==========================================================================

1. CSV (the default when "encoding" is absent):
   "data": [1, 2, 3, 4, 5, 6]
   A plain JSON array of numbers. Despite the name there is no CSV text
   in the JSON format.

2. Base64:
   "data": "AQAAAAIAAAADAAAABAAAAAUAAAAGAAAA"
   Little-endian uint32 values, base64 encoded, optionally compressed.

==========================================================================
COMPRESSION (with Base64 only)
==========================================================================

- zlib: deflate with zlib header and trailer
- gzip: deflate with gzip header
- zstd: Zstandard, needs the optional ``zstandard`` package

Pipeline for base64 data:

    text --trim--> base64 decode --> decompress --> split in 4 bytes --> u32

==========================================================================
LENIENCY
==========================================================================

- CSV elements that are not non-negative integers are skipped.
- The decoded length is NOT checked against width * height. Callers that
  need the invariant check ``len(tiles) == width * height`` themselves.

==========================================================================
"""

import base64
import gzip
import logging
import struct
import zlib
from enum import Enum
from typing import Any, List, Optional, Tuple

from .errors import Base64DecodingError, DecompressionError, FormatError, ParsingError
from .fields import U32_MAX, is_unsigned, kind_name

logger = logging.getLogger(__name__)

TILE_ID_SIZE = 4                   # Bytes per tile ID in binary data

# Largest integer a JSON parser that reads into u64 keeps as an integer.
# Anything bigger is not a tile ID and is skipped like any other stray value.
_U64_MAX = 0xFFFFFFFFFFFFFFFF


class Encoding(Enum):
    """How tile data is represented in JSON."""
    CSV = "csv"
    BASE64 = "base64"

    @classmethod
    def from_json(cls, value: Any, path: str = "") -> Optional['Encoding']:
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError as err:
            raise ParsingError(f"unknown encoding {value!r}", path, err) from err


class Compression(Enum):
    """Compression applied to base64 tile data."""
    ZLIB = "zlib"
    GZIP = "gzip"
    ZSTD = "zstd"

    @classmethod
    def from_json(cls, value: Any, path: str = "") -> Optional['Compression']:
        # Some Tiled versions write "" for uncompressed base64 data.
        if value is None or value == "":
            return None
        try:
            return cls(value)
        except ValueError as err:
            raise ParsingError(f"unknown compression {value!r}", path, err) from err


# =============================================================================
# DECOMPRESSION
# =============================================================================

def decode_zlib(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error as err:
        raise DecompressionError(f"zlib: {err}", err) from err


def decode_gzip(data: bytes) -> bytes:
    # Truncated streams raise EOFError, bad headers BadGzipFile (an OSError)
    # and corrupt deflate blocks zlib.error.
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as err:
        raise DecompressionError(f"gzip: {err}", err) from err


def decode_zstd(data: bytes) -> bytes:
    # zstandard is not in the stdlib; only maps that use it need it.
    try:
        import zstandard
    except ImportError as err:
        raise DecompressionError(
            "zstandard library required for zstd compression. "
            "Install with: pip install tiled-json[zstd]",
            err,
        ) from err

    try:
        # Streaming reader: Tiled does not always store the content size
        # in the frame header, which the one-shot decompress() requires.
        with zstandard.ZstdDecompressor().stream_reader(data) as reader:
            return reader.readall()
    except zstandard.ZstdError as err:
        raise DecompressionError(f"zstd: {err}", err) from err


_DECOMPRESSORS = {
    Compression.ZLIB: decode_zlib,
    Compression.GZIP: decode_gzip,
    Compression.ZSTD: decode_zstd,
}


# =============================================================================
# DECODING
# =============================================================================

def decode_base64_tiledata(data: Any, compression: Optional[Compression],
                           tiles: List[int]) -> None:
    """
    Decode base64 (possibly compressed) tile data, appending to *tiles*.

    Raises:
    -------
    FormatError : data is not a string, or the byte count is not a
                  multiple of 4
    Base64DecodingError : data is not valid base64
    DecompressionError : the decompressor rejected the stream
    """
    if not isinstance(data, str):
        raise FormatError(
            f"Improperly formatted data: expected base64 string, "
            f"found {kind_name(data)}"
        )

    try:
        raw_data = base64.b64decode(data.strip(), validate=True)
    except ValueError as err:               # binascii.Error, or non-ASCII text
        raise Base64DecodingError(f"Invalid base64 tile data: {err}", err) from err

    if compression is not None:
        raw_data = _DECOMPRESSORS[compression](raw_data)

    # -----------------------------------------------------------------
    # CONVERT BYTES TO UINT32 VALUES
    # -----------------------------------------------------------------
    # Explicit '<' so the result does not depend on the host byte order.
    count, remainder = divmod(len(raw_data), TILE_ID_SIZE)
    if remainder:
        raise FormatError(
            f"Tile data length {len(raw_data)} is not a multiple of "
            f"{TILE_ID_SIZE} bytes"
        )
    tiles.extend(struct.unpack(f"<{count}I", raw_data))


def decode_csv_tiledata(data: Any, tiles: List[int]) -> None:
    """
    Decode an array of tile IDs, appending to *tiles*.

    Elements that are not non-negative integers are skipped. Integers wider
    than 32 bits keep their low 32 bits.
    """
    if not isinstance(data, list):
        raise FormatError(
            f"Improperly formatted data: expected array, found {kind_name(data)}"
        )

    for value in data:
        if is_unsigned(value) and value <= _U64_MAX:
            tiles.append(value & U32_MAX)


def decode_tiledata(data: Any, width: int, height: int,
                    encoding: Optional[Encoding] = None,
                    compression: Optional[Compression] = None) -> Tuple[int, ...]:
    """
    Decode the "data" field of a tile layer.

    Parameters:
    -----------
    data : Any
        The raw JSON value: an array for CSV, a string for base64
    width, height : int
        Layer dimensions. Only used for the size check warning; the result
        is not padded or truncated.
    encoding : Encoding, optional
        None means CSV
    compression : Compression, optional
        Only used by the base64 path

    Returns:
    --------
    tuple of int : tile IDs in row-major order
    """
    tiles: List[int] = []

    if encoding is Encoding.BASE64:
        decode_base64_tiledata(data, compression, tiles)
    else:
        decode_csv_tiledata(data, tiles)

    expected = width * height
    if len(tiles) != expected:
        logger.warning("Tile data has %d tiles, expected %d (%dx%d)",
                       len(tiles), expected, width, height)

    return tuple(tiles)
