"""
Errors raised while decoding Tiled JSON maps.

Every failure is fatal to the decode call that raised it: callers receive
either a fully populated TiledMap or exactly one of the exceptions below.

    TiledError
    ├── DecompressionError   zlib / gzip / zstd stream malformed or truncated
    ├── Base64DecodingError  tile data is not valid base64
    ├── FormatError          structural expectation violated
    └── ParsingError         malformed JSON or a field of the wrong type
"""

from typing import Optional


class TiledError(Exception):
    """Base class for all decoding failures."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause          # Underlying library exception, if any

    def __str__(self) -> str:
        return self.message


class DecompressionError(TiledError):
    """Tile data could not be inflated."""


class Base64DecodingError(TiledError):
    """Tile data is not valid base64 text."""


class FormatError(TiledError):
    """
    Catch-all for structural problems that are not JSON type errors:
    tile data of the wrong JSON kind for its encoding, a trailing partial
    tile ID, a bad color string, an unrecognized layer type.
    """


class ParsingError(TiledError):
    """
    The JSON itself is malformed, or a field is missing or has the wrong
    type.

    ``path`` is the dotted location of the offending field inside the
    document (``layers[2].width``), or an empty string for document-level
    failures.
    """

    def __init__(self, message: str, path: str = "",
                 cause: Optional[BaseException] = None):
        if path:
            message = f"{path}: {message}"
        super().__init__(message, cause)
        self.path = path
