"""
Hex color strings used by Tiled.

Tiled writes colors as ``#RRGGBB`` or, when alpha is not fully opaque,
``#AARRGGBB``. Note the alpha channel comes FIRST in the 8 digit form.
Everything in this package stores colors as RGBA, so the 8 digit form is
reordered on the way in:

    "#336699"   -> Color(r=0x33, g=0x66, b=0x99, a=0xff)
    "#80336699" -> Color(r=0x33, g=0x66, b=0x99, a=0x80)

The leading '#' is optional.
"""

import string
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .errors import FormatError
from .fields import REQUIRED, get_str

_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Color:
    """RGBA color, one byte per channel."""
    r: int
    g: int
    b: int
    a: int = 255

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)

    def hex(self) -> str:
        """Format back to Tiled's notation (``#RRGGBB`` or ``#AARRGGBB``)."""
        if self.a == 255:
            return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
        return f"#{self.a:02x}{self.r:02x}{self.g:02x}{self.b:02x}"


def match_color(text: str) -> Optional[Color]:
    """Like parse_color, but returns None for a malformed string."""
    digits = text[1:] if text.startswith('#') else text

    if len(digits) not in (6, 8):
        return None

    # int(..., 16) tolerates signs, whitespace and underscores, so check
    # the characters ourselves before converting each pair.
    if not all(c in _HEX_DIGITS for c in digits):
        return None

    channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]

    if len(channels) == 4:
        # ARGB -> RGBA
        alpha, red, green, blue = channels
        return Color(red, green, blue, alpha)

    red, green, blue = channels
    return Color(red, green, blue)


def parse_color(text: str) -> Color:
    """
    Parse a Tiled hex color string.

    Parameters:
    -----------
    text : str
        ``#RRGGBB``, ``#AARRGGBB``, or either without the '#'

    Returns:
    --------
    Color : channels normalized to RGBA (alpha 255 for the 6 digit form)

    Raises:
    -------
    FormatError : wrong number of digits, or a non-hex character
    """
    color = match_color(text)
    if color is None:
        raise FormatError(f"Invalid color value {text!r}")
    return color


def get_color(record: Dict[str, Any], key: str, path: str = "",
              default: Any = REQUIRED) -> Optional[Color]:
    """Read an optional or required color field from a JSON record."""
    value = get_str(record, key, path, default)
    if value is None:
        return None
    return parse_color(value)
