"""
Styled text runs for emoji labels.
Handles color conversion and the run value type shared by segmentation and layout.
"""

import re
import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

_LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_NAME = "Helvetica"
DEFAULT_FONT_SIZE = 12

# Placeholder color for glyphs that must be selectable but never visible
TRANSPARENT = "transparent"

# Color mapping from color names to RGB tuples
COLOR_MAP = {
    "black": (0, 0, 0),
    "white": (1, 1, 1),
    "gray": (0.5, 0.5, 0.5),
    "red": (1, 0, 0),
    "blue": (0, 0, 1),
    "green": (0, 0.5, 0),
    "navy": (0, 0, 0.5),
    "darkred": (0.5, 0, 0),
    "purple": (0.5, 0, 0.5),
    "brown": (0.6, 0.4, 0.2),
    "orange": (1, 0.65, 0),
}

# Standard PDF font variants keyed by (family, bold, italic)
_FONT_VARIANTS = {
    ("Helvetica", False, False): "Helvetica",
    ("Helvetica", True, False): "Helvetica-Bold",
    ("Helvetica", False, True): "Helvetica-Oblique",
    ("Helvetica", True, True): "Helvetica-BoldOblique",
    ("Courier", False, False): "Courier",
    ("Courier", True, False): "Courier-Bold",
    ("Courier", False, True): "Courier-Oblique",
    ("Courier", True, True): "Courier-BoldOblique",
    ("Times-Roman", False, False): "Times-Roman",
    ("Times-Roman", True, False): "Times-Bold",
    ("Times-Roman", False, True): "Times-Italic",
    ("Times-Roman", True, True): "Times-BoldItalic",
}


def get_color_rgb(color_input):
    """
    Convert color input to RGB tuple.
    Supports:
    - Color names: 'black', 'red', 'blue', etc.
    - Hex codes: '#FF0000', 'FF0000'
    - RGB values: '255,0,0', 'rgb(255,0,0)'

    :param color_input: Color string in various formats
    :return: RGB tuple (r, g, b) where each value is between 0 and 1
    """
    if not color_input or not isinstance(color_input, str):
        return (0, 0, 0)  # Default to black

    color_input = color_input.strip().lower()

    if color_input in COLOR_MAP:
        return COLOR_MAP[color_input]

    if color_input.startswith("#"):
        hex_color = color_input.lstrip("#")
    elif len(color_input) == 6 and all(c in "0123456789abcdef" for c in color_input):
        hex_color = color_input
    else:
        hex_color = None

    if hex_color and len(hex_color) == 6:
        try:
            r = int(hex_color[0:2], 16) / 255.0
            g = int(hex_color[2:4], 16) / 255.0
            b = int(hex_color[4:6], 16) / 255.0
            return (r, g, b)
        except ValueError:
            pass

    rgb_match = re.match(r"(?:rgb\s*\()?\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)?$", color_input)
    if rgb_match:
        r, g, b = (int(rgb_match.group(i)) / 255.0 for i in (1, 2, 3))
        return (max(0, min(1, r)), max(0, min(1, g)), max(0, min(1, b)))

    _LOGGER.debug("Unrecognized color %r, falling back to black", color_input)
    return (0, 0, 0)


@dataclass(frozen=True)
class StyledRun:
    """
    Text content bundled with its presentation attributes.

    Runs are immutable; the builder helpers return modified copies.
    """

    text: str = ""
    font_name: str = DEFAULT_FONT_NAME
    font_size: float = DEFAULT_FONT_SIZE
    color: Optional[str] = None
    background: Optional[str] = None
    letter_spacing: float = 0.0
    line_height: Optional[float] = None
    strong: bool = False
    weak: bool = False
    italics: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    raised: bool = False

    def with_text(self, text):
        """Copy every attribute of this run but replace its text."""
        return replace(self, text=text)

    def bold(self):
        return replace(self, strong=True)

    def italic(self):
        return replace(self, italics=True)

    def colored(self, color):
        return replace(self, color=color)

    def size(self, font_size):
        return replace(self, font_size=font_size)

    @property
    def is_transparent(self):
        return self.color == TRANSPARENT

    def rgb(self) -> Tuple[float, float, float]:
        if self.weak and self.color is None:
            return COLOR_MAP["gray"]
        return get_color_rgb(self.color)

    def effective_font_name(self):
        """
        Name of the concrete font face for this run's flags.

        Unknown families are returned unchanged (e.g. registered TTF fonts).
        """
        family = "Courier" if self.code else self.font_name
        bold, italic = self.strong, self.italics
        for (base, base_bold, base_italic), name in _FONT_VARIANTS.items():
            if name == family:
                family, bold, italic = base, bold or base_bold, italic or base_italic
                break
        return _FONT_VARIANTS.get((family, bold, italic), family)


def as_styled_run(text_or_run, base=None):
    """
    Coerce plain strings into runs that inherit ``base`` styling.

    :param text_or_run: str or StyledRun
    :param base: Optional StyledRun supplying default attributes
    :return: StyledRun
    """
    if isinstance(text_or_run, StyledRun):
        return text_or_run
    if base is None:
        return StyledRun(text=str(text_or_run))
    return base.with_text(str(text_or_run))
