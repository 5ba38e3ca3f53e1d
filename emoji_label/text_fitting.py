"""
Text measurement for emoji label layout.
Wraps reportlab's font metrics behind the small interface the layout engine needs.
"""

import logging

import grapheme
from reportlab.pdfbase import pdfmetrics

_LOGGER = logging.getLogger(__name__)

ELLIPSIS = "…"
LINE_HEIGHT_FACTOR = 1.2  # 120% of font size is a common line height
LINE_PADDING = 2  # points added on top of the font's ascent - descent


def get_font_line_height(font_name, font_size):
    """
    Calculate line height based on font-specific metrics.

    :param font_name: Name of the font
    :param font_size: Size of the font in points
    :return: Line height in points
    """
    try:
        font_info = pdfmetrics.getFont(font_name)
        font_ascent = font_info.face.ascent
        font_descent = font_info.face.descent
    except (KeyError, AttributeError):
        _LOGGER.debug("No metrics for font %s, using %.1fx font size", font_name, LINE_HEIGHT_FACTOR)
        return font_size * LINE_HEIGHT_FACTOR

    actual_font_height = font_ascent - font_descent  # descent is negative
    return actual_font_height * font_size / 1000 + LINE_PADDING


class ReportLabTextMeasurer:
    """
    Measures styled runs with reportlab's registered fonts.

    Any object offering ``text_width(run, text)`` and ``line_height(run)`` can
    stand in for this class.
    """

    def __init__(self):
        self._line_heights = {}

    def text_width(self, run, text):
        font_name = run.effective_font_name()
        try:
            width = pdfmetrics.stringWidth(text, font_name, run.font_size)
        except KeyError:
            _LOGGER.debug("Font %s is not registered, estimating text width", font_name)
            width = len(text) * run.font_size * 0.5
        if run.letter_spacing:
            width += run.letter_spacing * grapheme.length(text)
        return width

    def line_height(self, run):
        if run.line_height is not None:
            return run.line_height
        key = (run.effective_font_name(), run.font_size)
        if key not in self._line_heights:
            self._line_heights[key] = get_font_line_height(*key)
        return self._line_heights[key]
