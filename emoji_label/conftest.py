"""Shared fixtures: a fixed-width measurer and an in-memory asset store."""

import grapheme
import pytest

from emoji_label.emoji_handler import AssetBackend, PictogramAssetStore
from emoji_label.label import LabelContext

GLYPH_WIDTH = 10.0
LINE_HEIGHT = 12.0

# Minimal PNG signature; the layout never decodes asset bytes
FAKE_PNG = b"\x89PNG\r\n\x1a\n"


class FixedWidthMeasurer:
    """Every grapheme is GLYPH_WIDTH wide, every line LINE_HEIGHT tall."""

    def text_width(self, run, text):
        return GLYPH_WIDTH * grapheme.length(text)

    def line_height(self, run):
        return run.line_height if run.line_height is not None else LINE_HEIGHT


@pytest.fixture
def measurer():
    return FixedWidthMeasurer()


@pytest.fixture
def assets():
    store = PictogramAssetStore(AssetBackend.PNG)
    for sequence in ("😤", "😅", "🤬", "🥰", "🐦", "⭐", "✨", "👍"):
        store.register(sequence, FAKE_PNG)
    return store


@pytest.fixture
def ctx(measurer, assets):
    return LabelContext(measurer=measurer, assets=assets)
