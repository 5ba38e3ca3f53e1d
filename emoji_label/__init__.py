"""
Emoji label package.
Renders text mixed with inline Twemoji pictograms as one wrapping, selectable label.
"""

from .emoji_handler import (
    AssetBackend,
    PictogramAsset,
    PictogramAssetStore,
    TwemojiAssetStore,
    create_asset_store,
    is_pictogram,
    set_emoji_cache_dir,
)
from .text_processing import DEFAULT_FONT_NAME, DEFAULT_FONT_SIZE, StyledRun, get_color_rgb
from .segmentation import PictogramSegment, TextSegment, reconstruct, segment_text
from .label_cache import FrameMemory, LabelState, SegmentCache, label_key
from .text_fitting import ELLIPSIS, ReportLabTextMeasurer, get_font_line_height
from .geometry import Rect
from .interaction import (
    DRAG_THRESHOLD,
    LabelInteraction,
    PointerEvent,
    Response,
    Selection,
    Sense,
    merge_responses,
    offset_at,
)
from .layout import LayoutMode, LayoutParams, LayoutResult, PlacedItem, Row, WrapPolicy, layout
from .label import EmojiLabel, LabelContext

__all__ = [
    # Pictogram detection and assets
    'AssetBackend',
    'PictogramAsset',
    'PictogramAssetStore',
    'TwemojiAssetStore',
    'create_asset_store',
    'is_pictogram',
    'set_emoji_cache_dir',
    # Styled text
    'DEFAULT_FONT_NAME',
    'DEFAULT_FONT_SIZE',
    'StyledRun',
    'get_color_rgb',
    # Segmentation and caching
    'PictogramSegment',
    'TextSegment',
    'reconstruct',
    'segment_text',
    'FrameMemory',
    'LabelState',
    'SegmentCache',
    'label_key',
    # Measurement and layout
    'ELLIPSIS',
    'ReportLabTextMeasurer',
    'get_font_line_height',
    'Rect',
    'LayoutMode',
    'LayoutParams',
    'LayoutResult',
    'PlacedItem',
    'Row',
    'WrapPolicy',
    'layout',
    # Interaction
    'DRAG_THRESHOLD',
    'LabelInteraction',
    'PointerEvent',
    'Response',
    'Selection',
    'Sense',
    'merge_responses',
    'offset_at',
    # Widget
    'EmojiLabel',
    'LabelContext',
]
