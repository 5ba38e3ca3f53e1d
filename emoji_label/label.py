"""
The emoji label widget facade.

Usage::

    ctx = LabelContext()
    result = EmojiLabel("⭐ emoji-label 🐦✨").show(ctx, available_width=200)

``EmojiLabel`` supports the same options as a plain text label: wrap mode,
selectability and sense.
"""

import logging

from .emoji_handler import create_asset_store
from .interaction import LabelInteraction, Sense
from .label_cache import FrameMemory, SegmentCache, label_key
from .layout import LayoutParams, WrapPolicy, layout
from .segmentation import restyle
from .text_fitting import ReportLabTextMeasurer
from .text_processing import StyledRun, as_styled_run

_LOGGER = logging.getLogger(__name__)

_INTERACTION_KEY = "interaction"


class LabelContext:
    """
    Everything labels of one UI context share: segment cache, assets,
    measurement and style defaults.

    Contexts are independent; labels rendered in different contexts never
    share cached state.
    """

    def __init__(
        self,
        measurer=None,
        assets=None,
        memory=None,
        wrap_policy=WrapPolicy.WRAP,
        selectable_labels=True,
        body_style=None,
    ):
        self.measurer = measurer if measurer is not None else ReportLabTextMeasurer()
        self.assets = assets if assets is not None else create_asset_store()
        self.memory = memory if memory is not None else FrameMemory()
        self.cache = SegmentCache(self.memory)
        self.wrap_policy = wrap_policy
        self.selectable_labels = selectable_labels
        self.body_style = body_style if body_style is not None else StyledRun()

    def interaction(self, key):
        """
        Interaction state for a label, created on first use.

        The state lives in the frame memory next to the label's segments, so
        labels that stop being shown are collected with them.
        """
        memory_key = (_INTERACTION_KEY, key)
        interaction = self.memory.get(memory_key)
        if interaction is None:
            interaction = LabelInteraction()
            self.memory.set(memory_key, interaction)
        return interaction


class EmojiLabel:
    """
    A text label that renders emoji as inline Twemoji images.

    Call :meth:`show` to lay it out (and optionally feed it an input event).
    """

    def __init__(self, text):
        self._text = text
        self._wrap_mode = None
        self._sense = None
        self._selectable = None
        self._auto_inline = True

    @property
    def text(self):
        """The text to render as a str."""
        return self._text.text if isinstance(self._text, StyledRun) else str(self._text)

    @property
    def rich_text(self):
        """The text to render as a StyledRun (plain strings get default styling)."""
        return as_styled_run(self._text)

    def wrap_mode(self, wrap_mode):
        """
        Set the wrap mode for the text.

        By default the context's wrap policy is used. Any '\\n' in the text
        always starts a new row unless the label truncates.
        """
        self._wrap_mode = wrap_mode
        return self

    def wrap(self):
        return self.wrap_mode(WrapPolicy.WRAP)

    def truncate(self):
        return self.wrap_mode(WrapPolicy.TRUNCATE)

    def extend(self):
        """Disable wrapping and truncation; the label grows as wide as its text."""
        return self.wrap_mode(WrapPolicy.NO_WRAP)

    def selectable(self, selectable):
        """Can the user select the text with the pointer? Overrides the context default."""
        self._selectable = selectable
        return self

    def sense(self, sense):
        """
        Make the label respond to clicks and/or drags.

        By default a label only senses hover.
        """
        self._sense = sense
        return self

    def auto_inline(self, auto_inline):
        """
        Whether the label should reuse an enclosing horizontal layout.

        When it does, segments are emitted as inline items of that flow; when
        it doesn't (or the layout is vertical), the label is shaped as one block.
        """
        self._auto_inline = auto_inline
        return self

    def layout_params(self, ctx, available_width=None, horizontal=False, origin=(0.0, 0.0)):
        return LayoutParams(
            available_width=available_width,
            wrap_policy=self._wrap_mode if self._wrap_mode is not None else ctx.wrap_policy,
            selectable=self._selectable if self._selectable is not None else ctx.selectable_labels,
            sense=self._sense if self._sense is not None else Sense.HOVER,
            treat_as_inline_flow=horizontal and self._auto_inline,
            origin=origin,
        )

    def show(self, ctx, available_width=None, horizontal=False, origin=(0.0, 0.0), event=None):
        """
        Lay out the label in a context.

        :param ctx: LabelContext owning the cache and collaborators
        :param available_width: Width to wrap or truncate at (None: unbounded)
        :param horizontal: True if the caller's layout is already horizontal
        :param origin: Top-left corner of the label
        :param event: Optional PointerEvent to apply to the fresh layout
        :return: LayoutResult
        """
        run = as_styled_run(self._text, base=ctx.body_style)
        state = ctx.cache.fetch(run)
        segments = restyle(state.segments, run)

        params = self.layout_params(ctx, available_width, horizontal, origin)
        result = layout(segments, params, ctx.measurer, ctx.assets, base_run=run)
        # Fetched every frame so a live selection survives frame collection
        interaction = ctx.interaction(label_key(run))
        if event is not None:
            interaction.handle(
                result, event, sense=params.sense, selectable=params.selectable
            )
        return result

    def selected_text(self, ctx, result):
        """Text currently selected in this label within ``ctx``."""
        run = as_styled_run(self._text, base=ctx.body_style)
        return ctx.interaction(label_key(run)).selected_text(result)
