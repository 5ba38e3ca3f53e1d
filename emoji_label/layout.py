"""
Line layout of text and pictogram segments.
Handles wrapping, truncation and row-height reconciliation for emoji labels.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .geometry import Rect, union_all
from .interaction import Response, Sense
from .segmentation import PictogramSegment, reconstruct
from .text_fitting import ELLIPSIS
from .text_processing import TRANSPARENT, StyledRun

_LOGGER = logging.getLogger(__name__)

_NEWLINES = ("\n", "\r\n", "\r")


class WrapPolicy(enum.Enum):
    NO_WRAP = "no_wrap"
    WRAP = "wrap"
    TRUNCATE = "truncate"


class LayoutMode(enum.Enum):
    # Items emitted in order into a horizontal wrapping container
    FLOW = "flow"
    # The whole label shaped as one block with one interactive rect per row
    BLOCK = "block"


@dataclass
class LayoutParams:
    """
    Per-call layout configuration.

    ``None`` for wrap_policy, selectable and sense means "inherit from the context".
    """

    available_width: Optional[float] = None
    wrap_policy: Optional[WrapPolicy] = None
    selectable: Optional[bool] = None
    sense: Optional[Sense] = None
    treat_as_inline_flow: bool = False
    pictogram_size: Optional[float] = None
    origin: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        if self.available_width is not None and self.available_width < 0:
            raise ValueError(f"available_width must be >= 0, got {self.available_width}")
        if self.pictogram_size is not None and self.pictogram_size < 0:
            raise ValueError(f"pictogram_size must be >= 0, got {self.pictogram_size}")


@dataclass(frozen=True)
class PlacedItem:
    """A laid-out piece of a label: text fragment, pictogram box or ellipsis."""

    kind: str
    rect: Rect
    text: str
    text_start: int
    segment_index: Optional[int] = None
    run: Optional[StyledRun] = None
    # (x, offset) pairs at every grapheme boundary of a text item
    carets: Tuple[Tuple[float, int], ...] = ()
    asset: object = None
    # Invisible copy of the pictogram's text sharing its box, for selection and copy
    placeholder: Optional[StyledRun] = None

    @property
    def text_end(self):
        return self.text_start + len(self.text)


@dataclass(frozen=True)
class Row:
    items: Tuple[PlacedItem, ...]
    rect: Rect
    text_start: int
    text_end: int


@dataclass
class LayoutResult:
    rows: List[Row]
    rect: Rect
    response: Response
    full_text: str
    truncated: bool
    mode: LayoutMode
    interact_rects: List[Rect] = field(default_factory=list)

    @property
    def disclosure_text(self):
        """Untruncated text to show on hover, or None when nothing was cut."""
        return self.full_text if self.truncated else None

    def items(self):
        for row in self.rows:
            yield from row.items


@dataclass
class _Glyph:
    kind: str  # "text", "pictogram", "skipped" or "newline"
    text: str
    offset: int
    width: float
    segment_index: int
    is_space: bool = False
    segment_end: bool = False
    asset: object = None


def _build_glyphs(segments, measurer, assets, edge):
    glyphs = []
    offset = 0
    for index, segment in enumerate(segments):
        if isinstance(segment, PictogramSegment):
            asset = assets.lookup(segment.sequence) if assets is not None else None
            if asset is None:
                _LOGGER.debug("No image for pictogram %r, skipping its box", segment.sequence)
                glyphs.append(_Glyph("skipped", segment.sequence, offset, 0.0, index))
            else:
                glyphs.append(_Glyph("pictogram", segment.sequence, offset, edge, index, asset=asset))
            offset += len(segment.sequence)
        else:
            for cluster in segment.clusters():
                if cluster in _NEWLINES:
                    glyphs.append(_Glyph("newline", cluster, offset, 0.0, index))
                else:
                    glyphs.append(
                        _Glyph(
                            "text",
                            cluster,
                            offset,
                            measurer.text_width(segment.run, cluster),
                            index,
                            is_space=cluster.isspace(),
                        )
                    )
                offset += len(cluster)
        if glyphs:
            glyphs[-1].segment_end = True
    return glyphs


def _break_rows(glyphs, max_width, policy, flow):
    """
    Greedily distribute glyphs over rows.

    Breaks happen after whitespace (and, in flow mode, between segments); a
    run without a break opportunity is split at the overflowing grapheme.
    Returns (rows, truncated).
    """
    constrained = max_width is not None and policy is not WrapPolicy.NO_WRAP
    rows = [[]]
    x = 0.0
    last_break = None
    for position, glyph in enumerate(glyphs):
        row = rows[-1]
        if glyph.kind == "newline":
            if policy is WrapPolicy.TRUNCATE:
                return rows, position + 1 < len(glyphs)
            row.append(glyph)
            rows.append([])
            x, last_break = 0.0, None
            continue

        if constrained and not glyph.is_space and x > 0 and x + glyph.width > max_width:
            if policy is WrapPolicy.TRUNCATE:
                return rows, True
            if last_break is not None:
                carry = row[last_break:]
                del row[last_break:]
            else:
                carry = []
            rows.append(carry)
            row = carry
            x = sum(g.width for g in carry)
            last_break = None

        row.append(glyph)
        x += glyph.width
        if glyph.is_space or (flow and glyph.segment_end):
            last_break = len(row)
    return rows, False


def _fit_ellipsis(row, max_width, ellipsis_width):
    """Drop trailing glyphs until the truncation marker fits."""
    x = sum(g.width for g in row)
    if max_width is None:
        return row
    while row and x + ellipsis_width > max_width:
        x -= row.pop().width
    return row


def _group(row):
    """Split a glyph row into runs that become individual placed items."""
    groups = []
    for glyph in row:
        if glyph.kind in ("newline", "skipped"):
            continue
        if (
            glyph.kind == "text"
            and groups
            and groups[-1][0].kind == "text"
            and groups[-1][0].segment_index == glyph.segment_index
        ):
            groups[-1].append(glyph)
        else:
            groups.append([glyph])
    return groups


def layout(segments, params, measurer, assets=None, base_run=None):
    """
    Lay out label segments into rows of placed items.

    :param segments: Segments from the segmenter (or the segment cache)
    :param params: LayoutParams for this pass
    :param measurer: Text measurement service (text_width / line_height)
    :param assets: Pictogram asset store; pictograms without an asset get no box
    :param base_run: Run supplying the label's default style and line height
    :return: LayoutResult
    """
    base_run = base_run or StyledRun()
    policy = params.wrap_policy or WrapPolicy.WRAP
    sense = params.sense if params.sense is not None else Sense.HOVER
    flow = params.treat_as_inline_flow
    mode = LayoutMode.FLOW if flow else LayoutMode.BLOCK
    base_height = measurer.line_height(base_run)
    edge = params.pictogram_size if params.pictogram_size is not None else base_height
    max_width = params.available_width

    glyphs = _build_glyphs(segments, measurer, assets, edge)
    if glyphs:
        glyph_rows, truncated = _break_rows(glyphs, max_width, policy, flow)
    else:
        glyph_rows, truncated = [], False

    ellipsis_width = 0.0
    if truncated:
        ellipsis_width = measurer.text_width(base_run, ELLIPSIS)
        glyph_rows[-1] = _fit_ellipsis(glyph_rows[-1], max_width, ellipsis_width)

    origin_x, y = params.origin
    rows = []
    end_offset = 0
    for row_index, glyph_row in enumerate(glyph_rows):
        groups = _group(glyph_row)
        row_start = glyph_row[0].offset if glyph_row else end_offset
        if glyph_row:
            end_offset = glyph_row[-1].offset + len(glyph_row[-1].text)

        heights = []
        for group in groups:
            if group[0].kind == "pictogram":
                heights.append(edge)
            else:
                heights.append(measurer.line_height(segments[group[0].segment_index].run))
        is_cut_row = truncated and row_index == len(glyph_rows) - 1
        if is_cut_row:
            heights.append(base_height)
        row_height = max(heights) if heights else base_height

        items = []
        x = origin_x
        for group, height in zip(groups, heights):
            width = sum(g.width for g in group)
            rect = Rect(x, y + (row_height - height) / 2, width, height)
            first = group[0]
            if first.kind == "pictogram":
                items.append(
                    PlacedItem(
                        kind="pictogram",
                        rect=rect,
                        text=first.text,
                        text_start=first.offset,
                        segment_index=first.segment_index,
                        asset=first.asset,
                        placeholder=base_run.with_text(first.text).colored(TRANSPARENT) if flow else None,
                    )
                )
            else:
                carets = [(x, first.offset)]
                caret_x = x
                for g in group:
                    caret_x += g.width
                    carets.append((caret_x, g.offset + len(g.text)))
                items.append(
                    PlacedItem(
                        kind="text",
                        rect=rect,
                        text="".join(g.text for g in group),
                        text_start=first.offset,
                        segment_index=first.segment_index,
                        run=segments[first.segment_index].run,
                        carets=tuple(carets),
                    )
                )
            x += width

        if is_cut_row:
            items.append(
                PlacedItem(
                    kind="ellipsis",
                    rect=Rect(x, y + (row_height - base_height) / 2, ellipsis_width, base_height),
                    text="",
                    text_start=end_offset,
                    run=base_run,
                )
            )
            x += ellipsis_width

        rows.append(Row(tuple(items), Rect(origin_x, y, x - origin_x, row_height), row_start, end_offset))
        y += row_height

    placed = [item for row in rows for item in row.items]
    rect = union_all(item.rect for item in placed)
    if flow:
        interact_rects = [item.rect for item in placed]
    else:
        interact_rects = [row.rect for row in rows if row.items]

    _LOGGER.debug(
        "Laid out %d segments into %d rows (%s, %s, truncated=%s)",
        len(segments),
        len(rows),
        mode.value,
        policy.value,
        truncated,
    )
    return LayoutResult(
        rows=rows,
        rect=rect,
        response=Response(rect=rect, sense=sense),
        full_text=reconstruct(segments),
        truncated=truncated,
        mode=mode,
        interact_rects=interact_rects,
    )
