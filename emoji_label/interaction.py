"""
Pointer interaction and text selection for laid-out emoji labels.

Each interactive rectangle of a layout produces its own response; the label's
response is the merge of all of them, so callers see one widget.
"""

import enum
import logging
from dataclasses import dataclass, replace
from functools import reduce
from typing import Optional, Tuple

from .geometry import EMPTY_RECT, Rect

_LOGGER = logging.getLogger(__name__)

# Pointer travel (points) after which a press becomes a drag
DRAG_THRESHOLD = 6.0


class Sense(enum.Flag):
    NONE = 0
    HOVER = enum.auto()
    CLICK = enum.auto()
    DRAG = enum.auto()
    FOCUS = enum.auto()


@dataclass(frozen=True)
class Selection:
    """Selected range as caret offsets into the label's full text."""

    anchor: int
    cursor: int

    @property
    def start(self):
        return min(self.anchor, self.cursor)

    @property
    def end(self):
        return max(self.anchor, self.cursor)

    @property
    def is_empty(self):
        return self.anchor == self.cursor


@dataclass(frozen=True)
class Response:
    """Outcome of one interactive area for the current event."""

    rect: Rect = EMPTY_RECT
    sense: Sense = Sense.NONE
    hovered: bool = False
    clicked: bool = False
    drag_started: bool = False
    dragged: bool = False
    drag_stopped: bool = False
    has_focus: bool = False
    interact_pointer_pos: Optional[Tuple[float, float]] = None
    selection: Optional[Selection] = None

    @classmethod
    def empty(cls):
        return cls()


def merge_responses(a, b):
    """
    Combine two responses into one.

    Rectangles are unioned and flags OR-ed; for the pointer position and the
    selection the later non-empty value wins.
    """
    return Response(
        rect=a.rect.union(b.rect),
        sense=a.sense | b.sense,
        hovered=a.hovered or b.hovered,
        clicked=a.clicked or b.clicked,
        drag_started=a.drag_started or b.drag_started,
        dragged=a.dragged or b.dragged,
        drag_stopped=a.drag_stopped or b.drag_stopped,
        has_focus=a.has_focus or b.has_focus,
        interact_pointer_pos=(
            b.interact_pointer_pos if b.interact_pointer_pos is not None else a.interact_pointer_pos
        ),
        selection=b.selection if b.selection is not None else a.selection,
    )


@dataclass(frozen=True)
class PointerEvent:
    """Host input event: 'move', 'press', 'release', 'leave', 'focus' or 'blur'."""

    kind: str
    pos: Optional[Tuple[float, float]] = None


def _nearest(candidates, distance):
    best = None
    best_distance = None
    for candidate in candidates:
        d = distance(candidate)
        if best is None or d < best_distance:
            best, best_distance = candidate, d
    return best


def offset_at(result, pos):
    """
    Map a point to the nearest caret offset in ``result.full_text``.

    A pictogram counts as one selectable character: the caret lands either
    before or after it, never inside its codepoint sequence.
    """
    if not result.rows:
        return 0
    px, py = pos
    row = _nearest(result.rows, lambda r: max(r.rect.y - py, 0.0, py - r.rect.bottom))
    if not row.items:
        return row.text_start
    item = _nearest(row.items, lambda i: max(i.rect.x - px, 0.0, px - i.rect.right))

    if item.kind == "text":
        _, offset = _nearest(item.carets, lambda caret: abs(caret[0] - px))
        return offset
    if item.kind == "pictogram":
        middle = item.rect.x + item.rect.width / 2
        return item.text_start if px < middle else item.text_start + len(item.text)
    return item.text_start


class LabelInteraction:
    """
    Press, drag, focus and selection state of one label across events.
    """

    def __init__(self):
        self.pressed_index = None
        self.press_pos = None
        self.dragging = False
        self.focused = False
        self.selection = None

    def handle(self, result, event, sense=Sense.HOVER, selectable=True):
        """
        Apply a pointer or focus event to a layout and return the merged response.

        :param result: LayoutResult the event is tested against
        :param event: PointerEvent from the host
        :param sense: Interactions the label responds to
        :param selectable: Whether pointer drags select text
        :return: Aggregate Response, also stored on ``result.response``
        """
        rects = result.interact_rects
        pos = event.pos
        hit = None
        if pos is not None:
            hit = next((i for i, rect in enumerate(rects) if rect.contains(pos)), None)

        started = stopped = clicked = False
        if event.kind == "press":
            if hit is not None:
                self.pressed_index, self.press_pos, self.dragging = hit, pos, False
                self.focused = bool(sense & Sense.FOCUS) or selectable
                if selectable:
                    offset = offset_at(result, pos)
                    self.selection = Selection(offset, offset)
            else:
                self.focused = False
                self.selection = None
        elif event.kind == "move" and self.pressed_index is not None and pos is not None:
            if not self.dragging and (sense & Sense.DRAG or selectable):
                dx = pos[0] - self.press_pos[0]
                dy = pos[1] - self.press_pos[1]
                if (dx * dx + dy * dy) ** 0.5 > DRAG_THRESHOLD:
                    self.dragging = started = True
            if self.dragging and selectable and self.selection is not None:
                self.selection = replace(self.selection, cursor=offset_at(result, pos))
        elif event.kind == "release" and self.pressed_index is not None:
            if self.dragging:
                stopped = True
            elif hit == self.pressed_index and sense & Sense.CLICK:
                clicked = True
            if self.dragging and selectable and pos is not None and self.selection is not None:
                self.selection = replace(self.selection, cursor=offset_at(result, pos))
        elif event.kind == "focus":
            self.focused = True
        elif event.kind == "blur":
            self.focused = False

        responses = []
        for index, rect in enumerate(rects):
            is_pressed = index == self.pressed_index
            responses.append(
                Response(
                    rect=rect,
                    sense=sense,
                    hovered=(
                        index == hit
                        and event.kind != "leave"
                        and bool(sense & Sense.HOVER or selectable)
                    ),
                    clicked=is_pressed and clicked,
                    drag_started=is_pressed and started,
                    dragged=is_pressed and (self.dragging or stopped),
                    drag_stopped=is_pressed and stopped,
                    interact_pointer_pos=pos if is_pressed else None,
                )
            )

        if event.kind == "release":
            self.pressed_index, self.press_pos, self.dragging = None, None, False

        response = reduce(merge_responses, responses, Response(rect=result.rect, sense=sense))
        selection = self.selection if self.selection is not None and not self.selection.is_empty else None
        response = replace(response, has_focus=self.focused, selection=selection)
        if response.clicked or response.drag_stopped:
            _LOGGER.debug("Label %r: clicked=%s drag_stopped=%s", result.full_text, clicked, stopped)
        result.response = response
        return response

    def selected_text(self, result):
        """Text covered by the current selection, pictograms included."""
        if self.selection is None:
            return ""
        return result.full_text[self.selection.start:self.selection.end]
