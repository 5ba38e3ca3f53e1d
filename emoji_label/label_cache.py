"""
Frame-to-frame memoization of label segmentation.

Segmenting a label walks every grapheme and consults the pictogram table, so
the result is kept per distinct text and reused on every redraw.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List

from .segmentation import Segment, segment_text

_LOGGER = logging.getLogger(__name__)

_KEY_PREFIX = "emoji_label:"


@dataclass
class LabelState:
    """Memoized segments of one label text, plus whether they were stored yet."""

    segments: List[Segment] = field(default_factory=list)
    is_saved: bool = False

    @classmethod
    def from_run(cls, run):
        return cls(segments=segment_text(run), is_saved=False)


def label_key(run):
    """
    Cache key for a run.

    Only the text content decides segmentation, so two runs with identical
    text share one entry regardless of styling.
    """
    return _KEY_PREFIX + run.text


class FrameMemory:
    """
    Minimal frame-persistent key/value store.

    With ``gc_unused=True`` every key not read or written between
    ``begin_frame`` and ``end_frame`` is dropped at the end of the frame.
    """

    def __init__(self, gc_unused=False):
        self.gc_unused = gc_unused
        self._data = {}
        self._touched = set()

    def get(self, key):
        if key in self._data:
            self._touched.add(key)
        return self._data.get(key)

    def set(self, key, value):
        self._touched.add(key)
        self._data[key] = value

    def begin_frame(self):
        self._touched = set()

    def end_frame(self):
        if not self.gc_unused:
            return 0
        stale = [key for key in self._data if key not in self._touched]
        for key in stale:
            del self._data[key]
        if stale:
            _LOGGER.debug("Dropped %d unused label states", len(stale))
        return len(stale)

    def __contains__(self, key):
        return key in self._data

    def __len__(self):
        return len(self._data)


class SegmentCache:
    """Segment cache on top of one UI context's frame memory."""

    def __init__(self, memory=None):
        self.memory = memory if memory is not None else FrameMemory()

    def load(self, key, run):
        """
        Return the stored state for ``key``, or a freshly segmented, unsaved one.

        A fresh state is not persisted here; the caller stores it once it has
        been used successfully.
        """
        state = self.memory.get(key)
        if state is not None:
            _LOGGER.debug("Label cache hit for %r", key)
            return state
        _LOGGER.debug("Label cache miss for %r", key)
        return LabelState.from_run(run)

    def store(self, key, state):
        self.memory.set(key, state)

    def fetch(self, run):
        """
        Load the state for a run and persist it if it was newly created.

        :param run: StyledRun whose text identifies the label
        :return: LabelState with is_saved set
        """
        key = label_key(run)
        state = self.load(key, run)
        if not state.is_saved:
            state = replace(state, is_saved=True)
            self.store(key, state)
        return state
