"""
Splitting styled text runs into plain-text and pictogram segments.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple, Union

import grapheme

from .emoji_handler import is_pictogram
from .text_processing import StyledRun

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextSegment:
    """A maximal run of plain text sharing the source run's styling."""

    run: StyledRun
    # Grapheme clusters of run.text, filled by the segmenter so layout can skip re-segmenting
    graphemes: Tuple[str, ...] = field(default=(), compare=False, repr=False)

    @property
    def text(self):
        return self.run.text

    def clusters(self):
        if self.graphemes or not self.run.text:
            return self.graphemes
        return tuple(grapheme.graphemes(self.run.text))


@dataclass(frozen=True)
class PictogramSegment:
    """A single grapheme cluster rendered as an inline image."""

    sequence: str

    @property
    def text(self):
        return self.sequence


Segment = Union[TextSegment, PictogramSegment]


def segment_text(run, classifier=is_pictogram) -> List[Segment]:
    """
    Split a styled run into text segments interleaved with pictogram segments.

    "hello 😤 world" -> [Text("hello "), Pictogram("😤"), Text(" world")]

    :param run: StyledRun to segment
    :param classifier: Predicate deciding whether a grapheme is a pictogram
    :return: List of segments whose concatenated text equals run.text
    """
    result = []
    pending = []

    def flush():
        if pending:
            result.append(TextSegment(run.with_text("".join(pending)), tuple(pending)))
            pending.clear()

    for cluster in grapheme.graphemes(run.text):
        if classifier(cluster):
            flush()
            result.append(PictogramSegment(cluster))
        else:
            pending.append(cluster)
    flush()

    _LOGGER.debug("Segmented %d chars into %d segments", len(run.text), len(result))
    return result


def restyle(segments, run):
    """
    Re-skin cached text segments with ``run``'s attributes.

    Cached segments are keyed by text alone, so a label showing the same text
    in a different style reuses the grapheme split and takes the new styling.
    """
    restyled = []
    for segment in segments:
        if isinstance(segment, TextSegment) and segment.run != run.with_text(segment.text):
            segment = TextSegment(run.with_text(segment.text), segment.graphemes)
        restyled.append(segment)
    return restyled


def reconstruct(segments):
    """Concatenate the underlying text of every segment, in order."""
    return "".join(segment.text for segment in segments)
