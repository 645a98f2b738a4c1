"""Merges subtitle cues into sentence-level segments."""

import logging
from typing import Iterable, List, Optional

from .models import Cue, Segment
from .subtitle_parser import parse_srt_bytes

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = frozenset("。.!?！？…")
CLOSING_QUOTES = "\"'”’"

def ends_with_sentence_terminator(text: str) -> bool:
    """
    Checks whether text ends a sentence, ignoring trailing closing quotes.

    Args:
        text: Cue text.

    Returns:
        True if the last character (after trimming whitespace and closing
        quotes) is one of 。 . ! ? ！ ？ …
    """
    stripped = text.strip().rstrip(CLOSING_QUOTES)
    if not stripped:
        return False
    return stripped[-1] in SENTENCE_TERMINATORS


class _SegmentAccumulator:
    """The currently open run of cues."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.start: Optional[float] = None
        self.end: float = 0.0
        self.texts: List[str] = []
        self.indices: List[int] = []

    def add(self, cue: Cue) -> None:
        if self.start is None:
            self.start = cue.start_sec
        self.end = cue.end_sec
        self.texts.append(cue.text)
        self.indices.append(cue.index)

    def flush(self) -> Optional[Segment]:
        if self.start is None or not self.texts:
            return None
        segment = Segment(
            start=self.start,
            end=self.end,
            text=" ".join(self.texts),
            covered_indices=list(self.indices),
        )
        self.reset()
        return segment


def merge_cues_to_segments(cues: Iterable[Cue]) -> List[Segment]:
    """
    Groups consecutive cues into sentence segments.

    A cue is never split, even when it holds several sentences. Cues are
    appended to the open segment until a cue whose own text ends with a
    sentence terminator closes it. Cues left open at the end are flushed as
    a final segment. The input order is kept as given.

    Args:
        cues: Cues in time order.

    Returns:
        The segments, in input order.
    """
    segments: List[Segment] = []
    accumulator = _SegmentAccumulator()

    for cue in cues:
        accumulator.add(cue)
        if ends_with_sentence_terminator(cue.text):
            segments.append(accumulator.flush())

    trailing = accumulator.flush()
    if trailing is not None:
        logger.debug(f"Flushing unterminated trailing segment covering cues {trailing.covered_indices}")
        segments.append(trailing)

    logger.debug(f"Merged cues into {len(segments)} segments.")
    return segments

def segment_subtitles(data: bytes) -> List[Segment]:
    """Decodes, parses and merges raw SRT bytes into segments."""
    return merge_cues_to_segments(parse_srt_bytes(data))
