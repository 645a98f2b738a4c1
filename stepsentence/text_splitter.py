"""Splits free text into practice sentences."""

import re
from typing import List

# A sentence runs up to a terminator plus any closing quotes. ASCII
# terminators only count before whitespace, a quote or the end, so "3.5"
# stays whole.
_CLOSERS = "\"'”’」』"
_SENTENCE_RE = re.compile(
    rf"\S.*?(?:[。！？]+|…+|[.!?]+(?=[\s{_CLOSERS}]|$))[{_CLOSERS}]*"
    r"|\S.*$"
)

def split_sentences(text: str) -> List[str]:
    """
    Splits text into trimmed, non-empty sentences.

    Uses the same terminators as subtitle merging (。 . ! ? ！ ？ …).
    Line breaks always end a sentence.

    Args:
        text: Body text of a project.

    Returns:
        The sentences in reading order.
    """
    sentences: List[str] = []
    for line in text.strip().splitlines():
        for match in _SENTENCE_RE.finditer(line.strip()):
            sentence = match.group(0).strip()
            if sentence:
                sentences.append(sentence)
    return sentences
