"""
Sentence segmentation for caption text.

Splits normalized text after each run of terminal punctuation (`.`, `!`, `?`).
The punctuation stays attached to its sentence so cue text reads as written.
Fragments with no words (e.g. a stray "...") are discarded.
"""

from __future__ import annotations

import re
from typing import Iterator

# Closing quotes right after terminal punctuation belong to that sentence.
_SENTENCE_RE = re.compile(r"""[^.!?]+(?:[.!?]+["']*)?|[.!?]+["']*""")
_TERMINALS = ".!?"
_CLOSERS = "\"'"


class SentenceSegments:
    """
    Lazy view over the sentences of a text.

    Each iteration re-scans the source, so the sequence can be consumed
    any number of times.
    """

    def __init__(self, text: str) -> None:
        self._text = text

    def __iter__(self) -> Iterator[str]:
        for match in _SENTENCE_RE.finditer(self._text):
            sentence = match.group(0).strip()
            if sentence.strip(_TERMINALS + _CLOSERS).strip():
                yield sentence

    def __repr__(self) -> str:
        return f"SentenceSegments({self._text[:40]!r})"


def segment_sentences(text: str) -> SentenceSegments:
    return SentenceSegments(text)


def ends_sentence(text: str) -> bool:
    return text.rstrip().rstrip(_CLOSERS).endswith(tuple(_TERMINALS))
