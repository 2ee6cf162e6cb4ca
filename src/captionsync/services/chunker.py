"""
Greedy packing of sentences into caption-sized chunks.

Short sentences are packed together until the next one would push the chunk
past `max_words_per_cue`. Sentences longer than the limit are cut into groups
of exactly `max_words_per_cue` words; the trailing partial group stays open and
keeps absorbing the sentences that follow.
"""

from __future__ import annotations

from typing import Iterable, List

from captionsync.services.segmenter import ends_sentence
from captionsync.utils.checks import require_positive_int
from captionsync.utils.logging import get_logger

log = get_logger(__name__)


def _join(chunk: str, sentence: str) -> str:
    if not chunk:
        return sentence
    # Sentences that kept their own terminal punctuation only need a space.
    separator = " " if ends_sentence(chunk) else ". "
    return f"{chunk}{separator}{sentence}"


def chunk_sentences(sentences: Iterable[str], max_words_per_cue: int) -> List[str]:
    max_words = require_positive_int("max_words_per_cue", max_words_per_cue)

    chunks: List[str] = []
    current = ""
    current_words = 0

    for sentence in sentences:
        words = sentence.split()
        if not words:
            continue

        if len(words) <= max_words:
            if current and current_words + len(words) > max_words:
                chunks.append(current)
                current = " ".join(words)
                current_words = len(words)
            else:
                current = _join(current, " ".join(words))
                current_words += len(words)
            continue

        # Oversized sentence: close the open chunk, then cut fixed-size groups.
        if current:
            chunks.append(current)
        start = 0
        while len(words) - start > max_words:
            chunks.append(" ".join(words[start : start + max_words]))
            start += max_words
        current = " ".join(words[start:])
        current_words = len(words) - start

    if current:
        chunks.append(current)

    log.debug("Packed sentences into %d chunks (max_words=%d)", len(chunks), max_words)
    return chunks
