"""
Reading-speed timing model.

Each chunk stays on screen for its spoken duration at `words_per_minute`,
stretched by DISPLAY_MULTIPLIER and never shorter than MIN_DISPLAY_SECONDS.
Cues are laid out back to back from t=0.
"""

from __future__ import annotations

from typing import Iterable, List

from captionsync.domain.cue import Cue
from captionsync.utils.checks import require_positive_number
from captionsync.utils.text import word_count

DISPLAY_MULTIPLIER = 1.2
MIN_DISPLAY_SECONDS = 2.0


def display_duration(words: int, words_per_minute: float) -> float:
    spoken = (words / words_per_minute) * 60
    return max(spoken * DISPLAY_MULTIPLIER, MIN_DISPLAY_SECONDS)


def assign_timing(chunks: Iterable[str], words_per_minute: float) -> List[Cue]:
    wpm = require_positive_number("words_per_minute", words_per_minute)

    cues: List[Cue] = []
    current_time = 0.0
    for index, chunk in enumerate(chunks, start=1):
        end_time = current_time + display_duration(word_count(chunk), wpm)
        cues.append(
            Cue(
                index=index,
                text=chunk,
                start_time=current_time,
                end_time=end_time,
            )
        )
        current_time = end_time
    return cues


def words_per_minute_for_duration(words: int, target_duration_seconds: float) -> float:
    """Reading speed at which `words` fill `target_duration_seconds`."""
    target = require_positive_number("target_duration_seconds", target_duration_seconds)
    return words / (target / 60)
