"""
Transcript adaptation.

Maps externally timed transcript segments straight onto cues. Segment timings
are trusted as given: gaps between segments are kept. Segments that cannot
form a valid cue (end <= start, empty text, ...) are dropped and reported as
MalformedSegment records instead of failing the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence

from captionsync.domain.cue import Cue, MalformedSegment, TranscriptSegment
from captionsync.utils.logging import get_logger

log = get_logger(__name__)

FLAT_TRANSCRIPT_SECONDS = 60.0


@dataclass(frozen=True)
class AdaptedTranscript:
    cues: tuple[Cue, ...]
    malformed: tuple[MalformedSegment, ...] = ()

    @property
    def warnings(self) -> int:
        return len(self.malformed)


def from_segments(segments: Iterable[Any]) -> AdaptedTranscript:
    kept: List[TranscriptSegment] = []
    malformed: List[MalformedSegment] = []

    for position, raw in enumerate(segments):
        segment = TranscriptSegment.coerce(raw)
        reason = segment.problem()
        if reason is not None:
            log.warning(
                "Dropping malformed transcript segment #%d (%s): start=%s end=%s",
                position,
                reason,
                segment.start,
                segment.end,
            )
            malformed.append(MalformedSegment(position=position, reason=reason, segment=segment))
            continue
        kept.append(segment)

    # Stable sort keeps start times non-decreasing without reordering ties.
    kept.sort(key=lambda s: s.start)

    cues = tuple(
        Cue(index=index, text=seg.text.strip(), start_time=seg.start, end_time=seg.end)
        for index, seg in enumerate(kept, start=1)
    )
    return AdaptedTranscript(cues=cues, malformed=tuple(malformed))


def from_flat_text(text: str) -> AdaptedTranscript:
    """Single cue spanning the first minute; used when no segments came back."""
    if not text or not text.strip():
        return AdaptedTranscript(cues=())
    return AdaptedTranscript(
        cues=(Cue(index=1, text=text, start_time=0.0, end_time=FLAT_TRANSCRIPT_SECONDS),)
    )


def from_transcription(segments: Sequence[Any] | None, text: str | None = None) -> AdaptedTranscript:
    """Accept either collaborator shape: timed segments or a flat transcript."""
    if segments:
        return from_segments(segments)
    if text:
        log.warning("Transcript has no segments; using a single %.0fs cue.", FLAT_TRANSCRIPT_SECONDS)
    return from_flat_text(text or "")
