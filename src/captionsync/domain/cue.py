from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from captionsync.exceptions import InvalidInputError


@dataclass(frozen=True)
class Cue:
    """One timed caption unit. Times are in seconds."""

    index: int
    text: str
    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "text": self.text,
            "start_time": self.start_time,
            "end_time": self.end_time,
        }


def _field(segment: Any, name: str) -> Any:
    # Collaborator responses arrive as SDK objects or plain dicts.
    if isinstance(segment, Mapping):
        if name not in segment:
            raise InvalidInputError(f"Transcript segment is missing '{name}'.")
        return segment[name]
    if not hasattr(segment, name):
        raise InvalidInputError(f"Transcript segment is missing '{name}'.")
    return getattr(segment, name)


def _seconds(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"Transcript segment '{name}' must be a number, got {value!r}.")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"Transcript segment '{name}' must be a number, got {value!r}."
        ) from exc


@dataclass(frozen=True)
class TranscriptSegment:
    """A time-stamped unit of speech-to-text output, trusted as given."""

    text: str
    start: float
    end: float

    @classmethod
    def coerce(cls, segment: Any) -> "TranscriptSegment":
        if isinstance(segment, cls):
            return segment
        text = _field(segment, "text")
        if text is None:
            text = ""
        if not isinstance(text, str):
            raise InvalidInputError(
                f"Transcript segment 'text' must be a string, got {type(text).__name__}."
            )
        return cls(
            text=text,
            start=_seconds(_field(segment, "start"), "start"),
            end=_seconds(_field(segment, "end"), "end"),
        )

    def problem(self) -> str | None:
        """Return why this segment cannot become a cue, or None when it can."""
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            return "non-finite timestamp"
        if self.start < 0:
            return "negative start"
        if self.end <= self.start:
            return "end <= start"
        if not self.text.strip():
            return "empty text"
        return None


@dataclass(frozen=True)
class MalformedSegment:
    """Record of a transcript segment dropped during adaptation."""

    position: int
    reason: str
    segment: TranscriptSegment

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "reason": self.reason,
            "text": self.segment.text,
            "start": self.segment.start,
            "end": self.segment.end,
        }
