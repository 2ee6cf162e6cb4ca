from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Union

from captionsync.exceptions import InvalidInputError


@dataclass(frozen=True)
class CaptionRequest:
    """Text-path request. Unset fields fall back to Settings."""

    text: str
    format: str | None = None
    words_per_minute: float | None = None
    max_words_per_cue: int | None = None
    language: str | None = None
    # AI-enhanced path: either a rewrite already produced by the caller,
    # or `enhance=True` to have the configured rewrite service produce one.
    enhance: bool = False
    rewritten_text: str | None = None
    style: str | None = None
    target_duration_seconds: float | None = None

    @property
    def wants_enhancement(self) -> bool:
        return self.enhance or self.rewritten_text is not None


@dataclass(frozen=True)
class TranscriptRequest:
    """Transcript-path request: timed segments, a flat transcript, or both."""

    segments: Sequence[Any] | None = None
    text: str | None = None
    format: str | None = None
    language: str | None = None
    duration: float | None = None


Request = Union[CaptionRequest, TranscriptRequest]

_ALIASES = {
    "wordsPerMinute": "words_per_minute",
    "maxWordsPerCue": "max_words_per_cue",
    "maxWordsPerCaption": "max_words_per_cue",
    "rewrittenText": "rewritten_text",
    "targetDurationSeconds": "target_duration_seconds",
    "maxDuration": "target_duration_seconds",
    "useAI": "enhance",
}

_CAPTION_FIELDS = {
    "text",
    "format",
    "words_per_minute",
    "max_words_per_cue",
    "language",
    "enhance",
    "rewritten_text",
    "style",
    "target_duration_seconds",
}
_TRANSCRIPT_FIELDS = {"segments", "text", "format", "language", "duration"}


def parse_request(payload: Mapping[str, Any]) -> Request:
    """
    Build a request from a JSON-style mapping.

    A `segments` key selects the transcript path; otherwise `text` is required.
    camelCase keys are accepted alongside snake_case; unknown keys are ignored.
    """
    if not isinstance(payload, Mapping):
        raise InvalidInputError("Request must be a JSON object.")

    data = {_ALIASES.get(key, key): value for key, value in payload.items()}

    if data.get("segments") is not None:
        segments = data["segments"]
        if isinstance(segments, (str, bytes)) or not isinstance(segments, Sequence):
            raise InvalidInputError("'segments' must be a list of {text, start, end} objects.")
        return TranscriptRequest(**{k: v for k, v in data.items() if k in _TRANSCRIPT_FIELDS})

    if "text" not in data:
        raise InvalidInputError("Request requires either 'text' or 'segments'.")
    kwargs = {k: v for k, v in data.items() if k in _CAPTION_FIELDS}
    kwargs["enhance"] = bool(kwargs.get("enhance", False))
    return CaptionRequest(**kwargs)
