from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

from captionsync.domain.cue import Cue, MalformedSegment

SerializedOutput = Union[str, list]


class CaptionSource(str, Enum):
    TRANSCRIPT = "transcript"
    TEXT = "text"
    AI_ENHANCED_TEXT = "ai-enhanced-text"


@dataclass(frozen=True)
class CaptionMetadata:
    total_duration: float
    cue_count: int
    word_count: int
    words_per_minute: float | None
    source: CaptionSource
    format: str
    language: str | None = None
    warnings: int = 0
    segment_count: int | None = None
    audio_duration: float | None = None
    original_word_count: int | None = None
    optimized_word_count: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class CaptionResult:
    captions: SerializedOutput
    metadata: CaptionMetadata
    cues: tuple[Cue, ...] = ()
    malformed: tuple[MalformedSegment, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "captions": self.captions,
            "metadata": self.metadata.to_dict(),
        }
        if self.malformed:
            data["malformed"] = [m.to_dict() for m in self.malformed]
        return data
