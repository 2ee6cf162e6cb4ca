"""Caption/subtitle synchronization engine."""

from captionsync.domain import (
    CaptionMetadata,
    CaptionRequest,
    CaptionResult,
    CaptionSource,
    Cue,
    TranscriptRequest,
    TranscriptSegment,
)
from captionsync.pipeline import CaptionPipeline

__version__ = "0.1.0"

__all__ = [
    "CaptionMetadata",
    "CaptionPipeline",
    "CaptionRequest",
    "CaptionResult",
    "CaptionSource",
    "Cue",
    "TranscriptRequest",
    "TranscriptSegment",
    "__version__",
]
