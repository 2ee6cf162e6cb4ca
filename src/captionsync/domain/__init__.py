from captionsync.domain.cue import Cue, MalformedSegment, TranscriptSegment
from captionsync.domain.request import (
    CaptionRequest,
    Request,
    TranscriptRequest,
    parse_request,
)
from captionsync.domain.result import (
    CaptionMetadata,
    CaptionResult,
    CaptionSource,
    SerializedOutput,
)

__all__ = [
    "CaptionMetadata",
    "CaptionRequest",
    "CaptionResult",
    "CaptionSource",
    "Cue",
    "MalformedSegment",
    "Request",
    "SerializedOutput",
    "TranscriptRequest",
    "TranscriptSegment",
    "parse_request",
]
