"""
Caption pipeline facade.

Text path:        normalize -> segment -> chunk -> time -> serialize
Enhanced text:    rewrite (collaborator) -> text path, pacing fitted to a target duration
Transcript path:  adapt segments -> serialize
Audio:            transcribe (collaborator) -> transcript path

Responsibilities:
- Resolve per-request options against Settings
- Enforce input ceilings and pacing parameters before any processing
- Report summary metadata

Does NOT:
- Retry collaborator calls (rewrite/transcription errors propagate)
- Touch the filesystem
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from itertools import islice
from typing import Any

from captionsync.config.settings import Settings
from captionsync.domain.cue import Cue
from captionsync.domain.request import (
    CaptionRequest,
    Request,
    TranscriptRequest,
    parse_request,
)
from captionsync.domain.result import CaptionMetadata, CaptionResult, CaptionSource
from captionsync.exceptions import ConfigurationError, InvalidInputError
from captionsync.services.chunker import chunk_sentences
from captionsync.services.formats import resolve_format, serialize
from captionsync.services.rewrite import TextRewriter
from captionsync.services.segmenter import segment_sentences
from captionsync.services.timing import assign_timing, words_per_minute_for_duration
from captionsync.services.transcript import from_transcription
from captionsync.services.transcription import TranscriptionBackend
from captionsync.utils.checks import (
    require_positive_int,
    require_positive_number,
    require_within,
)
from captionsync.utils.logging import get_logger
from captionsync.utils.text import normalize_text, word_count
from captionsync.utils.timing import StepTimer

log = get_logger(__name__)


def _total_duration(cues: tuple[Cue, ...] | list[Cue]) -> float:
    return cues[-1].end_time if cues else 0.0


class CaptionPipeline:
    """
    Builds captions from text, transcripts, or audio.

    Collaborators (rewrite, transcription) are injected at construction so
    tests can pass fakes; the caption computation itself holds no state.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        rewriter: TextRewriter | None = None,
        transcriber: TranscriptionBackend | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.rewriter = rewriter
        self.transcriber = transcriber

    def run(self, request: Request | Mapping[str, Any]) -> CaptionResult:
        if isinstance(request, Mapping):
            request = parse_request(request)
        if isinstance(request, TranscriptRequest):
            return self.run_transcript(request)
        if isinstance(request, CaptionRequest):
            return self.run_text(request)
        raise InvalidInputError(f"Unsupported request type: {type(request).__name__}.")

    # ------------------------------------------------------------------
    # Text path
    # ------------------------------------------------------------------
    def run_text(self, request: CaptionRequest) -> CaptionResult:
        settings = self.settings
        wpm = require_positive_number(
            "words_per_minute",
            request.words_per_minute if request.words_per_minute is not None else settings.words_per_minute,
        )
        max_words = require_positive_int(
            "max_words_per_cue",
            request.max_words_per_cue if request.max_words_per_cue is not None else settings.max_words_per_cue,
        )
        target = self._target_duration(request) if request.wants_enhancement else None
        fmt = resolve_format(request.format or settings.format)
        language = request.language or settings.language

        if isinstance(request.text, str):
            require_within("Input text", len(request.text), settings.max_input_chars)

        timer = StepTimer()
        with timer.step("normalize"):
            normalized = normalize_text(request.text)
        original_words = word_count(normalized)

        source = CaptionSource.TEXT
        caption_text = normalized
        optimized_words: int | None = None

        rewritten = self._rewritten_text(request, normalized, language, target, timer)
        if rewritten is not None:
            if not isinstance(rewritten, str):
                raise InvalidInputError("Rewritten text must be a string.")
            require_within("Rewritten text", len(rewritten), settings.max_input_chars)
            caption_text = normalize_text(rewritten)
            optimized_words = word_count(caption_text)
            if optimized_words == 0:
                raise InvalidInputError("Rewritten text is empty.")
            wpm = words_per_minute_for_duration(optimized_words, target)
            source = CaptionSource.AI_ENHANCED_TEXT

        with timer.step("chunk"):
            chunks = chunk_sentences(segment_sentences(caption_text), max_words)
        with timer.step("timing"):
            cues = tuple(assign_timing(chunks, wpm))
        with timer.step("serialize"):
            captions = serialize(cues, fmt)
        log.debug("Text path steps: %s", timer.summary())

        metadata = CaptionMetadata(
            total_duration=_total_duration(cues),
            cue_count=len(cues),
            word_count=original_words,
            words_per_minute=wpm,
            source=source,
            format=fmt.value,
            language=language,
            original_word_count=original_words if optimized_words is not None else None,
            optimized_word_count=optimized_words,
        )
        log.info(
            "Captions ready: source=%s cues=%d duration=%.2fs",
            source.value,
            metadata.cue_count,
            metadata.total_duration,
        )
        return CaptionResult(captions=captions, metadata=metadata, cues=cues)

    def _target_duration(self, request: CaptionRequest) -> float:
        target = request.target_duration_seconds
        if target is None:
            target = self.settings.target_duration_seconds
        return require_positive_number("target_duration_seconds", target)

    def _rewritten_text(
        self,
        request: CaptionRequest,
        normalized: str,
        language: str | None,
        target: float | None,
        timer: StepTimer,
    ) -> str | None:
        if target is None:
            return None
        if request.rewritten_text is not None:
            return request.rewritten_text
        if not normalized:
            return None
        if self.rewriter is None:
            log.warning("Enhancement requested but no rewrite service configured; using plain text.")
            return None
        with timer.step("rewrite"):
            return self.rewriter.rewrite(
                normalized,
                style=request.style or self.settings.rewrite_style,
                target_duration_seconds=target,
                language=language,
            )

    # ------------------------------------------------------------------
    # Transcript path
    # ------------------------------------------------------------------
    def run_transcript(self, request: TranscriptRequest) -> CaptionResult:
        settings = self.settings
        fmt = resolve_format(request.format or settings.format)

        segments = request.segments
        if segments is not None:
            if isinstance(segments, (str, bytes)) or not isinstance(segments, Iterable):
                raise InvalidInputError("Transcript segments must be a list of {text, start, end} objects.")
            limit = settings.max_segments
            # Read one past the ceiling so lazy iterables cannot run unbounded.
            segments = list(islice(segments, limit + 1)) if limit else list(segments)
            require_within("Transcript", len(segments), limit)
        if request.text is not None:
            if not isinstance(request.text, str):
                raise InvalidInputError("Transcript text must be a string.")
            require_within("Transcript text", len(request.text), settings.max_input_chars)
        if segments is None and request.text is None:
            raise InvalidInputError("Transcript request requires 'segments' or 'text'.")

        adapted = from_transcription(segments, request.text)
        cues = adapted.cues
        if segments:
            words = sum(word_count(c.text) for c in cues)
            words += sum(word_count(m.segment.text) for m in adapted.malformed)
        else:
            words = word_count(request.text or "")

        metadata = CaptionMetadata(
            total_duration=_total_duration(cues),
            cue_count=len(cues),
            word_count=words,
            words_per_minute=None,
            source=CaptionSource.TRANSCRIPT,
            format=fmt.value,
            language=request.language or settings.language,
            warnings=adapted.warnings,
            segment_count=len(cues) + adapted.warnings if segments else 0,
            audio_duration=request.duration,
        )
        log.info(
            "Captions ready: source=transcript cues=%d dropped=%d duration=%.2fs",
            metadata.cue_count,
            metadata.warnings,
            metadata.total_duration,
        )
        return CaptionResult(
            captions=serialize(cues, fmt),
            metadata=metadata,
            cues=cues,
            malformed=adapted.malformed,
        )

    # ------------------------------------------------------------------
    # Audio (transcription collaborator, then transcript path)
    # ------------------------------------------------------------------
    def run_audio(
        self,
        audio: bytes,
        *,
        language: str | None = None,
        format: str | None = None,
        filename: str = "audio.mp3",
    ) -> CaptionResult:
        if not isinstance(audio, (bytes, bytearray)):
            raise InvalidInputError("Audio must be bytes.")
        size = len(audio)
        require_within("Audio file (bytes)", size, self.settings.max_audio_bytes)
        if self.transcriber is None:
            raise ConfigurationError("No transcription backend configured.")

        language = language or self.settings.language
        log.info("Transcribing %d bytes (language=%s)", size, language)
        transcription = self.transcriber.transcribe(bytes(audio), language=language, filename=filename)

        return self.run_transcript(
            TranscriptRequest(
                segments=transcription.segments,
                text=transcription.text,
                format=format,
                language=transcription.language or language,
                duration=transcription.duration,
            )
        )
