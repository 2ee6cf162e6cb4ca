"""
Speech-to-text collaborators.

Backends turn raw audio bytes into a Transcription: timed segments when the
provider returns them, otherwise a flat transcript string. The caption
pipeline accepts either shape.

Does NOT:
- Retry failed provider calls (the caller decides)
- Build cues (services.transcript does)
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Protocol

from captionsync.config.settings import Settings
from captionsync.exceptions import ConfigurationError
from captionsync.utils.checks import require_module
from captionsync.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Transcription:
    text: str | None = None
    segments: list[dict] | None = None
    duration: float | None = None
    language: str | None = None


class TranscriptionBackend(Protocol):
    def transcribe(
        self,
        audio: bytes,
        *,
        language: str | None = None,
        filename: str = "audio.mp3",
    ) -> Transcription: ...


def _get(obj: Any, name: str) -> Any:
    # Handle object-like or dict-like responses
    value = getattr(obj, name, None)
    if value is None and isinstance(obj, dict):
        value = obj.get(name)
    return value


def _segment_payload(seg: Any) -> dict:
    return {"start": _get(seg, "start"), "end": _get(seg, "end"), "text": _get(seg, "text")}


def transcription_from_response(resp: Any) -> Transcription:
    segments = _get(resp, "segments")
    duration = _get(resp, "duration")
    return Transcription(
        text=_get(resp, "text"),
        segments=[_segment_payload(s) for s in segments] if segments else None,
        duration=float(duration) if duration is not None else None,
        language=_get(resp, "language"),
    )


class OpenAITranscriptionBackend:
    """
    OpenAI transcription backend.

    Requests `response_format="verbose_json"` to obtain segment timestamps and
    falls back to plain json when the model does not support it.
    """

    def __init__(self, api_key: str, model: str = "whisper-1") -> None:
        openai = require_module("openai")

        self._client = openai.OpenAI(api_key=api_key)
        self._model = model

    def _request_transcription(
        self,
        *,
        audio: bytes,
        filename: str,
        language: str | None,
        response_format: str,
    ):
        kwargs: dict[str, Any] = {
            "model": self._model,
            "file": (filename, audio),
            "response_format": response_format,
        }
        if language:
            kwargs["language"] = language
        if response_format == "verbose_json":
            kwargs["timestamp_granularities"] = ["word", "segment"]
        return self._client.audio.transcriptions.create(**kwargs)

    def transcribe(
        self,
        audio: bytes,
        *,
        language: str | None = None,
        filename: str = "audio.mp3",
    ) -> Transcription:
        try:
            resp = self._request_transcription(
                audio=audio,
                filename=filename,
                language=language,
                response_format="verbose_json",
            )
        except Exception as exc:
            msg = str(exc)
            if "response_format" in msg or "unsupported_value" in msg or "timestamp_granularities" in msg:
                log.warning(
                    "Transcription model does not support verbose_json; falling back to json."
                )
                resp = self._request_transcription(
                    audio=audio,
                    filename=filename,
                    language=language,
                    response_format="json",
                )
            else:
                raise

        result = transcription_from_response(resp)
        log.info(
            "Transcribed %d bytes with %s: %d segments",
            len(audio),
            self._model,
            len(result.segments or []),
        )
        return result


class FasterWhisperBackend:
    """Local transcription via faster-whisper. The model loads on first use."""

    def __init__(self, model_size: str = "base", *, device: str = "cpu", compute_type: str = "int8") -> None:
        self._module = require_module("faster_whisper", package="faster-whisper")
        self._model_size = model_size
        self._device = device
        self._compute_type = compute_type
        self._model = None

    def _load(self):
        if self._model is None:
            log.info("Loading faster-whisper model '%s' (%s)", self._model_size, self._device)
            self._model = self._module.WhisperModel(
                self._model_size,
                device=self._device,
                compute_type=self._compute_type,
            )
        return self._model

    def transcribe(
        self,
        audio: bytes,
        *,
        language: str | None = None,
        filename: str = "audio.mp3",
    ) -> Transcription:
        model = self._load()
        segments, info = model.transcribe(io.BytesIO(audio), language=language)
        payload = [{"start": seg.start, "end": seg.end, "text": seg.text} for seg in segments]
        return Transcription(
            text=" ".join(str(seg["text"]).strip() for seg in payload),
            segments=payload,
            duration=getattr(info, "duration", None),
            language=getattr(info, "language", language),
        )


class StubTranscriptionBackend:
    """
    Offline backend. Returns a flat transcript with no timing.
    """

    def __init__(self, text: str = "This is a stub transcript.") -> None:
        self.text = text

    def transcribe(self, audio, *, language=None, filename="audio.mp3"):
        log.info("[STUB] Transcription skipped (%d bytes)", len(audio))
        return Transcription(text=self.text, segments=None, language=language)


def create_transcription_backend(settings: Settings) -> TranscriptionBackend:
    if settings.stub_services:
        log.warning("[STUB] Transcription backend: stub (no audio is transcribed)")
        return StubTranscriptionBackend()

    backend = settings.transcription_backend.strip().lower()
    if backend == "local":
        log.info("Transcription backend: faster-whisper (%s)", settings.local_model)
        return FasterWhisperBackend(model_size=settings.local_model)
    if backend != "openai":
        raise ConfigurationError(
            f"Unknown transcription backend '{settings.transcription_backend}'. Use openai or local."
        )

    api_key = settings.api_key()
    if not api_key:
        raise ConfigurationError(
            "Missing OpenAI API key. Set CAPTIONSYNC_OPENAI_API_KEY or use --backend local."
        )
    log.info("Transcription backend: OpenAI (%s)", settings.transcription_model)
    return OpenAITranscriptionBackend(api_key=api_key, model=settings.transcription_model)

