from __future__ import annotations

from types import SimpleNamespace

import pytest

from captionsync.config.settings import Settings
from captionsync.exceptions import ConfigurationError, DependencyMissingError
from captionsync.services import transcription
from captionsync.services.transcription import (
    FasterWhisperBackend,
    OpenAITranscriptionBackend,
    StubTranscriptionBackend,
    create_transcription_backend,
    transcription_from_response,
)


def _backend() -> OpenAITranscriptionBackend:
    backend = OpenAITranscriptionBackend.__new__(OpenAITranscriptionBackend)
    backend._model = "whisper-1"  # noqa: SLF001
    return backend


def test_verbose_json_segments_are_returned(monkeypatch) -> None:
    backend = _backend()
    calls: list[dict] = []

    def fake_request(**kwargs):  # noqa: ANN003
        calls.append(kwargs)
        return SimpleNamespace(
            text="hello world",
            duration=2.5,
            language="english",
            segments=[SimpleNamespace(start=0.0, end=2.5, text=" hello world")],
        )

    monkeypatch.setattr(backend, "_request_transcription", fake_request)
    result = backend.transcribe(b"audio", language="en", filename="clip.wav")

    assert [c["response_format"] for c in calls] == ["verbose_json"]
    assert calls[0]["filename"] == "clip.wav"
    assert result.segments == [{"start": 0.0, "end": 2.5, "text": " hello world"}]
    assert result.duration == 2.5
    assert result.text == "hello world"


def test_falls_back_to_json_when_verbose_unsupported(monkeypatch) -> None:
    backend = _backend()
    formats: list[str] = []

    def fake_request(**kwargs):  # noqa: ANN003
        formats.append(kwargs["response_format"])
        if kwargs["response_format"] == "verbose_json":
            raise RuntimeError("unsupported_value: response_format verbose_json")
        return {"text": "flat transcript"}

    monkeypatch.setattr(backend, "_request_transcription", fake_request)
    result = backend.transcribe(b"audio")

    assert formats == ["verbose_json", "json"]
    assert result.text == "flat transcript"
    assert result.segments is None


def test_other_provider_errors_propagate(monkeypatch) -> None:
    backend = _backend()
    calls: list[str] = []

    def fake_request(**kwargs):  # noqa: ANN003
        calls.append(kwargs["response_format"])
        raise RuntimeError("rate limited")

    monkeypatch.setattr(backend, "_request_transcription", fake_request)
    with pytest.raises(RuntimeError, match="rate limited"):
        backend.transcribe(b"audio")
    assert calls == ["verbose_json"]


def test_dict_response_with_dict_segments() -> None:
    result = transcription_from_response(
        {"text": "a b", "segments": [{"start": 0, "end": 1, "text": "a b"}], "duration": "1.0"}
    )
    assert result.segments == [{"start": 0, "end": 1, "text": "a b"}]
    assert result.duration == 1.0


def test_faster_whisper_backend_loads_model_lazily(monkeypatch) -> None:
    loads: list[str] = []

    class FakeModel:
        def __init__(self, size, device, compute_type):  # noqa: ANN001
            loads.append(size)

        def transcribe(self, _audio, language=None):  # noqa: ANN001
            segs = iter([SimpleNamespace(start=0.0, end=1.0, text=" hi "), SimpleNamespace(start=1.0, end=2.0, text="there")])
            return segs, SimpleNamespace(duration=2.0, language="en")

    monkeypatch.setattr(
        transcription,
        "require_module",
        lambda name, package=None: SimpleNamespace(WhisperModel=FakeModel),
    )
    backend = FasterWhisperBackend(model_size="tiny")
    assert loads == []

    result = backend.transcribe(b"audio", language="en")
    backend.transcribe(b"audio")

    assert loads == ["tiny"]
    assert result.text == "hi there"
    assert [s["end"] for s in result.segments] == [1.0, 2.0]
    assert result.duration == 2.0


def test_factory_requires_api_key_for_openai() -> None:
    with pytest.raises(ConfigurationError, match="Missing OpenAI API key"):
        create_transcription_backend(Settings())


def test_factory_rejects_unknown_backend() -> None:
    settings = Settings()
    settings.transcription_backend = "carrier-pigeon"
    with pytest.raises(ConfigurationError, match="Unknown transcription backend"):
        create_transcription_backend(settings)


def test_factory_local_backend_reports_missing_dependency(monkeypatch) -> None:
    def missing(name, package=None):  # noqa: ANN001
        raise DependencyMissingError(f"Missing required dependency '{package or name}'.")

    monkeypatch.setattr(transcription, "require_module", missing)
    settings = Settings()
    settings.transcription_backend = "local"
    with pytest.raises(DependencyMissingError, match="faster-whisper"):
        create_transcription_backend(settings)


def test_factory_stub_mode() -> None:
    settings = Settings()
    settings.stub_services = True
    backend = create_transcription_backend(settings)
    assert isinstance(backend, StubTranscriptionBackend)
    result = backend.transcribe(b"123", language="en")
    assert result.segments is None
    assert result.text == "This is a stub transcript."
