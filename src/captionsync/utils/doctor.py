from __future__ import annotations

import importlib
import sys

from captionsync.config.settings import Settings
from captionsync.services.formats import SUPPORTED_FORMATS

SUPPORTED_LANGUAGES = ("en", "es", "fr", "de", "it", "pt", "ru", "ja", "ko", "zh")
SUPPORTED_AUDIO_FORMATS = ("mp3", "mp4", "m4a", "wav", "webm")
TRANSCRIPTION_BACKENDS = ("openai", "local")


def _module_available(name: str) -> bool:
    try:
        importlib.import_module(name)
    except Exception:
        return False
    return True


def _get_version() -> str:
    try:
        import importlib.metadata

        return importlib.metadata.version("captionsync")
    except Exception:
        return "unknown"


def _status_line(ok: bool, label: str, detail: str = "") -> str:
    icon = "✅" if ok else "❌"
    return f"{icon} {label}{detail}"


def _warn_line(label: str, detail: str = "") -> str:
    return f"⚠️ {label}{detail}"


def service_status(settings: Settings) -> dict:
    """Capabilities of this installation, suitable for JSON output."""
    api_key = settings.api_key() is not None
    openai_ok = _module_available("openai")
    local_ok = _module_available("faster_whisper")
    backend = settings.transcription_backend.strip().lower()
    if settings.stub_services:
        transcription = True
    elif backend == "local":
        transcription = local_ok
    else:
        transcription = backend == "openai" and openai_ok and api_key
    return {
        "version": _get_version(),
        "transcription_backend": backend,
        "supported_formats": list(SUPPORTED_FORMATS),
        "supported_languages": list(SUPPORTED_LANGUAGES),
        "features": {
            "audio_transcription": transcription,
            "text_captions": True,
            "smart_captions": settings.stub_services or (openai_ok and api_key),
            "timestamp_generation": True,
            "multiple_formats": True,
        },
        "limits": {
            "max_audio_bytes": settings.max_audio_bytes,
            "max_input_chars": settings.max_input_chars,
            "max_segments": settings.max_segments,
            "supported_audio_formats": list(SUPPORTED_AUDIO_FORMATS),
        },
    }


def run_doctor(settings: Settings) -> int:
    required_ok = True
    lines: list[str] = []

    lines.append("captionsync doctor")
    lines.append("")

    python_version = sys.version.split()[0]
    lines.append(_status_line(True, "Python", f": {python_version}"))
    lines.append(_status_line(True, "captionsync version", f": {_get_version()}"))

    backend = settings.transcription_backend.strip().lower()
    backend_ok = backend in TRANSCRIPTION_BACKENDS
    if not backend_ok:
        required_ok = False
    lines.append(_status_line(backend_ok, "Transcription backend", f": {backend}"))

    if _module_available("openai"):
        lines.append(_status_line(True, "openai", " (available)"))
    else:
        lines.append(_warn_line("openai", " (not installed)"))

    if _module_available("faster_whisper"):
        lines.append(_status_line(True, "faster-whisper", " (available)"))
    elif backend == "local":
        required_ok = False
        lines.append(_status_line(False, "faster-whisper", " (not installed)"))
    else:
        lines.append(_warn_line("faster-whisper", " (not installed)"))

    api_key = settings.api_key()
    lines.append(_status_line(bool(api_key), "OpenAI API key", ": set" if api_key else ": missing"))

    if settings.stub_services:
        lines.append(_warn_line("Stub services", " enabled (no rewrite or transcription calls)"))

    lines.append(
        _status_line(
            True,
            "Pacing",
            f": {settings.words_per_minute:g} wpm / {settings.max_words_per_cue} words per cue",
        )
    )
    lines.append(_status_line(True, "Formats", f": {', '.join(SUPPORTED_FORMATS)}"))

    print("\n".join(lines))
    return 0 if required_ok else 1
