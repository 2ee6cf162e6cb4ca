from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import typer

from captionsync.config.settings import Settings
from captionsync.domain.request import CaptionRequest, TranscriptRequest
from captionsync.domain.result import CaptionResult
from captionsync.exceptions import CaptionSyncError, InvalidInputError
from captionsync.pipeline import CaptionPipeline
from captionsync.services.formats import parse_srt, parse_vtt
from captionsync.services.rewrite import create_rewrite_service
from captionsync.services.transcription import create_transcription_backend
from captionsync.utils.doctor import run_doctor, service_status
from captionsync.utils.logging import configure_logging
from captionsync.utils.qc import check_cues, cue_stats

app = typer.Typer(add_completion=False)


@contextmanager
def _cli_errors() -> Iterator[None]:
    try:
        yield
    except CaptionSyncError as exc:
        typer.echo(f"{exc.label()}: {exc.message}", err=True)
        raise typer.Exit(code=exc.exit_code or 1) from exc


def _load_settings(log_level: str | None = None) -> Settings:
    settings = Settings()
    configure_logging(log_level or settings.log_level)
    return settings


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    source = Path(path)
    if not source.is_file():
        raise typer.BadParameter(f"File not found: {path}")
    return source.read_text(encoding="utf-8")


def _read_json(path: str) -> Any:
    raw = _read_text(path)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"{path} is not valid JSON: {exc.msg} (line {exc.lineno}).") from exc


def _render(result: CaptionResult) -> str:
    if isinstance(result.captions, str):
        return result.captions
    return json.dumps(result.captions, indent=2, ensure_ascii=False) + "\n"


def _emit(result: CaptionResult, *, out: str | None, metadata: bool) -> None:
    content = _render(result)
    if out:
        out_path = Path(out).expanduser()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(content, encoding="utf-8")
        typer.echo(
            f"Wrote {result.metadata.cue_count} cues ({result.metadata.format}) -> {out_path}",
            err=True,
        )
    elif content:
        typer.echo(content, nl=not content.endswith("\n"))
    if metadata:
        typer.echo(json.dumps(result.metadata.to_dict(), indent=2), err=True)


@app.command()
def config() -> None:
    """Print resolved config."""
    s = Settings()
    typer.echo(json.dumps(s.to_public_dict(), indent=2))


@app.command()
def doctor(
    json_output: bool = typer.Option(False, "--json", help="Output service status as JSON."),
) -> None:
    """Report available collaborators, formats and limits."""
    with _cli_errors():
        settings = Settings()
        if json_output:
            typer.echo(json.dumps(service_status(settings), indent=2))
            return
        code = run_doctor(settings)
    raise typer.Exit(code=code)


@app.command()
def text(
    path: str = typer.Argument(..., help="Text file to caption, or '-' for stdin."),
    format: str = typer.Option(None, "--format", "-f", help="Output format: srt, vtt, json, txt."),
    wpm: float = typer.Option(None, "--wpm", help="Words per minute (overrides config)."),
    max_words: int = typer.Option(None, "--max-words", help="Max words per cue (overrides config)."),
    language: str = typer.Option(None, help="Language code (overrides config)."),
    enhance: bool = typer.Option(False, help="Rewrite the text with the LLM before captioning."),
    style: str = typer.Option(None, help="Rewrite style: narrative, dialogue, dramatic."),
    target_duration: float = typer.Option(None, help="Target duration in seconds for --enhance."),
    out: str = typer.Option(None, "--out", "-o", help="Write captions to this file."),
    metadata: bool = typer.Option(False, help="Print result metadata as JSON to stderr."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Caption narrative text with estimated reading-speed timing."""
    with _cli_errors():
        settings = _load_settings(log_level)
        request = CaptionRequest(
            text=_read_text(path),
            format=format,
            words_per_minute=wpm,
            max_words_per_cue=max_words,
            language=language,
            enhance=enhance,
            style=style,
            target_duration_seconds=target_duration,
        )
        rewriter = create_rewrite_service(settings) if enhance else None
        result = CaptionPipeline(settings, rewriter=rewriter).run(request)
        _emit(result, out=out, metadata=metadata)


@app.command()
def transcript(
    path: str = typer.Argument(..., help="JSON transcript: a list of segments or {segments, text}."),
    format: str = typer.Option(None, "--format", "-f", help="Output format: srt, vtt, json, txt."),
    language: str = typer.Option(None, help="Language code (overrides config)."),
    out: str = typer.Option(None, "--out", "-o", help="Write captions to this file."),
    metadata: bool = typer.Option(False, help="Print result metadata as JSON to stderr."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Caption a timed transcript produced by a speech-to-text service."""
    with _cli_errors():
        settings = _load_settings(log_level)
        data = _read_json(path)
        if isinstance(data, list):
            request = TranscriptRequest(segments=data, format=format, language=language)
        elif isinstance(data, dict):
            request = TranscriptRequest(
                segments=data.get("segments"),
                text=data.get("text"),
                format=format,
                language=language or data.get("language"),
                duration=data.get("duration"),
            )
        else:
            raise InvalidInputError("Transcript JSON must be a list or an object.")
        result = CaptionPipeline(settings).run(request)
        if result.metadata.warnings:
            typer.echo(f"Dropped {result.metadata.warnings} malformed segment(s).", err=True)
        _emit(result, out=out, metadata=metadata)


@app.command()
def audio(
    path: str = typer.Argument(..., help="Audio file to transcribe and caption."),
    format: str = typer.Option(None, "--format", "-f", help="Output format: srt, vtt, json, txt."),
    language: str = typer.Option(None, help="Language hint for transcription."),
    backend: str = typer.Option(None, help="Transcription backend: openai or local."),
    out: str = typer.Option(None, "--out", "-o", help="Write captions to this file."),
    metadata: bool = typer.Option(False, help="Print result metadata as JSON to stderr."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Transcribe audio and caption it with the transcript timings."""
    with _cli_errors():
        settings = _load_settings(log_level)
        if backend is not None:
            settings.transcription_backend = backend
        source = Path(path)
        if not source.is_file():
            raise typer.BadParameter(f"File not found: {path}")
        pipeline = CaptionPipeline(settings, transcriber=create_transcription_backend(settings))
        result = pipeline.run_audio(
            source.read_bytes(),
            language=language,
            format=format,
            filename=source.name,
        )
        _emit(result, out=out, metadata=metadata)


@app.command()
def request(
    path: str = typer.Argument(..., help="JSON request document, or '-' for stdin."),
    out: str = typer.Option(None, "--out", "-o", help="Write captions to this file."),
    log_level: str = typer.Option(None, help="Log level (overrides config)."),
) -> None:
    """Run a JSON request and print the full result (captions + metadata)."""
    with _cli_errors():
        settings = _load_settings(log_level)
        payload = _read_json(path)
        if not isinstance(payload, dict):
            raise InvalidInputError("Request must be a JSON object.")
        wants_rewrite = bool(payload.get("enhance") or payload.get("useAI"))
        rewriter = create_rewrite_service(settings) if wants_rewrite else None
        result = CaptionPipeline(settings, rewriter=rewriter).run(payload)
        document = json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n"
        if out:
            Path(out).expanduser().write_text(document, encoding="utf-8")
        else:
            typer.echo(document, nl=False)


@app.command()
def check(
    path: str = typer.Argument(..., help="SRT or WebVTT file to check."),
    gapless: bool = typer.Option(False, help="Require back-to-back cues starting at 0."),
) -> None:
    """Parse a subtitle file and report timing/indexing problems."""
    with _cli_errors():
        content = _read_text(path)
        cues = parse_vtt(content) if content.lstrip("\ufeff").startswith("WEBVTT") else parse_srt(content)
        violations = check_cues(cues, gapless=gapless)
        stats = cue_stats(cues)
        end = cues[-1].end_time if cues else 0.0
        typer.echo(f"cues={len(cues)} end={end:.3f}s")
        if stats:
            typer.echo(
                f"duration min={stats['min_seconds']:.3f}s "
                f"max={stats['max_seconds']:.3f}s avg={stats['avg_seconds']:.3f}s"
            )
        for violation in violations:
            typer.echo(f"❌ {violation}")
    if violations:
        raise typer.Exit(code=1)
    typer.echo("✅ OK")


def _main() -> None:
    app()


if __name__ == "__main__":
    _main()
