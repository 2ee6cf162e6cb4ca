from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from captionsync.cli.main import app


def _write(tmp_path: Path, name: str, content: str) -> str:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


def test_cli_text_prints_srt(tmp_path: Path) -> None:
    source = _write(tmp_path, "story.txt", "Hello world.\n  This is a test.\n")

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["text", source, "--wpm", "150", "--max-words", "8"])

    assert result.exit_code == 0
    assert result.stdout == "1\n00:00:00,000 --> 00:00:02,880\nHello world. This is a test.\n"


def test_cli_text_writes_output_file(tmp_path: Path) -> None:
    source = _write(tmp_path, "story.txt", "One. Two.")
    target = tmp_path / "out" / "story.vtt"

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["text", source, "-f", "vtt", "-o", str(target), "--metadata"])

    assert result.exit_code == 0
    assert target.read_text(encoding="utf-8").startswith("WEBVTT\n\n")
    assert '"cue_count": 1' in result.stderr


def test_cli_text_rejects_zero_wpm(tmp_path: Path) -> None:
    source = _write(tmp_path, "story.txt", "Hello.")

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["text", source, "--wpm", "0"])

    assert result.exit_code == 2
    assert "Configuration error: words_per_minute must be greater than 0" in result.stderr


def test_cli_transcript_reports_dropped_segments(tmp_path: Path) -> None:
    segments = [{"text": "a", "start": 5, "end": 3}, {"text": "b", "start": 0, "end": 2}]
    source = _write(tmp_path, "transcript.json", json.dumps(segments))

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["transcript", source])

    assert result.exit_code == 0
    assert result.stdout == "1\n00:00:00,000 --> 00:00:02,000\nb\n"
    assert "Dropped 1 malformed segment(s)." in result.stderr


def test_cli_transcript_invalid_json(tmp_path: Path) -> None:
    source = _write(tmp_path, "transcript.json", "{not json")

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["transcript", source])

    assert result.exit_code == 4
    assert "Input error:" in result.stderr


def test_cli_request_prints_result_document(tmp_path: Path) -> None:
    source = _write(tmp_path, "request.json", json.dumps({"text": "Hi there.", "format": "txt"}))

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["request", source])

    assert result.exit_code == 0
    document = json.loads(result.stdout)
    assert document["captions"] == "Hi there."
    assert document["metadata"]["source"] == "text"
    assert document["metadata"]["cue_count"] == 1


def test_cli_check_ok(tmp_path: Path) -> None:
    srt = "1\n00:00:00,000 --> 00:00:02,000\nOne\n\n2\n00:00:02,000 --> 00:00:04,500\nTwo\n"
    source = _write(tmp_path, "ok.srt", srt)

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["check", source, "--gapless"])

    assert result.exit_code == 0
    assert "cues=2 end=4.500s" in result.stdout
    assert "✅ OK" in result.stdout


def test_cli_check_reports_violations(tmp_path: Path) -> None:
    vtt = "WEBVTT\n\n00:00:03.000 --> 00:00:02.000\nBackwards\n"
    source = _write(tmp_path, "bad.vtt", vtt)

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["check", source])

    assert result.exit_code == 1
    assert "❌ cue 1: end 2.000 <= start 3.000" in result.stdout


def test_cli_config_hides_api_key(monkeypatch) -> None:
    monkeypatch.setenv("CAPTIONSYNC_OPENAI_API_KEY", "sk-secret")

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["openai_api_key_set"] is True
    assert "sk-secret" not in result.stdout


def test_cli_doctor_json() -> None:
    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["doctor", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["features"]["text_captions"] is True
    assert "srt" in data["supported_formats"]


def test_cli_audio_with_stub_services(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CAPTIONSYNC_STUB_SERVICES", "true")
    audio = tmp_path / "clip.mp3"
    audio.write_bytes(b"not really audio")

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["audio", str(audio), "-f", "txt"])

    assert result.exit_code == 0
    assert result.stdout == "This is a stub transcript.\n"


def test_cli_check_reports_index_gap(tmp_path: Path) -> None:
    srt = "1\n00:00:00,000 --> 00:00:02,000\nOne\n\n3\n00:00:02,000 --> 00:00:04,000\nTwo\n"
    source = _write(tmp_path, "gap.srt", srt)

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["check", source])

    assert result.exit_code == 1
    assert "❌ cue 2: index 3 (expected 2)" in result.stdout


def test_cli_text_empty_input_prints_nothing(tmp_path: Path) -> None:
    source = _write(tmp_path, "empty.txt", "   \n")

    runner = CliRunner(mix_stderr=False)
    result = runner.invoke(app, ["text", source])

    assert result.exit_code == 0
    assert result.stdout == ""
