from __future__ import annotations

import inspect

import pytest
import typer.testing


def _patch_clirunner() -> None:
    if "mix_stderr" in inspect.signature(typer.testing.CliRunner).parameters:
        return

    class PatchedCliRunner(typer.testing.CliRunner):
        def __init__(self, *args, **kwargs):  # noqa: ANN002, ANN003
            kwargs.pop("mix_stderr", None)
            super().__init__(*args, **kwargs)

    typer.testing.CliRunner = PatchedCliRunner


_patch_clirunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path) -> None:
    for key in (
        "CAPTIONSYNC_OPENAI_API_KEY",
        "CAPTIONSYNC_STUB_SERVICES",
        "CAPTIONSYNC_WORDS_PER_MINUTE",
        "CAPTIONSYNC_MAX_WORDS_PER_CUE",
        "CAPTIONSYNC_FORMAT",
        "CAPTIONSYNC_TRANSCRIPTION_BACKEND",
    ):
        monkeypatch.delenv(key, raising=False)
    # Keep a stray .env in the working directory out of Settings().
    monkeypatch.chdir(tmp_path)
