from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration for captionsync.

    All settings are loaded from environment variables with the
    `CAPTIONSYNC_` prefix and optional `.env` support.

    Values here are defaults only; fields set on a request take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="CAPTIONSYNC_",
        env_file=".env",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Caption pacing
    # ------------------------------------------------------------------
    words_per_minute: float = Field(
        default=150,
        description="Reading speed used to estimate how long each cue stays on screen.",
    )
    max_words_per_cue: int = Field(
        default=8,
        description="Maximum number of words packed into a single cue.",
    )
    format: str = Field(
        default="srt",
        description="Default output format: srt, vtt, json, or txt.",
    )
    language: str = Field(
        default="en",
        description="Language code passed through to collaborators (e.g. en, fr).",
    )

    # ------------------------------------------------------------------
    # Input ceilings (0 disables a ceiling)
    # ------------------------------------------------------------------
    max_input_chars: int | None = Field(
        default=50_000,
        description="Maximum characters of input text accepted per request.",
    )
    max_segments: int | None = Field(
        default=10_000,
        description="Maximum transcript segments accepted per request.",
    )
    max_audio_bytes: int | None = Field(
        default=25 * 1024 * 1024,
        description="Maximum audio payload size sent for transcription.",
    )

    # ------------------------------------------------------------------
    # Text rewrite (LLM)
    # ------------------------------------------------------------------
    target_duration_seconds: float = Field(
        default=300,
        description="Target caption duration for AI-enhanced text.",
    )
    rewrite_style: str = Field(
        default="narrative",
        description="Rewrite style hint: narrative, dialogue, or dramatic.",
    )
    rewrite_model: str = Field(
        default="gpt-4",
        description="LLM model name for caption text rewriting.",
    )
    rewrite_temperature: float = Field(
        default=0.7,
        description="Sampling temperature for caption text rewriting.",
    )
    rewrite_max_tokens: int = Field(
        default=2000,
        description="Maximum tokens for rewritten text.",
    )

    # ------------------------------------------------------------------
    # Transcription
    # ------------------------------------------------------------------
    transcription_backend: str = Field(
        default="openai",
        description="Transcription backend: openai or local (faster-whisper).",
    )
    transcription_model: str = Field(
        default="whisper-1",
        description="OpenAI transcription model name.",
    )
    local_model: str = Field(
        default="base",
        description="faster-whisper model size for local transcription.",
    )

    # ------------------------------------------------------------------
    # Credentials / runtime
    # ------------------------------------------------------------------
    openai_api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key used by the rewrite and transcription services.",
    )
    stub_services: bool = Field(
        default=False,
        description="Use offline stub collaborators instead of OpenAI.",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )

    def api_key(self) -> str | None:
        if self.openai_api_key is None:
            return None
        value = self.openai_api_key.get_secret_value().strip()
        return value or None

    # ------------------------------------------------------------------
    # Public / safe export
    # ------------------------------------------------------------------
    def to_public_dict(self) -> dict:
        """
        Return a dictionary of non-sensitive settings suitable
        for logging or CLI display.
        """
        return {
            "words_per_minute": self.words_per_minute,
            "max_words_per_cue": self.max_words_per_cue,
            "format": self.format,
            "language": self.language,
            "max_input_chars": self.max_input_chars,
            "max_segments": self.max_segments,
            "max_audio_bytes": self.max_audio_bytes,
            "target_duration_seconds": self.target_duration_seconds,
            "rewrite_style": self.rewrite_style,
            "rewrite_model": self.rewrite_model,
            "rewrite_temperature": self.rewrite_temperature,
            "rewrite_max_tokens": self.rewrite_max_tokens,
            "transcription_backend": self.transcription_backend,
            "transcription_model": self.transcription_model,
            "local_model": self.local_model,
            "openai_api_key_set": self.api_key() is not None,
            "stub_services": self.stub_services,
            "log_level": self.log_level,
        }
