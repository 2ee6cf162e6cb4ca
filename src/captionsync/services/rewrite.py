"""
Caption text rewrite service.

Turns narrative text into caption-friendly text using a Large Language Model
(LLM). The output is ordinary input text for the caption pipeline.

Design principles:
- Vendor isolation: OpenAI (or any LLM provider) is hidden behind a protocol.
- Single responsibility: this module ONLY rewrites text.
- No retries: a failing LLM call propagates to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from captionsync.config.settings import Settings
from captionsync.exceptions import CaptionSyncError
from captionsync.prompts.base import PromptSpec
from captionsync.prompts.captions import CAPTION_REWRITE_PROMPT
from captionsync.utils.checks import require_module
from captionsync.utils.logging import get_logger

log = get_logger(__name__)


class TextRewriter(Protocol):
    def rewrite(
        self,
        text: str,
        *,
        style: str,
        target_duration_seconds: float,
        language: str | None = None,
    ) -> str: ...


# ---------------------------------------------------------------------
# LLM Client Protocol (keeps OpenAI isolated & mockable)
# ---------------------------------------------------------------------
class LLMClient(Protocol):
    def generate(
        self,
        *,
        system: str,
        prompt: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str: ...


# ---------------------------------------------------------------------
# OpenAI Client (concrete implementation)
# ---------------------------------------------------------------------
class OpenAIClient:
    def __init__(self, api_key: str):
        openai = require_module("openai")

        self._client = openai.OpenAI(api_key=api_key)

    def generate(
        self,
        *,
        system: str,
        prompt: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        response = self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )

        return (response.choices[0].message.content or "").strip()


class StubRewriteService:
    """
    Offline rewrite: returns the input unchanged.
    """

    def rewrite(self, text, *, style, target_duration_seconds, language=None):
        log.info("[STUB] Rewrite skipped (%d chars)", len(text))
        return text


# ---------------------------------------------------------------------
# Rewrite Service
# ---------------------------------------------------------------------
@dataclass
class RewriteService:
    """
    Responsible ONLY for rewriting caption text.
    No pipeline knowledge.
    """

    llm: LLMClient
    model: str = "gpt-4"
    temperature: float = 0.7
    max_tokens: int = 2000
    prompt: PromptSpec = CAPTION_REWRITE_PROMPT

    def rewrite(
        self,
        text: str,
        *,
        style: str,
        target_duration_seconds: float,
        language: str | None = None,
    ) -> str:
        log.info("Rewriting caption text with model=%s style=%s", self.model, style)

        rendered_prompt = self.prompt.render(
            text=text,
            style=style,
            target_duration=f"{target_duration_seconds:g}",
            language=language,
        )

        rewritten = self.llm.generate(
            system=self.prompt.system,
            prompt=rendered_prompt,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        if not rewritten.strip():
            raise CaptionSyncError("LLM returned empty caption text")

        log.info("Rewrite produced %d chars (from %d)", len(rewritten), len(text))
        return rewritten


# ---------------------------------------------------------------------
# Factory helper (used by the CLI)
# ---------------------------------------------------------------------
def create_rewrite_service(settings: Settings) -> Optional[TextRewriter]:
    if settings.stub_services:
        log.warning("[STUB] Using StubRewriteService for caption rewriting.")
        return StubRewriteService()

    api_key = settings.api_key()
    if not api_key:
        log.warning("Rewrite service: none (set CAPTIONSYNC_OPENAI_API_KEY to enable)")
        return None

    return RewriteService(
        llm=OpenAIClient(api_key=api_key),
        model=settings.rewrite_model,
        temperature=settings.rewrite_temperature,
        max_tokens=settings.rewrite_max_tokens,
    )
