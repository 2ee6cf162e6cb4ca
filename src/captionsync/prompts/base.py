from __future__ import annotations

from dataclasses import dataclass

from captionsync.exceptions import ConfigurationError


@dataclass(frozen=True)
class PromptSpec:
    system: str
    template: str

    def render(self, *, language: str | None = None, **fields: str) -> str:
        if language:
            fields.setdefault("language_directive", f"Keep the text in {language}.")
        else:
            fields.setdefault("language_directive", "Keep the text in its original language.")
        try:
            return self.template.format(**fields)
        except KeyError as exc:
            raise ConfigurationError(f"Prompt template needs a value for {exc.args[0]!r}.") from exc
