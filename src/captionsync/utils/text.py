from __future__ import annotations

from captionsync.exceptions import InvalidInputError

_QUOTE_MAP = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "„": '"',
        "‘": "'",
        "’": "'",
        "‚": "'",
    }
)


def normalize_text(text: str) -> str:
    """Collapse whitespace runs to single spaces and straighten curly quotes."""
    if not isinstance(text, str):
        raise InvalidInputError(
            f"Caption text must be a string, got {type(text).__name__}."
        )
    return " ".join(text.translate(_QUOTE_MAP).split()).strip()


def word_count(text: str) -> int:
    return len(text.split())
