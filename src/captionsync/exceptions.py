from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class ErrorCategory(str, Enum):
    CONFIG = "config"
    DEPENDENCY = "dependency"
    RUNTIME = "runtime"
    INPUT = "input"


DEFAULT_EXIT_CODES: dict[ErrorCategory, int] = {
    ErrorCategory.RUNTIME: 1,
    ErrorCategory.CONFIG: 2,
    ErrorCategory.DEPENDENCY: 3,
    ErrorCategory.INPUT: 4,
}

CATEGORY_LABELS: dict[ErrorCategory, str] = {
    ErrorCategory.CONFIG: "Configuration error",
    ErrorCategory.DEPENDENCY: "Dependency error",
    ErrorCategory.RUNTIME: "Runtime error",
    ErrorCategory.INPUT: "Input error",
}


@dataclass
class CaptionSyncError(Exception):
    """Base exception for captionsync; the category picks the CLI exit code."""

    message: str
    category: ErrorCategory = ErrorCategory.RUNTIME
    exit_code: int | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)
        if self.exit_code is None:
            self.exit_code = DEFAULT_EXIT_CODES.get(self.category, 1)

    def label(self) -> str:
        return CATEGORY_LABELS.get(self.category, "Error")


class _CategorizedError(CaptionSyncError):
    """Subclasses fix their category; callers pass only the message."""

    fixed_category: ClassVar[ErrorCategory] = ErrorCategory.RUNTIME

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        super().__init__(message, category=self.fixed_category, exit_code=exit_code)


class DependencyMissingError(_CategorizedError):
    """Raised when an optional library (openai, faster-whisper) is not installed."""

    fixed_category = ErrorCategory.DEPENDENCY


class ConfigurationError(_CategorizedError):
    """Raised when configuration is invalid or a collaborator is not set up."""

    fixed_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigurationError):
    """Raised before any processing when a pacing parameter is out of range."""


class InvalidInputError(_CategorizedError):
    """Raised when request input is missing or has the wrong type."""

    fixed_category = ErrorCategory.INPUT


class InputTooLargeError(InvalidInputError):
    """Raised when input exceeds a configured ceiling."""
