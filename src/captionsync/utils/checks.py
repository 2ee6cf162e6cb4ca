from __future__ import annotations

import importlib
import math
from typing import Any

from captionsync.exceptions import (
    DependencyMissingError,
    InputTooLargeError,
    InvalidConfigError,
)


def require_module(module: str, *, package: str | None = None) -> Any:
    try:
        return importlib.import_module(module)
    except ImportError as exc:
        raise DependencyMissingError(
            f"Missing required dependency '{package or module}'. Install it and try again."
        ) from exc


def require_positive_number(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigError(f"{name} must be a number, got {value!r}.")
    if not math.isfinite(value) or value <= 0:
        raise InvalidConfigError(f"{name} must be greater than 0, got {value!r}.")
    return float(value)


def require_positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigError(f"{name} must be an integer, got {value!r}.")
    if value < 1:
        raise InvalidConfigError(f"{name} must be at least 1, got {value!r}.")
    return value


def require_within(name: str, size: int, limit: int | None) -> None:
    """Fail fast when `size` exceeds `limit`; a falsy limit disables the check."""
    if limit and size > limit:
        raise InputTooLargeError(f"{name} too large ({size} > {limit}).")
