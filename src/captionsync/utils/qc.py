from __future__ import annotations

from typing import Sequence

from captionsync.domain.cue import Cue

TIME_TOLERANCE_SECONDS = 0.0005


def cue_stats(cues: Sequence[Cue]) -> dict:
    durations = [cue.duration for cue in cues if cue.end_time >= cue.start_time]
    if not durations:
        return {}
    return {
        "min_seconds": min(durations),
        "max_seconds": max(durations),
        "avg_seconds": sum(durations) / len(durations),
    }


def check_cues(cues: Sequence[Cue], *, gapless: bool = False) -> list[str]:
    """
    Return human-readable violations for a cue sequence (empty list = pass).

    Always checked: 1-based contiguous indices, non-empty text, end > start,
    non-decreasing start times. With `gapless=True` each cue must also start
    exactly where the previous one ended and the first must start at 0.
    """
    violations: list[str] = []
    previous: Cue | None = None

    for position, cue in enumerate(cues, start=1):
        if cue.index != position:
            violations.append(f"cue {position}: index {cue.index} (expected {position})")
        if not cue.text.strip():
            violations.append(f"cue {position}: empty text")
        if cue.start_time < 0:
            violations.append(f"cue {position}: negative start {cue.start_time:.3f}")
        if cue.end_time <= cue.start_time:
            violations.append(
                f"cue {position}: end {cue.end_time:.3f} <= start {cue.start_time:.3f}"
            )
        if previous is not None:
            if cue.start_time < previous.start_time:
                violations.append(
                    f"cue {position}: starts before cue {position - 1} "
                    f"({cue.start_time:.3f} < {previous.start_time:.3f})"
                )
            elif gapless and abs(cue.start_time - previous.end_time) > TIME_TOLERANCE_SECONDS:
                violations.append(
                    f"cue {position}: starts at {cue.start_time:.3f}, "
                    f"previous ended at {previous.end_time:.3f}"
                )
        elif gapless and abs(cue.start_time) > TIME_TOLERANCE_SECONDS:
            violations.append(f"cue 1: starts at {cue.start_time:.3f} (expected 0)")
        previous = cue

    return violations
