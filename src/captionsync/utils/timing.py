from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator


Clock = Callable[[], float]


class StepTimer:
    """Wall time per named pipeline step, accumulated across repeated steps."""

    def __init__(self, *, clock: Clock = time.perf_counter) -> None:
        self._clock = clock
        self.durations: Dict[str, float] = {}

    @contextmanager
    def step(self, name: str) -> Iterator[None]:
        started = self._clock()
        try:
            yield
        finally:
            elapsed = self._clock() - started
            self.durations[name] = self.durations.get(name, 0.0) + elapsed

    @property
    def total_s(self) -> float:
        return sum(self.durations.values())

    def summary(self) -> str:
        parts = [f"{name}={seconds:.4f}s" for name, seconds in self.durations.items()]
        parts.append(f"total={self.total_s:.4f}s")
        return ", ".join(parts)
