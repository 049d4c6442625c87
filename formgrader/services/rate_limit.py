from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Protocol

from .errors import RateLimited


class SubmissionLimiter(Protocol):
    def consume(self, key: str) -> None: ...


@dataclass
class _Window:
    started_at: float
    count: int = 0


class MemoryRateLimiter:
    """Fixed-window counter per key, kept in process memory.

    ``consume`` raises :class:`RateLimited` once ``points`` submissions were
    made from the same key within ``duration`` seconds.
    """

    def __init__(
        self,
        points: int,
        duration: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.points = points
        self.duration = duration
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def consume(self, key: str) -> None:
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.duration:
                self._evict_expired(now)
            window = self._windows.get(key)
            if window is None or now - window.started_at >= self.duration:
                window = _Window(started_at=now)
                self._windows[key] = window
            if window.count >= self.points:
                raise RateLimited(retry_after=window.started_at + self.duration - now)
            window.count += 1

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, window in self._windows.items() if now - window.started_at >= self.duration
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now
