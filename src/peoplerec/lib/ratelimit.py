"""Per-identity request rate limiting."""

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class TTLRateLimiter:
    """Fixed-window counter per key, held in memory.

    Each key gets a window of ``window_seconds`` starting at its first hit.
    Expired windows are evicted on every call, so memory is bounded by the
    number of keys active within one window.
    """

    max_hits: int = 30
    window_seconds: float = 60.0
    clock: Callable[[], float] = time.monotonic
    _windows: dict[str, tuple[float, int]] = field(default_factory=dict, repr=False)

    def hit(self, key: str) -> bool:
        """Record a request for *key*; ``False`` once the limit is exceeded."""
        now = self.clock()
        self.evict_expired(now)

        started, count = self._windows.get(key, (now, 0))
        count += 1
        self._windows[key] = (started, count)
        return count <= self.max_hits

    def evict_expired(self, now: float | None = None) -> None:
        now = self.clock() if now is None else now
        expired = [
            key for key, (started, _) in self._windows.items()
            if now - started >= self.window_seconds
        ]
        for key in expired:
            del self._windows[key]

    def __len__(self) -> int:
        return len(self._windows)
