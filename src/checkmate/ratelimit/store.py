"""Fixed-window counter stores."""

import logging
import random
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

SWEEP_PROBABILITY = 0.01


@dataclass(frozen=True)
class RateLimitEntry:
    """Counter state for one key after an increment. ``reset_at`` is epoch seconds."""

    count: int
    reset_at: float


class CounterStore(Protocol):
    """Interface for atomic increment-and-read counters."""

    async def increment(self, key: str, window_seconds: float) -> RateLimitEntry:
        """Increment the counter for ``key`` within its current window.

        Args:
            key: Counter key, typically ``{identity}:{operation}``.
            window_seconds: Window length.

        Returns:
            The entry after the increment.
        """
        ...


class MemoryCounterStore:
    """Process-local counters guarded by a lock.

    A key whose window has elapsed is replaced by a fresh entry, never
    merged. Expired keys are swept probabilistically (about 1% of calls) so
    the map does not grow without bound.

    Args:
        clock: Wall-clock time source in seconds.
        rng: Random source for the sweep decision.
        sweep_probability: Chance of a sweep on each increment.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.time,
        rng: Callable[[], float] = random.random,
        sweep_probability: float = SWEEP_PROBABILITY,
    ) -> None:
        self._clock = clock
        self._rng = rng
        self._sweep_probability = sweep_probability
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    async def increment(self, key: str, window_seconds: float) -> RateLimitEntry:
        now = self._clock()
        with self._lock:
            if self._rng() < self._sweep_probability:
                self._sweep(now)
            entry = self._entries.get(key)
            if entry is None or now >= entry.reset_at:
                entry = RateLimitEntry(count=1, reset_at=now + window_seconds)
            else:
                entry = RateLimitEntry(count=entry.count + 1, reset_at=entry.reset_at)
            self._entries[key] = entry
            return entry

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _sweep(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if now >= e.reset_at]
        for k in expired:
            del self._entries[k]
        if expired:
            logger.debug(f"Swept {len(expired)} expired rate-limit entries")
