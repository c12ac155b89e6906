"""Circuit breaker guarding a single external dependency."""

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from checkmate.errors import CircuitOpen
from checkmate.resilience.timeout import cancelled_by_timeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(StrEnum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half-open"


@dataclass(frozen=True)
class BreakerMetrics:
    """Point-in-time snapshot of a breaker's counters."""

    name: str
    state: CircuitState
    failure_count: int
    success_count: int
    last_failure_at: float | None


class CircuitBreaker:
    """Closed/open/half-open breaker shared by every request using a dependency.

    In ``closed`` consecutive failures accumulate and a success resets them;
    reaching ``failure_threshold`` opens the circuit. While ``open`` every
    call fails fast with :class:`CircuitOpen` until ``timeout`` seconds have
    passed since the last failure. The next call then runs as a half-open
    probe; only one probe is in flight at a time. ``success_threshold``
    probe successes close the circuit, any probe failure reopens it.

    Counters are guarded by a lock so the breaker can be shared across
    threads as well as tasks.

    Args:
        name: Dependency name, used in errors and logs.
        failure_threshold: Consecutive failures that open the circuit.
        success_threshold: Half-open successes that close it again.
        timeout: Seconds to stay open before allowing a probe.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        name: str,
        *,
        failure_threshold: int = 5,
        success_threshold: int = 2,
        timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self._failure_threshold = failure_threshold
        self._success_threshold = success_threshold
        self._timeout = timeout
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_at: float | None = None
        self._probe_in_flight = False

    @property
    def state(self) -> CircuitState:
        with self._lock:
            return self._state

    async def execute(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run ``fn()`` if the circuit admits it.

        Errors raised by ``fn`` and expiry of an enclosing
        :func:`with_timeout` count as failures. Any other cancellation only
        frees the probe slot.

        Raises:
            CircuitOpen: Without calling ``fn`` when the circuit is open.
        """
        probe = self._admit()
        try:
            result = await fn()
        except Exception:
            self._on_failure(probe)
            raise
        except BaseException as e:
            if isinstance(e, asyncio.CancelledError) and cancelled_by_timeout(e):
                self._on_failure(probe)
            else:
                self._release(probe)
            raise
        self._on_success(probe)
        return result

    def metrics(self) -> BreakerMetrics:
        with self._lock:
            return BreakerMetrics(
                name=self.name,
                state=self._state,
                failure_count=self._failure_count,
                success_count=self._success_count,
                last_failure_at=self._last_failure_at,
            )

    def reset(self) -> None:
        """Force the circuit closed and clear counters."""
        with self._lock:
            self._transition(CircuitState.CLOSED)
            self._failure_count = 0
            self._success_count = 0
            self._last_failure_at = None
            self._probe_in_flight = False

    def _admit(self) -> bool:
        """Decide whether a call may proceed. Returns True for a half-open probe."""
        with self._lock:
            if self._state == CircuitState.CLOSED:
                return False
            if self._state == CircuitState.OPEN:
                elapsed = self._clock() - (self._last_failure_at or 0.0)
                if elapsed < self._timeout:
                    raise CircuitOpen(self.name)
                self._transition(CircuitState.HALF_OPEN)
                self._success_count = 0
            if self._probe_in_flight:
                raise CircuitOpen(self.name)
            self._probe_in_flight = True
            return True

    def _release(self, probe: bool) -> None:
        if probe:
            with self._lock:
                self._probe_in_flight = False

    def _on_success(self, probe: bool) -> None:
        with self._lock:
            if probe:
                self._probe_in_flight = False
            if self._state == CircuitState.HALF_OPEN:
                self._success_count += 1
                if self._success_count >= self._success_threshold:
                    self._transition(CircuitState.CLOSED)
                    self._failure_count = 0
                    self._success_count = 0
            else:
                self._failure_count = 0

    def _on_failure(self, probe: bool) -> None:
        with self._lock:
            if probe:
                self._probe_in_flight = False
            self._failure_count += 1
            self._last_failure_at = self._clock()
            if self._state == CircuitState.HALF_OPEN:
                self._transition(CircuitState.OPEN)
            elif (
                self._state == CircuitState.CLOSED
                and self._failure_count >= self._failure_threshold
            ):
                self._transition(CircuitState.OPEN)

    def _transition(self, state: CircuitState) -> None:
        if state != self._state:
            logger.info(f"Circuit breaker '{self.name}': {self._state} -> {state}")
            self._state = state


@dataclass
class CircuitBreakers:
    """One breaker per protected dependency, owned by the wiring root."""

    tiktok: CircuitBreaker
    twitter: CircuitBreaker
    scraper: CircuitBreaker
    transcription: CircuitBreaker
    fact_check: CircuitBreaker
    sentiment: CircuitBreaker
    analysis: CircuitBreaker

    @classmethod
    def with_defaults(cls, clock: Callable[[], float] = time.monotonic) -> "CircuitBreakers":
        return cls(
            tiktok=CircuitBreaker(
                "tiktok", failure_threshold=5, success_threshold=2, timeout=60.0, clock=clock
            ),
            twitter=CircuitBreaker(
                "twitter", failure_threshold=5, success_threshold=2, timeout=60.0, clock=clock
            ),
            scraper=CircuitBreaker(
                "scraper", failure_threshold=3, success_threshold=2, timeout=30.0, clock=clock
            ),
            transcription=CircuitBreaker(
                "transcription", failure_threshold=3, success_threshold=2, timeout=60.0, clock=clock
            ),
            fact_check=CircuitBreaker(
                "fact_check", failure_threshold=3, success_threshold=2, timeout=180.0, clock=clock
            ),
            sentiment=CircuitBreaker(
                "sentiment", failure_threshold=3, success_threshold=2, timeout=60.0, clock=clock
            ),
            analysis=CircuitBreaker(
                "analysis", failure_threshold=3, success_threshold=2, timeout=60.0, clock=clock
            ),
        )

    def all(self) -> list[CircuitBreaker]:
        return [
            self.tiktok,
            self.twitter,
            self.scraper,
            self.transcription,
            self.fact_check,
            self.sentiment,
            self.analysis,
        ]
