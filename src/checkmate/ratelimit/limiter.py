"""Tiered and operation-scoped fixed-window rate limiting."""

import logging
import math
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from checkmate.data import Tier
from checkmate.errors import RateLimited
from checkmate.ratelimit.store import CounterStore, MemoryCounterStore, RateLimitEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimit:
    """``max_requests`` allowed per ``window_seconds``."""

    window_seconds: float
    max_requests: int


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a single rate-limit check."""

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after: int | None = None


# Expensive external calls are bounded regardless of caller tier.
OPERATION_LIMITS: dict[str, RateLimit] = {
    "transcribe": RateLimit(window_seconds=60, max_requests=120),
    "fact_check": RateLimit(window_seconds=60, max_requests=60),
}


def default_tiers(window_seconds: float = 900, max_requests: int = 100) -> dict[Tier, RateLimit]:
    """Tier limits derived from the authenticated allowance.

    Anonymous callers get 20% of it, premium callers five times it.
    """
    return {
        Tier.ANONYMOUS: RateLimit(window_seconds, math.floor(max_requests * 0.2)),
        Tier.AUTHENTICATED: RateLimit(window_seconds, max_requests),
        Tier.PREMIUM: RateLimit(window_seconds, max_requests * 5),
    }


def resolve_identity(user_id: str | None = None, client_address: str | None = None) -> str:
    """Rate-limit identity: the authenticated subject, else the network address."""
    if user_id:
        return f"user:{user_id}"
    return f"ip:{client_address or 'unknown'}"


def client_address_from_headers(headers: Mapping[str, str]) -> str:
    """First hop of ``x-forwarded-for``, else ``x-real-ip``, else ``unknown``."""
    lowered = {k.lower(): v for k, v in headers.items()}
    forwarded = lowered.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return lowered.get("x-real-ip") or "unknown"


class RateLimiter:
    """Fixed-window limiter over a pluggable counter store.

    The primary store (usually Redis) is tried first. If it raises, the
    check falls back to a process-local :class:`MemoryCounterStore`; limits
    then hold per process only.

    Args:
        store: Shared counter store, or None to use only the local store.
        fallback: Local store used when ``store`` is absent or failing.
        tiers: Per-tier limits.
        operation_limits: Per-operation limits independent of tier.
        clock: Wall-clock time source in seconds.
    """

    def __init__(
        self,
        store: CounterStore | None = None,
        *,
        fallback: MemoryCounterStore | None = None,
        tiers: dict[Tier, RateLimit] | None = None,
        operation_limits: dict[str, RateLimit] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._fallback = fallback or MemoryCounterStore(clock=clock)
        self._tiers = tiers or default_tiers()
        self._operation_limits = operation_limits or dict(OPERATION_LIMITS)
        self._clock = clock

    def tier_limit(self, tier: Tier) -> RateLimit:
        return self._tiers[tier]

    async def check(self, key: str, limit: RateLimit) -> RateLimitDecision:
        """Count one request against ``key`` and decide whether it is allowed."""
        entry = await self._increment(key, limit.window_seconds)
        now = self._clock()
        allowed = entry.count <= limit.max_requests
        retry_after = None
        if not allowed:
            retry_after = max(0, math.ceil(entry.reset_at - now))
        return RateLimitDecision(
            allowed=allowed,
            limit=limit.max_requests,
            remaining=max(0, limit.max_requests - entry.count),
            reset_at=entry.reset_at,
            retry_after=retry_after,
        )

    async def check_tier(self, identity: str, tier: Tier) -> RateLimitDecision:
        """Check an identity against its tier's general allowance."""
        return await self.check(identity, self._tiers[tier])

    async def enforce_tier(self, identity: str, tier: Tier) -> RateLimitDecision:
        """Like :meth:`check_tier` but raises when the call is rejected.

        Raises:
            RateLimited: Carrying the ``retry_after`` hint.
        """
        decision = await self.check_tier(identity, tier)
        if not decision.allowed:
            logger.info(f"Rate limited {identity} on {tier} allowance")
            raise RateLimited(decision.retry_after or 0, key=identity)
        return decision

    async def check_operation(self, identity: str, operation: str) -> RateLimitDecision:
        """Check an identity against an operation-scoped limit.

        Raises:
            KeyError: If ``operation`` has no configured limit.
        """
        return await self.check(f"{identity}:{operation}", self._operation_limits[operation])

    async def enforce_operation(self, identity: str, operation: str) -> RateLimitDecision:
        """Like :meth:`check_operation` but raises when the call is rejected.

        Raises:
            RateLimited: Carrying the ``retry_after`` hint.
        """
        decision = await self.check_operation(identity, operation)
        if not decision.allowed:
            logger.info(f"Rate limited {identity} on '{operation}'")
            raise RateLimited(decision.retry_after or 0, key=f"{identity}:{operation}")
        return decision

    async def _increment(self, key: str, window_seconds: float) -> RateLimitEntry:
        if self._store is not None:
            try:
                return await self._store.increment(key, window_seconds)
            except Exception as e:
                logger.warning(f"Shared rate-limit store unavailable, using local counters: {e}")
        return await self._fallback.increment(key, window_seconds)
