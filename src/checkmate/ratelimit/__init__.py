from checkmate.ratelimit.limiter import (
    OPERATION_LIMITS,
    RateLimit,
    RateLimitDecision,
    RateLimiter,
    client_address_from_headers,
    default_tiers,
    resolve_identity,
)
from checkmate.ratelimit.redis_store import RedisCounterStore
from checkmate.ratelimit.store import CounterStore, MemoryCounterStore, RateLimitEntry

__all__ = [
    "OPERATION_LIMITS",
    "CounterStore",
    "MemoryCounterStore",
    "RateLimit",
    "RateLimitDecision",
    "RateLimitEntry",
    "RateLimiter",
    "RedisCounterStore",
    "client_address_from_headers",
    "default_tiers",
    "resolve_identity",
]
