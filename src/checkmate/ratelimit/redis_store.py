"""Shared counter store backed by Redis."""

import math
import time
from collections.abc import Callable

import redis.asyncio as redis

from checkmate.ratelimit.store import RateLimitEntry

# Keys outlive their window slightly so a late INCR never lands on a fresh key.
EXPIRY_GRACE_SECONDS = 5


class RedisCounterStore:
    """Fixed-window counters shared by every process pointing at one Redis.

    Each window gets its own key ``{key}:{window_index}``; INCR and EXPIRE
    run in one transaction, so increments are atomic across processes.

    Args:
        client: An ``redis.asyncio.Redis`` client.
        clock: Wall-clock time source in seconds.
    """

    def __init__(
        self,
        client: redis.Redis,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self._clock = clock

    @classmethod
    def from_url(cls, url: str) -> "RedisCounterStore":
        return cls(redis.from_url(url))

    async def increment(self, key: str, window_seconds: float) -> RateLimitEntry:
        now = self._clock()
        window_index = math.floor(now / window_seconds)
        redis_key = f"{key}:{window_index}"

        async with self._client.pipeline(transaction=True) as pipe:
            pipe.incr(redis_key)
            pipe.expire(redis_key, int(math.ceil(window_seconds)) + EXPIRY_GRACE_SECONDS)
            count, _ = await pipe.execute()

        return RateLimitEntry(count=int(count), reset_at=(window_index + 1) * window_seconds)

    async def close(self) -> None:
        await self._client.aclose()
