from checkmate.resilience.breaker import (
    BreakerMetrics,
    CircuitBreaker,
    CircuitBreakers,
    CircuitState,
)
from checkmate.resilience.compose import execute_with_resilience
from checkmate.resilience.retry import RetryPolicy, default_should_retry, with_retry
from checkmate.resilience.timeout import with_timeout

__all__ = [
    "BreakerMetrics",
    "CircuitBreaker",
    "CircuitBreakers",
    "CircuitState",
    "RetryPolicy",
    "default_should_retry",
    "execute_with_resilience",
    "with_retry",
    "with_timeout",
]
