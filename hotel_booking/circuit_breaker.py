from pybreaker import CircuitBreaker

from .config import settings

# Guards database commits: after repeated failures, writes fail fast with 503
persistence_circuit_breaker = CircuitBreaker(
    fail_max=settings.BREAKER_FAIL_MAX,
    reset_timeout=settings.BREAKER_RESET_TIMEOUT,
    name="persistence_breaker",
)
