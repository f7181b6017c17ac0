"""
RESILIENCE - Circuit breaker and retry with exponential backoff

Wraps calls to external analysis providers:
1. CircuitBreaker stops calling a provider after repeated failures and
   lets one trial call through once the reset timeout has passed.
2. retry_async() retries retryable errors (network, timeout, 5xx, 429)
   with exponential backoff (base, base*2, base*4 ... capped).
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Dict, TypeVar

import groq
import httpx

from .errors import CircuitOpenError, ProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


class CircuitBreaker:
    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.clock = clock
        self.state = CircuitState.CLOSED
        self.failures = 0
        self.last_failure_time = 0.0

    async def call(self, operation: Callable[[], Awaitable[T]]) -> T:
        if self.state == CircuitState.OPEN:
            if self.clock() - self.last_failure_time > self.reset_timeout:
                self.state = CircuitState.HALF_OPEN
                self.failures = 0
                logger.info(f"Circuit '{self.name}' half-open, allowing trial call")
            else:
                raise CircuitOpenError(self.name)

        try:
            result = await operation()
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _on_success(self):
        self.failures = 0
        self.state = CircuitState.CLOSED

    def _on_failure(self):
        self.failures += 1
        self.last_failure_time = self.clock()
        if self.failures >= self.failure_threshold and self.state != CircuitState.OPEN:
            self.state = CircuitState.OPEN
            logger.warning(f"Circuit '{self.name}' opened after {self.failures} failures")

    def snapshot(self) -> Dict:
        return {
            "state": self.state.value,
            "failures": self.failures,
            "lastFailureTime": self.last_failure_time,
        }


def is_retryable_error(error: Exception) -> bool:
    """Network errors, timeouts, 5xx and rate limiting are worth retrying."""
    if isinstance(error, (httpx.TransportError, groq.APIConnectionError, asyncio.TimeoutError)):
        return True
    status = getattr(error, "status_code", None)
    if status is None and isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
    if status is None:
        return False
    return status == 429 or 500 <= status < 600


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    backoff_multiplier: float = 2.0,
    should_retry: Callable[[Exception], bool] = is_retryable_error,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run operation, retrying per should_retry. The last error is re-raised."""
    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if attempt == max_attempts or not should_retry(e):
                raise
            delay = min(base_delay * (backoff_multiplier ** (attempt - 1)), max_delay)
            logger.warning(f"Attempt {attempt} failed ({e}), retrying in {delay}s...")
            await sleep(delay)
    # max_attempts < 1
    raise ProviderError("retry", "no attempts made")
