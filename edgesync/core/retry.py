"""
Bounded retry with exponential backoff.

Every retrying call site (uploads, CDN purge batches, EdgeOne purge tasks)
goes through with_retry(). It never raises the operation's error; callers get
a RetryResult and decide whether a failure is fatal (result.unwrap()) or
should be logged and skipped.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from .constants import DEFAULT_BACKOFF_FACTOR, DEFAULT_INITIAL_DELAY, DEFAULT_MAX_ATTEMPTS
from .logging import debug_log

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try an operation and how long to wait in between."""
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    initial_delay: float = DEFAULT_INITIAL_DELAY  # seconds

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (1-based)."""
        return self.initial_delay * self.backoff_factor ** (attempt - 1)


@dataclass
class RetryResult(Generic[T]):
    """Outcome of a retried operation."""
    value: Optional[T] = None
    error: Optional[Exception] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the final error."""
        if self.error is not None:
            raise self.error
        return self.value


async def with_retry(
    policy: RetryPolicy,
    operation: Callable[[], Awaitable[T]],
    description: str = "",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> RetryResult[T]:
    """
    Run `operation` until it succeeds or the policy's attempts are used up.

    Args:
        policy: Attempt count and backoff
        operation: Zero-argument callable returning an awaitable (called once per attempt)
        description: Label for debug logging
        sleep: Awaitable sleep function (tests pass a no-op)

    Returns:
        RetryResult with either value or the last error set
    """
    last_error: Optional[Exception] = None
    for attempt in range(1, policy.max_attempts + 1):
        try:
            value = await operation()
            return RetryResult(value=value, attempts=attempt)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            last_error = e
            if attempt < policy.max_attempts:
                delay = policy.delay_for(attempt)
                debug_log(f"retry {description or 'operation'}: attempt {attempt} failed ({e}), waiting {delay:.1f}s")
                await sleep(delay)

    debug_log(f"retry {description or 'operation'}: giving up after {policy.max_attempts} attempts")
    return RetryResult(error=last_error, attempts=policy.max_attempts)
