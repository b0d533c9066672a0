"""Retry policy for idempotent remote reads.

Purpose
-------
Repeat an attribute read that failed for a transient reason (agent restarting,
timeout, HTTP 503) before surfacing the error. Only reads go through here:
cursor operations such as ``advance`` change server state and are issued once.

Retry decision
--------------
A :class:`RealmError` is retried when it is flagged ``retryable`` or its code
is one of the transient codes known to :func:`is_retryable`. Anything else,
and any non-``RealmError`` exception, propagates immediately.

Backoff
-------
Delays start at ``initial_delay`` and grow by ``multiplier`` up to
``max_delay``. An optional ``on_retry`` hook is told about every retry before
the pause, which is how transports emit their ``*.retry`` log events.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, TypeVar

from ..errors import RealmError, is_retryable

T = TypeVar("T")

# (next_attempt, delay_seconds, error) -> None
RetryHook = Callable[[int, float, RealmError], None]


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    initial_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 5.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("RetryConfig.max_attempts must be at least 1")

    def delays(self) -> Iterator[float]:
        """Yield the pause before each retry (``max_attempts - 1`` values)."""
        delay = self.initial_delay
        for _ in range(self.max_attempts - 1):
            yield min(delay, self.max_delay)
            delay *= self.multiplier


DEFAULT_RETRY_CONFIG = RetryConfig()
NO_RETRY = RetryConfig(max_attempts=1)


def should_retry(error: RealmError) -> bool:
    return error.retryable or is_retryable(error.code)


def call_with_retry(
    func: Callable[[], T],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    *,
    on_retry: Optional[RetryHook] = None,
) -> T:
    """Call ``func`` until it succeeds, fails permanently, or attempts run out.

    The last error is re-raised unchanged once ``config.max_attempts`` calls
    have failed.
    """
    delays = config.delays()
    attempt = 1
    while True:
        try:
            return func()
        except RealmError as exc:
            delay = next(delays, None)
            if delay is None or not should_retry(exc):
                raise
            attempt += 1
            if on_retry is not None:
                on_retry(attempt, delay, exc)
            time.sleep(delay)


__all__ = [
    "RetryConfig",
    "RetryHook",
    "DEFAULT_RETRY_CONFIG",
    "NO_RETRY",
    "call_with_retry",
    "should_retry",
]
