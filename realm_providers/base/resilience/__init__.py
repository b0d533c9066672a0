"""Resilience helpers (retry policy) used by transports."""

from .retry import DEFAULT_RETRY_CONFIG, NO_RETRY, RetryConfig, RetryHook, call_with_retry, should_retry

__all__ = ["RetryConfig", "RetryHook", "DEFAULT_RETRY_CONFIG", "NO_RETRY", "call_with_retry", "should_retry"]
