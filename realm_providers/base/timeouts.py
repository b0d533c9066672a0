"""Timeout configuration for the realm client transports.

The core (resolver, query client, pager) enforces no deadlines; timeouts are
a transport concern. This module centralizes the values transports use so no
ad-hoc numeric literals appear at call sites.

Supported environment variables (all optional, positive floats):
    REALM_TIMEOUT_CONNECT_SECONDS
    REALM_TIMEOUT_HTTP_SECONDS
"""
from __future__ import annotations

from dataclasses import dataclass
import os


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Timeout for establishing the TCP/TLS connection.
        http_timeout_seconds: Timeout for a single request/response exchange.
    """

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 30.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached ``TimeoutConfig``, refreshed when env overrides change."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(
        [
            os.getenv("REALM_TIMEOUT_CONNECT_SECONDS", ""),
            os.getenv("REALM_TIMEOUT_HTTP_SECONDS", ""),
        ]
    )
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float("REALM_TIMEOUT_CONNECT_SECONDS", 10.0),
        http_timeout_seconds=_parse_env_float("REALM_TIMEOUT_HTTP_SECONDS", 30.0),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
