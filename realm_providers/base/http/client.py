"""Shared HTTP client pool for transports.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances so each
    session does not allocate its own connection pool. Timeouts derive from
    :func:`get_timeout_config` unless the caller passes an explicit value.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Lifecycle & cleanup:
    - Clients are cached by ``(base_url, verify, timeout)``. Credentials are
      not part of the key; transports pass ``auth`` per request.
    - All clients are closed at interpreter exit via ``atexit``. Tests may
      call :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[str, bool, float], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: str, *, verify: bool = True, timeout: Optional[float] = None) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL.

    Parameters:
        base_url: Endpoint URL the client is bound to; requests use relative paths.
        verify: Whether TLS certificates are verified.
        timeout: Per-request timeout in seconds; defaults to
            ``get_timeout_config().http_timeout_seconds``.

    Returns:
        A reusable ``httpx.Client`` instance.
    """
    cfg = get_timeout_config()
    read_timeout = float(timeout) if timeout is not None else cfg.http_timeout_seconds
    key = (base_url, verify, read_timeout)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        client = httpx.Client(
            base_url=base_url,
            verify=verify,
            timeout=httpx.Timeout(read_timeout, connect=cfg.connect_timeout_seconds),
        )
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except Exception:  # nosec B110 - best-effort shutdown; close errors are not actionable
                pass
        _CLIENTS.clear()


atexit.register(close_all_clients)


__all__ = ["get_httpx_client", "close_all_clients"]
