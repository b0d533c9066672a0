"""RemoteInvoker backed by a Jolokia agent (JMX over HTTP/JSON).

Purpose
-------
Talk to the management service's MBean server through a Jolokia agent
deployed on the administration server: attribute reads become ``read``
requests, operations become ``exec`` requests with an explicit signature.

External dependencies
---------------------
- ``httpx`` (through the shared client pool in ``base.http``).

Timeout and retry semantics
---------------------------
- Request timeouts come from ``ConnectionParams.timeout_seconds`` or
  :func:`get_timeout_config`.
- Attribute reads are idempotent and retried on transient failures according
  to ``RetryConfig``. Operations are never retried: ``advance`` moves a
  server-side cursor and repeating it would skip an element.

Failure modes
-------------
- ``connect()`` raises :class:`SessionError` (``AUTH`` or ``UNAVAILABLE``)
  when the agent cannot be reached or rejects the credentials.
- ``get_attribute``/``invoke`` raise :class:`RemoteCallError` for transport
  failures and for error responses, classified by remote exception type.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from ..base.dto import ConnectionParams
from ..base.errors import ErrorCode, RealmError, RemoteCallError, SessionError, classify_exception, is_retryable
from ..base.handles import Handle, RemoteArg, decode_handles
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig, call_with_retry
from .helpers import (
    build_exec_request,
    build_read_request,
    build_version_request,
    response_error,
)


class JolokiaInvoker:
    """``RemoteInvoker`` over a Jolokia agent.

    Safe for concurrent use: every call is an independent HTTP request on a
    thread-safe ``httpx.Client``.
    """

    def __init__(
        self,
        params: ConnectionParams,
        *,
        client: Optional[httpx.Client] = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
    ) -> None:
        self._params = params
        self._client = client or get_httpx_client(
            params.base_url, verify=params.verify_tls, timeout=params.timeout_seconds
        )
        self._auth = (params.username, params.password or "") if params.username else None
        self._logger = get_logger("realm_providers.jolokia")
        self._retry_config = retry_config
        self.agent_version: Optional[str] = None

    @classmethod
    def connect(
        cls,
        params: ConnectionParams,
        *,
        client: Optional[httpx.Client] = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
    ) -> "JolokiaInvoker":
        """Open a session: verify the agent answers and accepts the credentials."""
        invoker = cls(params, client=client, retry_config=retry_config)
        invoker._handshake()
        return invoker

    @property
    def params(self) -> ConnectionParams:
        return self._params

    # ------------------------------------------------------------------
    # RemoteInvoker

    def get_attribute(self, handle: Handle, name: str) -> Any:
        ctx = LogContext(bean=handle.object_name, operation=name)

        def on_retry(attempt: int, delay: float, error: RealmError) -> None:
            normalized_log_event(
                self._logger,
                "attribute.retry",
                ctx,
                phase="retry",
                attempt=attempt,
                error_code=error.code.value,
                level=logging.WARNING,
                delay_seconds=delay,
            )

        return call_with_retry(lambda: self._read_once(handle, name), self._retry_config, on_retry=on_retry)

    def invoke(self, handle: Handle, operation: str, args: Sequence[RemoteArg] = ()) -> Any:
        payload = self._post(build_exec_request(handle, operation, args), operation)
        return decode_handles(payload.get("value"))

    # ------------------------------------------------------------------
    # Internals

    def _read_once(self, handle: Handle, name: str) -> Any:
        payload = self._post(build_read_request(handle, name), name)
        return decode_handles(payload.get("value"))

    def _post(self, body: Dict[str, Any], operation: str) -> Dict[str, Any]:
        try:
            response = self._client.post("", json=body, auth=self._auth, headers=dict(self._params.headers))
        except httpx.HTTPError as exc:
            code = classify_exception(exc)
            raise RemoteCallError(
                code=code,
                message=f"{type(exc).__name__}: {exc}",
                operation=operation,
                retryable=is_retryable(code),
                raw=exc,
            ) from exc
        if response.status_code != 200:
            code = classify_exception(_StatusError(response.status_code))
            raise RemoteCallError(
                code=code,
                message=f"HTTP {response.status_code} from {self._params.base_url}",
                operation=operation,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteCallError(
                code=ErrorCode.VALIDATION,
                message="Jolokia agent returned a non-JSON body",
                operation=operation,
                raw=exc,
            ) from exc
        error = response_error(payload, operation=operation)
        if error is not None:
            raise error
        return payload

    def _handshake(self) -> None:
        ctx = LogContext(bean=self._params.base_url, operation="version")
        try:
            payload = self._post(build_version_request(), "version")
        except RemoteCallError as exc:
            code = ErrorCode.AUTH if exc.code is ErrorCode.AUTH else ErrorCode.UNAVAILABLE
            normalized_log_event(self._logger, "session.error", ctx, phase="connect", error_code=code.value)
            raise SessionError(
                code=code,
                message=f"Cannot open session to {self._params.base_url}: {exc.message}",
                operation="version",
                raw=exc,
            ) from exc
        value = payload.get("value") or {}
        self.agent_version = value.get("agent") if isinstance(value, dict) else None
        normalized_log_event(
            self._logger, "session.open", ctx, phase="connect", agent_version=self.agent_version
        )


class _StatusError(Exception):
    """Carrier used to classify a bare HTTP status through ``classify_exception``."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


__all__ = ["JolokiaInvoker"]
