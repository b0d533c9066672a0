"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, remote (Java) exception type mapping for
management-service error payloads, and message-based heuristics as a
fallback.
"""
from __future__ import annotations

from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .realm_error import RealmError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from a transport exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


# Simple class names of javax.management / java.lang exceptions reported by the
# management service in its error payloads.
_REMOTE_TYPE_MAP: Dict[str, ErrorCode] = {
    "InstanceNotFoundException": ErrorCode.NOT_FOUND,
    "AttributeNotFoundException": ErrorCode.NOT_FOUND,
    "MalformedObjectNameException": ErrorCode.VALIDATION,
    "IllegalArgumentException": ErrorCode.VALIDATION,
    "InvalidAttributeValueException": ErrorCode.VALIDATION,
    "ReflectionException": ErrorCode.UNSUPPORTED,
    "NoSuchMethodException": ErrorCode.UNSUPPORTED,
    "UnsupportedOperationException": ErrorCode.UNSUPPORTED,
    "SecurityException": ErrorCode.AUTH,
    "AccessControlException": ErrorCode.AUTH,
    "MBeanException": ErrorCode.SERVER_ERROR,
    "RuntimeMBeanException": ErrorCode.SERVER_ERROR,
    "RuntimeOperationsException": ErrorCode.SERVER_ERROR,
    "InvalidCursorException": ErrorCode.VALIDATION,
}


def classify_remote_type(error_type: Optional[str]) -> Optional[ErrorCode]:
    """Map a remote exception class name (qualified or simple) to an ``ErrorCode``.

    Returns ``None`` when the type is unknown so callers can fall back to
    status or message heuristics.
    """
    if not error_type:
        return None
    simple = error_type.rsplit(".", 1)[-1]
    return _REMOTE_TYPE_MAP.get(simple)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without status or remote type."""
    PATTERN_GROUPS = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.AUTH, ("unauthorized", "forbidden", "authentication", "credentials")),
        (ErrorCode.UNSUPPORTED, ("unsupported", "not supported", "no such operation")),
        (ErrorCode.NOT_FOUND, ("not found", "does not exist", "no such attribute")),
        (ErrorCode.UNAVAILABLE, ("unavailable", "connection refused")),
        (ErrorCode.VALIDATION, ("invalid", "malformed")),
        (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
    )
    for code, patterns in PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. RealmError passthrough.
        2. Timeout exceptions (stdlib and httpx).
        3. httpx connection failures.
        4. HTTP status mapping.
        5. Remote exception type (``error_type`` attribute).
        6. Substring heuristics.
        7. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, RealmError):
        return exc.code
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, (ConnectionError, httpx.TransportError)):
        return ErrorCode.UNAVAILABLE
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    remote = classify_remote_type(getattr(exc, "error_type", None))
    if remote is not None:
        return remote
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


RETRYABLE_CODES = frozenset({ErrorCode.TRANSIENT, ErrorCode.TIMEOUT, ErrorCode.UNAVAILABLE})


def is_retryable(code: ErrorCode) -> bool:
    """Return True when ``code`` denotes a failure worth retrying from scratch."""
    return code in RETRYABLE_CODES


__all__ = [
    "classify_exception",
    "classify_remote_type",
    "is_retryable",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
