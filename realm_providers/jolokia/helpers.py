"""Request/response helpers for the Jolokia JMX-over-HTTP protocol.

Jolokia accepts JSON request objects posted to the agent URL and answers with
a JSON object carrying either ``value`` (success, ``status`` 200) or
``error_type``/``error`` (failure, ``status`` != 200). Bean references are
serialized as ``{"objectName": "<domain>:<key>=<value>,..."}``.

These helpers are pure: no I/O, no logging.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..base.errors import ErrorCode, RemoteCallError, classify_remote_type, is_retryable
from ..base.handles import OBJECT_NAME_KEY, Handle, RemoteArg, decode_handles, signature


def build_read_request(handle: Handle, attribute: str) -> Dict[str, Any]:
    return {"type": "read", "mbean": handle.object_name, "attribute": attribute}


def build_exec_request(handle: Handle, operation: str, args: Sequence[RemoteArg]) -> Dict[str, Any]:
    """Return an ``exec`` request with an explicit operation signature.

    The signature disambiguates overloaded operations (``isMember`` has a
    two- and a three-argument form).
    """
    return {
        "type": "exec",
        "mbean": handle.object_name,
        "operation": f"{operation}({','.join(signature(args))})",
        "arguments": [a.wire_value() for a in args],
    }


def build_version_request() -> Dict[str, Any]:
    return {"type": "version"}


def response_error(
    payload: Any,
    *,
    operation: Optional[str] = None,
) -> Optional[RemoteCallError]:
    """Return a ``RemoteCallError`` for a failed Jolokia response, or ``None`` on success."""
    if not isinstance(payload, Mapping):
        return RemoteCallError(
            code=ErrorCode.VALIDATION,
            message=f"Unexpected Jolokia response of type {type(payload).__name__}",
            operation=operation,
        )
    status = payload.get("status")
    if status == 200:
        return None
    error_type = payload.get("error_type")
    message = str(payload.get("error") or f"Jolokia request failed with status {status}")
    code = classify_remote_type(error_type)
    if code is None:
        code = _STATUS_CODES.get(status, ErrorCode.UNKNOWN) if isinstance(status, int) else ErrorCode.UNKNOWN
    return RemoteCallError(
        code=code,
        message=message,
        operation=operation,
        retryable=is_retryable(code),
    )


_STATUS_CODES = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    500: ErrorCode.SERVER_ERROR,
    503: ErrorCode.UNAVAILABLE,
}


__all__ = [
    "OBJECT_NAME_KEY",
    "build_read_request",
    "build_exec_request",
    "build_version_request",
    "decode_handles",
    "response_error",
]
