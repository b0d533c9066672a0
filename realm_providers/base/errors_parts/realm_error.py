"""
Structured realm error exception types.

`RealmError` wraps remote-service and transport failures with a normalized
`ErrorCode`. The subclasses separate the four failure kinds callers need to
tell apart: a broken provider discovery chain, an unknown provider name, a
rejected remote call and a failed session bootstrap.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class RealmError(Exception):
    """Represents a structured realm error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider name involved in the failure, when known.
        operation: Remote attribute or operation name, when known.
        retryable: Hint for upstream retry logic (not authoritative).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: Optional[str] = None
    operation: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, operation, code, and message."""
        return f"{self.provider or '-'}:{self.operation or '-'} {self.code.value}: {self.message}"


class ResolutionError(RealmError):
    """Raised when the provider discovery attribute chain is broken or malformed."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.VALIDATION,
        operation: Optional[str] = None,
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(code=code, message=message, operation=operation, raw=raw)


class UnknownProviderError(RealmError):
    """Raised when a caller references a provider name absent from the registry."""

    def __init__(self, provider: str, known: tuple[str, ...] = ()) -> None:
        hint = f" (known: {', '.join(known)})" if known else ""
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"Unknown provider '{provider}'{hint}",
            provider=provider,
        )


class RemoteCallError(RealmError):
    """Raised when an attribute read or a method invocation is rejected or fails."""


class SessionError(RealmError):
    """Raised when an authenticated session to the management endpoint cannot be established."""


__all__ = [
    "RealmError",
    "ResolutionError",
    "UnknownProviderError",
    "RemoteCallError",
    "SessionError",
]
