"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `realm_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .realm_error import (
    RealmError,
    RemoteCallError,
    ResolutionError,
    SessionError,
    UnknownProviderError,
)
from .classification import classify_exception, classify_remote_type, is_retryable

__all__ = [
    "ErrorCode",
    "RealmError",
    "RemoteCallError",
    "ResolutionError",
    "SessionError",
    "UnknownProviderError",
    "classify_exception",
    "classify_remote_type",
    "is_retryable",
]
