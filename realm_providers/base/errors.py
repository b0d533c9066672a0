"""Unified realm error taxonomy public surface.

This module re-exports the implementations under
``realm_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.realm_error import (
    RealmError,
    RemoteCallError,
    ResolutionError,
    SessionError,
    UnknownProviderError,
)
from .errors_parts.classification import classify_exception, classify_remote_type, is_retryable

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
