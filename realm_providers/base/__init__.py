"""
Realm Base Package

Exports transport-agnostic contracts, DTOs and the error taxonomy used by the
realm layer and the transports.

- Interfaces: the ``RemoteInvoker`` boundary
- Handles: opaque bean references and typed remote-call arguments
- DTOs: validated connection parameters
- Errors: ``ErrorCode`` plus the ``RealmError`` family

The session factory lives in ``realm_providers.base.factory`` and is imported
from there (or from the top-level package) because it depends on the config
layer.
"""

from .dto import ConnectionParams
from .errors import (
    ErrorCode,
    RealmError,
    RemoteCallError,
    ResolutionError,
    SessionError,
    UnknownProviderError,
)
from .handles import ArgKind, Handle, RemoteArg
from .interfaces import RemoteInvoker
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "ConnectionParams",
    "ErrorCode",
    "RealmError",
    "RemoteCallError",
    "ResolutionError",
    "SessionError",
    "UnknownProviderError",
    "ArgKind",
    "Handle",
    "RemoteArg",
    "RemoteInvoker",
    "TimeoutConfig",
    "get_timeout_config",
]
