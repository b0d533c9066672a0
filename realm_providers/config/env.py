"""realm_providers.config.env
==========================

Centralized environment variable mapping for connection settings.

Purpose
-------
- Single source of truth mapping connection fields to environment variable
  names (canonical first, then accepted aliases).
- Small helpers to look values up consistently across the package and CLI.

Failure Modes
-------------
- Helpers return ``None`` when a field is unknown or no value is present;
  callers decide how to fall back.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Connection field -> ordered env var names (canonical first)
ENV_MAP: Dict[str, Tuple[str, ...]] = {
    "transport": ("REALM_TRANSPORT",),
    "host": ("REALM_HOST", "WLS_HOST"),
    "port": ("REALM_PORT", "WLS_PORT"),
    "username": ("REALM_USERNAME", "WLS_USER"),
    "password": ("REALM_PASSWORD", "WLS_PASSWORD"),  # pragma: allowlist secret - env var names
    "protocol": ("REALM_PROTOCOL",),
    "base_path": ("REALM_BASE_PATH",),
    "verify_tls": ("REALM_VERIFY_TLS",),
}

CONFIG_FILE_ENV = "REALM_CONFIG_FILE"
USE_MOCKS_ENV = "REALM_USE_MOCKS"

_TRUTHY = {"1", "t", "true", "y", "yes", "on"}

# Only credentials are screened; hosts like ``wls.example.com`` are real values.
PLACEHOLDER_FIELDS = frozenset({"username", "password"})
_PLACEHOLDERS = {"placeholder", "changeme", "change-me", "example", "xxx", "todo"}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the whole value is a template placeholder.

    Matches ``changeme``, ``<placeholder>``, ``${PASSWORD}`` style values
    (case-insensitive). Values that merely contain such a word are kept.
    """
    if val is None:
        return False
    v = val.strip().lower()
    if len(v) > 2 and (v[0], v[-1]) in {("<", ">"), ("{", "}")}:
        return True
    if v.startswith("${") and v.endswith("}"):
        return True
    return v in _PLACEHOLDERS


def get_env_var_candidates(field: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a connection field."""
    yield from ENV_MAP.get((field or "").lower(), ())


def resolve_env_value(field: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for the first usable variable.

    Empty values are skipped. Placeholder values are skipped for credential
    fields only.
    """
    screen = (field or "").lower() in PLACEHOLDER_FIELDS
    for name in get_env_var_candidates(field):
        val = os.environ.get(name)
        if not val or (screen and is_placeholder(val)):
            continue
        return val, name
    return None, None


def env_flag(name: str) -> bool:
    """Return True when environment variable ``name`` holds a truthy value."""
    return (os.environ.get(name) or "").strip().lower() in _TRUTHY


def mocks_enabled() -> bool:
    """Return True when the factory should route sessions to the mock transport."""
    return env_flag(USE_MOCKS_ENV)


__all__ = [
    "ENV_MAP",
    "CONFIG_FILE_ENV",
    "USE_MOCKS_ENV",
    "PLACEHOLDER_FIELDS",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_env_value",
    "env_flag",
    "mocks_enabled",
]
