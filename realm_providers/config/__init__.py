"""Unified configuration layer for realm sessions.

Goals
-----
* Centralize defaults (endpoint location, transport, realm schema).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by REALM_CONFIG_FILE
    3. Environment variables (REALM_HOST, REALM_PORT, REALM_USERNAME, ...)
    4. In-code overrides passed to the helper
* Provide single call sites: ``get_connection_config()`` and ``get_realm_config()``.

External Config File (Optional)
-------------------------------
JSON is tried first, then YAML. Structure example:

```
connection:
  host: admin.example.internal
  port: 7001
  username: weblogic
realm:
  root: "com.bea:Name=DomainRuntimeService,Type=..."
  chain: [DomainConfiguration, SecurityConfiguration, DefaultRealm, AuthenticationProviders]
```

Public API
----------
* get_connection_config(overrides: dict | None = None) -> ConnectionParams
* get_realm_config() -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

import yaml

from ..base.dto import ConnectionParams
from .defaults import (
    DEFAULT_BASE_PATH,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_PROTOCOL,
    DEFAULT_TRANSPORT,
)
from .env import CONFIG_FILE_ENV, ENV_MAP, resolve_env_value


DEFAULTS: Dict[str, Any] = {
    "transport": DEFAULT_TRANSPORT,
    "host": DEFAULT_HOST,
    "port": DEFAULT_PORT,
    "protocol": DEFAULT_PROTOCOL,
    "base_path": DEFAULT_BASE_PATH,
}

_FILE_CACHE: Optional[Dict[str, Any]] = None


def reset_config_cache() -> None:
    """Forget the parsed external config file (tests, long-lived processes)."""
    global _FILE_CACHE
    _FILE_CACHE = None


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field in ENV_MAP:
        val, _ = resolve_env_value(field)
        if val is not None:
            out[field] = val
    return out


def get_connection_config(overrides: Optional[Dict[str, Any]] = None) -> ConnectionParams:
    """Return merged, validated connection parameters.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored so CLI options left unset fall
    through to the lower layers.

    Raises
    ------
    pydantic.ValidationError
        When the merged values do not form valid ``ConnectionParams``.
    """
    cfg: Dict[str, Any] = dict(DEFAULTS)

    file_cfg = _load_external_config().get("connection")
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides()

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return ConnectionParams.model_validate(cfg)


def get_realm_config() -> Dict[str, Any]:
    """Return the ``realm`` section of the external config file (empty when absent)."""
    section = _load_external_config().get("realm")
    return dict(section) if isinstance(section, dict) else {}


__all__ = [
    "get_connection_config",
    "get_realm_config",
    "reset_config_cache",
    "DEFAULTS",
]
