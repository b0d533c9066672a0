"""Pytest configuration for the realm_providers test suite.

Every test starts from a clean configuration: ``REALM_*`` and ``WLS_*``
variables are removed and the external config file cache is reset, so a
developer's shell environment never leaks into assertions.
"""

from __future__ import annotations

import copy
import os
from typing import Any, Dict, Iterator

import pytest

from realm_providers.base import logging as realm_logging
from realm_providers.base.handles import Handle
from realm_providers.config import reset_config_cache
from realm_providers.mock import MockInvoker, load_fixture_catalog
from realm_providers.realm import ProviderQueryClient


@pytest.fixture(autouse=True)
def clean_realm_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip realm-related environment variables and config caches."""

    for name in list(os.environ):
        if name.startswith(("REALM_", "WLS_")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(realm_logging, "_LEVEL_OVERRIDE", None)
    reset_config_cache()
    yield
    reset_config_cache()

@pytest.fixture()
def catalog() -> Dict[str, Any]:
    """Return a fresh copy of the bundled ``domain.json`` fixture."""

    return copy.deepcopy(load_fixture_catalog())

@pytest.fixture()
def invoker(catalog: Dict[str, Any]) -> MockInvoker:
    return MockInvoker(catalog)

@pytest.fixture()
def client(invoker: MockInvoker) -> ProviderQueryClient:
    return ProviderQueryClient.from_invoker(invoker)

@pytest.fixture()
def default_authenticator() -> Handle:
    return Handle("Security:Name=myrealmDefaultAuthenticator")
