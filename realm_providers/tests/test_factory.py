from __future__ import annotations

import pytest

import realm_providers
from realm_providers.base.dto import ConnectionParams
from realm_providers.base.errors import ErrorCode, SessionError
from realm_providers.base.factory import SessionFactory, UnknownTransportError
from realm_providers.jolokia import JolokiaInvoker
from realm_providers.mock import MockInvoker


def test_supported_transports():
    assert set(SessionFactory.supported()) == {"jolokia", "mock"}
    assert SessionFactory.resolve_class("Jolokia") is JolokiaInvoker


def test_unknown_transport():
    with pytest.raises(UnknownTransportError) as ei:
        SessionFactory.connect(ConnectionParams(transport="t3"))
    assert isinstance(ei.value, SessionError)
    assert ei.value.code is ErrorCode.UNSUPPORTED


def test_import_failure(monkeypatch):
    monkeypatch.setattr(
        SessionFactory,
        "_TRANSPORTS",
        {"bogus": {"module": "does.not.exist", "class": "X"}},
        raising=False,
    )
    with pytest.raises(UnknownTransportError):
        SessionFactory.resolve_class("bogus")


def test_missing_class(monkeypatch):
    monkeypatch.setattr(
        SessionFactory,
        "_TRANSPORTS",
        {"odd": {"module": "realm_providers.mock.invoker", "class": "Nope"}},
        raising=False,
    )
    with pytest.raises(UnknownTransportError):
        SessionFactory.resolve_class("odd")


def test_mock_transport_connects():
    assert isinstance(SessionFactory.connect(ConnectionParams(transport="mock")), MockInvoker)


def test_use_mocks_env_routes_to_mock(monkeypatch):
    monkeypatch.setenv("REALM_USE_MOCKS", "1")
    assert isinstance(SessionFactory.connect(ConnectionParams(transport="jolokia")), MockInvoker)


def test_open_client_from_environment(monkeypatch):
    monkeypatch.setenv("REALM_TRANSPORT", "mock")
    monkeypatch.setenv("REALM_USERNAME", "weblogic")
    monkeypatch.setenv("REALM_PASSWORD", "welcome1")
    client = realm_providers.open_client()
    assert client.list_identity_providers()[0] == "DefaultAuthenticator"
    assert client.is_member("DefaultAuthenticator", "alice", "admins")


def test_connect_with_bad_password(monkeypatch):
    with pytest.raises(SessionError) as ei:
        realm_providers.connect(transport="mock", username="weblogic", password="nope")
    assert ei.value.code is ErrorCode.AUTH
