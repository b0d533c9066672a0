from __future__ import annotations

import json

import pytest

from realm_providers.base.dto import ConnectionParams
from realm_providers.base.errors import ErrorCode, RemoteCallError, SessionError
from realm_providers.base.handles import Handle, RemoteArg
from realm_providers.base.interfaces import RemoteInvoker
from realm_providers.mock import MockInvoker, load_fixture_catalog


def test_mock_invoker_satisfies_protocol(invoker):
    assert isinstance(invoker, RemoteInvoker)


def test_connect_checks_fixture_credentials():
    ok = MockInvoker.connect(ConnectionParams(transport="mock", username="weblogic", password="welcome1"))
    assert isinstance(ok, MockInvoker)
    with pytest.raises(SessionError) as ei:
        MockInvoker.connect(ConnectionParams(transport="mock", username="weblogic", password="wrong"))
    assert ei.value.code is ErrorCode.AUTH


def test_connect_without_username_skips_credential_check():
    assert isinstance(MockInvoker.connect(ConnectionParams(transport="mock")), MockInvoker)


def test_connect_with_fixture_path(tmp_path):
    path = tmp_path / "tiny.json"
    path.write_text(json.dumps({"beans": {"a:b=c": {"attributes": {"Name": "tiny"}}}}), encoding="utf-8")
    inv = MockInvoker.connect(ConnectionParams(transport="mock", extra={"fixture": str(path)}))
    assert inv.get_attribute(Handle("a:b=c"), "Name") == "tiny"


def test_connect_with_missing_fixture():
    with pytest.raises(SessionError) as ei:
        MockInvoker.connect(ConnectionParams(transport="mock", extra={"fixture": "missing.json"}))
    assert ei.value.code is ErrorCode.UNAVAILABLE


def test_bundled_fixture_loads():
    catalog = load_fixture_catalog()
    assert "beans" in catalog and "directories" in catalog


def test_unknown_bean_and_attribute(invoker):
    with pytest.raises(RemoteCallError) as ei:
        invoker.get_attribute(Handle("nope:Name=x"), "Name")
    assert ei.value.code is ErrorCode.NOT_FOUND
    with pytest.raises(RemoteCallError) as ei:
        invoker.get_attribute(Handle("Security:Name=myrealm"), "Missing")
    assert ei.value.code is ErrorCode.NOT_FOUND


def test_operation_signature_mismatch_is_unsupported(invoker, default_authenticator):
    with pytest.raises(RemoteCallError) as ei:
        invoker.invoke(default_authenticator, "listUsers", [RemoteArg.string("*")])
    assert ei.value.code is ErrorCode.UNSUPPORTED
    assert "listUsers(java.lang.String)" in ei.value.message


def test_closed_cursor_is_invalid(invoker, default_authenticator):
    token = invoker.invoke(default_authenticator, "listGroups", [RemoteArg.string("*"), RemoteArg.integer(0)])
    invoker.invoke(default_authenticator, "close", [RemoteArg.string(token)])
    with pytest.raises(RemoteCallError) as ei:
        invoker.invoke(default_authenticator, "haveCurrent", [RemoteArg.string(token)])
    assert ei.value.code is ErrorCode.VALIDATION


def test_tokens_are_unique(invoker, default_authenticator):
    args = [RemoteArg.string("*"), RemoteArg.integer(10)]
    assert invoker.invoke(default_authenticator, "listUsers", args) != invoker.invoke(
        default_authenticator, "listUsers", args
    )


def test_fail_next_after_count(invoker):
    root = Handle("Security:Name=myrealm")
    invoker.fail_next("Name", after=1)
    assert invoker.get_attribute(root, "Name") == "myrealm"
    with pytest.raises(RemoteCallError):
        invoker.get_attribute(root, "Name")
    assert invoker.get_attribute(root, "Name") == "myrealm"
