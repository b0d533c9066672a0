from __future__ import annotations

import pytest

from realm_providers.base.errors import ErrorCode, RemoteCallError
from realm_providers.base.handles import Handle, RemoteArg
from realm_providers.realm import RemoteDispatcher

H = Handle("Security:Name=myrealmDefaultAuthenticator")


class _Raising:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def get_attribute(self, handle, name):
        raise self.exc

    def invoke(self, handle, operation, args=()):
        raise self.exc


class _Returning:
    def __init__(self, value) -> None:
        self.value = value

    def get_attribute(self, handle, name):
        return self.value

    def invoke(self, handle, operation, args=()):
        return self.value


def test_foreign_exceptions_become_remote_call_errors():
    cause = TimeoutError("read timed out")
    d = RemoteDispatcher(_Raising(cause))
    with pytest.raises(RemoteCallError) as ei:
        d.invoke(H, "userExists", [RemoteArg.string("alice")], provider="DefaultAuthenticator")
    err = ei.value
    assert err.code is ErrorCode.TIMEOUT
    assert err.provider == "DefaultAuthenticator"
    assert err.operation == "userExists"
    assert err.raw is cause
    assert err.__cause__ is cause


def test_realm_errors_keep_identity_and_gain_context():
    original = RemoteCallError(code=ErrorCode.SERVER_ERROR, message="boom")
    d = RemoteDispatcher(_Raising(original))
    with pytest.raises(RemoteCallError) as ei:
        d.read_attribute(H, "Name", provider="P")
    assert ei.value is original
    assert original.provider == "P"
    assert original.operation == "Name"


def test_existing_context_is_not_overwritten():
    original = RemoteCallError(code=ErrorCode.SERVER_ERROR, message="boom", operation="inner")
    with pytest.raises(RemoteCallError):
        RemoteDispatcher(_Raising(original)).invoke(H, "outer")
    assert original.operation == "inner"


@pytest.mark.parametrize("value", [None, 1, "true"])
def test_invoke_bool_rejects_non_booleans(value):
    with pytest.raises(RemoteCallError) as ei:
        RemoteDispatcher(_Returning(value)).invoke_bool(H, "userExists")
    assert ei.value.code is ErrorCode.VALIDATION


def test_invoke_str_empty_policy():
    d = RemoteDispatcher(_Returning(""))
    assert d.invoke_str(H, "getCurrentName") == ""
    with pytest.raises(RemoteCallError):
        d.invoke_str(H, "listUsers", allow_empty=False)
