from __future__ import annotations

import json

import pytest

from realm_providers.base.errors import ErrorCode, RemoteCallError
from realm_providers.cli import main
from realm_providers.cli.cli_actions import (
    EXIT_REMOTE_CALL,
    EXIT_RESOLUTION,
    EXIT_SESSION,
    EXIT_UNKNOWN_PROVIDER,
    run_command,
)
from realm_providers.cli.cli_parser import build_parser
from realm_providers.mock import MockInvoker
from realm_providers.realm import ProviderQueryClient
from realm_providers.tests.helpers import SECURITY, build_catalog

MOCK = ["--transport", "mock"]


def _run(capsys, *argv):
    rc = main([*argv, *MOCK])
    captured = capsys.readouterr()
    return rc, captured.out, captured.err


def _stderr_payload(err: str) -> dict:
    lines = [json.loads(line) for line in err.splitlines() if line.startswith("{")]
    return next(p for p in lines if "kind" in p)


def test_providers(capsys):
    rc, out, _ = _run(capsys, "providers")
    assert rc == 0
    assert json.loads(out) == {"providers": ["DefaultAuthenticator", "CorporateLDAP", "DefaultIdentityAsserter"]}


def test_users_with_filter_and_limit(capsys):
    rc, out, _ = _run(capsys, "users", "DefaultAuthenticator", "--filter", "*o*", "--limit", "0")
    assert rc == 0
    assert json.loads(out) == {"provider": "DefaultAuthenticator", "users": ["weblogic", "bob", "carol"]}


def test_groups_members_and_member_groups(capsys):
    assert _run(capsys, "groups", "CorporateLDAP")[0] == 0
    rc, out, _ = _run(capsys, "members", "DefaultAuthenticator", "Monitors")
    assert json.loads(out)["members"] == ["carol", "Operators"]
    rc, out, _ = _run(capsys, "member-groups", "DefaultAuthenticator", "bob")
    assert json.loads(out)["groups"] == ["Operators"]


def test_is_member_and_existence(capsys):
    rc, out, _ = _run(capsys, "is-member", "DefaultAuthenticator", "alice", "admins")
    assert rc == 0 and json.loads(out)["member"] is True
    rc, out, _ = _run(capsys, "is-member", "DefaultAuthenticator", "alice", "Administrators", "--no-recursive")
    assert json.loads(out)["member"] is False
    rc, out, _ = _run(capsys, "user-exists", "CorporateLDAP", "frank")
    assert json.loads(out)["exists"] is True
    rc, out, _ = _run(capsys, "group-exists", "CorporateLDAP", "admins")
    assert json.loads(out)["exists"] is False


def test_unknown_provider_exit_code(capsys):
    rc, out, err = _run(capsys, "users", "Nope")
    assert rc == EXIT_UNKNOWN_PROVIDER
    assert out == ""
    payload = _stderr_payload(err)
    assert payload["kind"] == "UnknownProviderError"
    assert payload["code"] == ErrorCode.NOT_FOUND.value


def test_remote_call_exit_code(capsys):
    rc, _, err = _run(capsys, "user-exists", "DefaultIdentityAsserter", "alice")
    assert rc == EXIT_REMOTE_CALL
    assert _stderr_payload(err)["kind"] == "RemoteCallError"


def test_session_exit_code(capsys):
    rc, _, err = _run(capsys, "providers", "--username", "weblogic", "--password", "bad")
    assert rc == EXIT_SESSION
    assert _stderr_payload(err)["kind"] == "SessionError"


def test_invalid_settings_exit_code(capsys):
    rc, _, _ = _run(capsys, "providers", "--port", "0")
    assert rc == EXIT_SESSION


def test_resolution_exit_code(capsys):
    catalog = build_catalog([("DefaultAuthenticator", None)])
    del catalog["beans"][SECURITY]["attributes"]["DefaultRealm"]

    def factory(strict=False, **overrides):
        return ProviderQueryClient.from_invoker(MockInvoker(catalog), strict=strict)

    args = build_parser().parse_args(["providers"])
    assert run_command(args, client_factory=factory) == EXIT_RESOLUTION


def test_strict_flag_is_forwarded(capsys):
    seen = {}

    def factory(strict=False, **overrides):
        seen.update(overrides, strict=strict)
        return ProviderQueryClient.from_invoker(MockInvoker())

    args = build_parser().parse_args(["providers", "--strict", "--host", "wls", "--fixture", "domain.json"])
    assert run_command(args, client_factory=factory) == 0
    assert seen["strict"] is True
    assert seen["host"] == "wls"
    assert seen["port"] is None
    assert seen["extra"] == {"fixture": "domain.json"}


def test_cli_logs_structured_events(capsys):
    _run(capsys, "providers")
    rc, _, err = _run(capsys, "providers")
    events = [json.loads(line).get("event") for line in err.splitlines() if line.startswith("{")]
    assert "cli.start" in events and "cli.finalize" in events


def test_log_level_flag(capsys):
    rc, _, err = _run(capsys, "providers", "--log-level", "ERROR")
    assert rc == 0
    assert err == ""


def test_subcommand_is_required(capsys):
    with pytest.raises(SystemExit):
        main([])


def test_remote_errors_carry_provider_context(capsys):
    invoker = MockInvoker()
    invoker.fail_next("listUsers", RemoteCallError(code=ErrorCode.SERVER_ERROR, message="boom"))

    def factory(strict=False, **overrides):
        return ProviderQueryClient.from_invoker(invoker)

    args = build_parser().parse_args(["users", "DefaultAuthenticator"])
    assert run_command(args, client_factory=factory) == EXIT_REMOTE_CALL
    payload = _stderr_payload(capsys.readouterr().err)
    assert payload["provider"] == "DefaultAuthenticator"
    assert payload["operation"] == "listUsers"


@pytest.mark.parametrize(
    "realm_section",
    [{"chain": "DomainConfiguration"}, {"root": "  "}],
)
def test_malformed_realm_config_is_rejected(realm_section, tmp_path, monkeypatch, capsys):
    path = tmp_path / "realm.json"
    path.write_text(json.dumps({"realm": realm_section}))
    monkeypatch.setenv("REALM_CONFIG_FILE", str(path))

    rc, out, err = _run(capsys, "providers")

    assert rc == EXIT_RESOLUTION
    assert out == ""
    payload = _stderr_payload(err)
    assert payload["kind"] == "ResolutionError"
    assert payload["code"] == "validation"
