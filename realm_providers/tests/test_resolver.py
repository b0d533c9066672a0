from __future__ import annotations

import json

import pytest

from realm_providers.base.errors import ErrorCode, RemoteCallError, ResolutionError
from realm_providers.base.handles import Handle
from realm_providers.mock import MockInvoker
from realm_providers.realm import HandleResolver, RealmSchema
from realm_providers.tests.helpers import REALM, SECURITY, build_catalog


def test_resolve_bundled_fixture_in_discovery_order(invoker):
    registry = HandleResolver(invoker).resolve()
    assert registry.names() == ["DefaultAuthenticator", "CorporateLDAP", "DefaultIdentityAsserter"]
    assert registry["CorporateLDAP"] == Handle("Security:Name=myrealmCorporateLDAP")


def test_resolve_keys_match_reported_names_exactly():
    names = ["Zeta", "alpha", "Alpha", "mid"]
    registry = HandleResolver(MockInvoker(build_catalog((n, None) for n in names))).resolve()
    assert list(registry) == names
    assert len(registry) == len(set(registry))


def test_resolve_reads_chain_in_order_then_names(invoker):
    HandleResolver(invoker).resolve()
    reads = [name for kind, _, name, _ in invoker.calls if kind == "read"]
    assert reads[:4] == ["DomainConfiguration", "SecurityConfiguration", "DefaultRealm", "AuthenticationProviders"]
    assert reads[4:] == ["Name", "Name", "Name"]


@pytest.mark.parametrize("mutate", ["delete", "null"])
def test_absent_provider_list_yields_empty_registry(mutate, capsys):
    catalog = build_catalog([("DefaultAuthenticator", None)])
    attributes = catalog["beans"][REALM]["attributes"]
    if mutate == "delete":
        del attributes["AuthenticationProviders"]
    else:
        attributes["AuthenticationProviders"] = None

    registry = HandleResolver(MockInvoker(catalog)).resolve()

    assert len(registry) == 0
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
    soft = [e for e in events if e.get("event") == "resolve.soft_fail"]
    assert soft and soft[0]["level"] == "WARNING"


def test_absent_provider_list_is_an_error_in_strict_mode():
    catalog = build_catalog([])
    del catalog["beans"][REALM]["attributes"]["AuthenticationProviders"]
    with pytest.raises(ResolutionError) as ei:
        HandleResolver(MockInvoker(catalog), strict=True).resolve()
    assert ei.value.code is ErrorCode.NOT_FOUND


def test_empty_provider_list_is_not_absent():
    registry = HandleResolver(MockInvoker(build_catalog([])), strict=True).resolve()
    assert registry.names() == []


def test_absent_intermediate_link_fails_fast():
    catalog = build_catalog([("DefaultAuthenticator", None)])
    del catalog["beans"][SECURITY]["attributes"]["DefaultRealm"]
    invoker = MockInvoker(catalog)

    with pytest.raises(ResolutionError) as ei:
        HandleResolver(invoker).resolve()

    assert ei.value.code is ErrorCode.NOT_FOUND
    assert ei.value.operation == "DefaultRealm"
    assert isinstance(ei.value.raw, RemoteCallError)
    # nothing past the broken link is read
    assert [c[2] for c in invoker.calls][-1] == "DefaultRealm"


def test_intermediate_link_with_wrong_shape():
    catalog = build_catalog([("DefaultAuthenticator", None)])
    catalog["beans"][SECURITY]["attributes"]["DefaultRealm"] = "myrealm"
    with pytest.raises(ResolutionError) as ei:
        HandleResolver(MockInvoker(catalog)).resolve()
    assert ei.value.code is ErrorCode.VALIDATION
    assert ei.value.operation == "DefaultRealm"


def test_provider_list_that_is_not_an_array():
    catalog = build_catalog([("DefaultAuthenticator", None)])
    catalog["beans"][REALM]["attributes"]["AuthenticationProviders"] = {"objectName": "Security:Name=P0"}
    with pytest.raises(ResolutionError):
        HandleResolver(MockInvoker(catalog)).resolve()


def test_duplicate_provider_names_are_rejected():
    catalog = build_catalog([("DefaultAuthenticator", None), ("DefaultAuthenticator", None)])
    with pytest.raises(ResolutionError) as ei:
        HandleResolver(MockInvoker(catalog)).resolve()
    assert "Duplicate provider name" in ei.value.message


def test_provider_without_name_attribute():
    catalog = build_catalog([("DefaultAuthenticator", None)])
    del catalog["beans"]["Security:Name=P0"]["attributes"]["Name"]
    with pytest.raises(ResolutionError) as ei:
        HandleResolver(MockInvoker(catalog)).resolve()
    assert ei.value.code is ErrorCode.NOT_FOUND
    assert ei.value.operation == "Name"


def test_provider_with_non_string_name():
    catalog = build_catalog([("DefaultAuthenticator", None)])
    catalog["beans"]["Security:Name=P0"]["attributes"]["Name"] = 42
    with pytest.raises(ResolutionError):
        HandleResolver(MockInvoker(catalog)).resolve()


def test_remote_failure_other_than_absence_propagates(invoker):
    invoker.fail_next("SecurityConfiguration")
    with pytest.raises(RemoteCallError) as ei:
        HandleResolver(invoker).resolve()
    assert ei.value.code is ErrorCode.UNAVAILABLE
    assert ei.value.operation == "SecurityConfiguration"


def test_schema_from_config_overrides_chain():
    catalog = build_catalog([("DefaultAuthenticator", None)])
    catalog["beans"]["Custom:Name=root"] = {
        "attributes": {"Providers": [{"objectName": "Security:Name=P0"}]},
    }
    schema = RealmSchema.from_config({"root": "Custom:Name=root", "chain": ["Providers"]})
    registry = HandleResolver(MockInvoker(catalog), schema).resolve()
    assert registry.names() == ["DefaultAuthenticator"]


def test_schema_requires_a_chain():
    with pytest.raises(ValueError):
        RealmSchema(chain=())


@pytest.mark.parametrize(
    "section",
    [
        {"chain": "DomainConfiguration"},
        {"chain": []},
        {"chain": ["DomainConfiguration", ""]},
        {"chain": ["DomainConfiguration", 3]},
        {"root": ""},
        {"root": "   "},
        {"name_attribute": ""},
    ],
)
def test_schema_from_config_rejects_malformed_sections(section):
    with pytest.raises(ResolutionError) as info:
        RealmSchema.from_config(section)
    assert info.value.code is ErrorCode.VALIDATION


def test_schema_from_config_null_keys_keep_defaults():
    assert RealmSchema.from_config({"root": None, "chain": None}) == RealmSchema()
