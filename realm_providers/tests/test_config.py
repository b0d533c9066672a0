from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from realm_providers.base.dto import ConnectionParams
from realm_providers.base.timeouts import get_timeout_config
from realm_providers.config import get_connection_config, get_realm_config, reset_config_cache
from realm_providers.config.env import is_placeholder, mocks_enabled, resolve_env_value
from realm_providers.realm import RealmSchema


def test_defaults():
    cfg = get_connection_config()
    assert cfg.transport == "jolokia"
    assert cfg.base_url == "http://localhost:7001/jolokia"
    assert cfg.username is None


def test_merge_order_file_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "realm.json"
    path.write_text(json.dumps({"connection": {"host": "file-host", "port": 7101, "username": "file-user"}}))
    monkeypatch.setenv("REALM_CONFIG_FILE", str(path))
    monkeypatch.setenv("REALM_PORT", "9002")

    cfg = get_connection_config({"username": "cli-user", "host": None})

    assert cfg.host == "file-host"
    assert cfg.port == 9002
    assert cfg.username == "cli-user"


def test_yaml_config_file(tmp_path, monkeypatch):
    path = tmp_path / "realm.yaml"
    path.write_text(
        "connection:\n"
        "  host: admin.internal\n"
        "  protocol: https\n"
        "realm:\n"
        "  chain: [DomainConfiguration, SecurityConfiguration, DefaultRealm, AuthenticationProviders]\n"
        "  name_attribute: Name\n"
    )
    monkeypatch.setenv("REALM_CONFIG_FILE", str(path))
    cfg = get_connection_config()
    assert cfg.base_url == "https://admin.internal:7001/jolokia"
    schema = RealmSchema.from_config(get_realm_config())
    assert schema.chain[-1] == "AuthenticationProviders"


def test_missing_config_file_is_ignored(monkeypatch):
    monkeypatch.setenv("REALM_CONFIG_FILE", "/nonexistent/realm.yaml")
    assert get_connection_config().host == "localhost"
    assert get_realm_config() == {}


def test_config_file_is_cached_until_reset(tmp_path, monkeypatch):
    path = tmp_path / "realm.json"
    path.write_text(json.dumps({"connection": {"host": "one"}}))
    monkeypatch.setenv("REALM_CONFIG_FILE", str(path))
    assert get_connection_config().host == "one"
    path.write_text(json.dumps({"connection": {"host": "two"}}))
    assert get_connection_config().host == "one"
    reset_config_cache()
    assert get_connection_config().host == "two"


def test_env_aliases_and_placeholders(monkeypatch):
    monkeypatch.setenv("WLS_USER", "admin")
    assert resolve_env_value("username") == ("admin", "WLS_USER")
    monkeypatch.setenv("REALM_USERNAME", "changeme")
    assert resolve_env_value("username") == ("admin", "WLS_USER")
    monkeypatch.setenv("REALM_USERNAME", "weblogic")
    assert resolve_env_value("username") == ("weblogic", "REALM_USERNAME")
    assert is_placeholder("<placeholder>")
    assert is_placeholder("${WLS_PASSWORD}")
    assert not is_placeholder("example-password")
    assert not is_placeholder("welcome1")


def test_values_containing_placeholder_words_are_kept(monkeypatch):
    monkeypatch.setenv("REALM_HOST", "wls.example.com")
    monkeypatch.setenv("REALM_PASSWORD", "Example#2024")
    cfg = get_connection_config()
    assert cfg.host == "wls.example.com"
    assert cfg.password == "Example#2024"


def test_placeholder_screening_only_applies_to_credentials(monkeypatch):
    monkeypatch.setenv("REALM_HOST", "example")
    monkeypatch.setenv("REALM_PASSWORD", "changeme")
    cfg = get_connection_config()
    assert cfg.host == "example"
    assert cfg.password is None


def test_verify_tls_env_flag(monkeypatch):
    monkeypatch.setenv("REALM_VERIFY_TLS", "false")
    assert get_connection_config().verify_tls is False


def test_mocks_flag(monkeypatch):
    assert not mocks_enabled()
    monkeypatch.setenv("REALM_USE_MOCKS", "yes")
    assert mocks_enabled()


def test_invalid_values_raise_validation_error():
    with pytest.raises(ValidationError):
        get_connection_config({"port": 70000})
    with pytest.raises(ValidationError):
        ConnectionParams(protocol="ftp")


def test_connection_params_normalization():
    p = ConnectionParams(transport=" Mock ", base_path="console/jolokia/")
    assert p.transport == "mock"
    assert p.base_path == "/console/jolokia"
    assert "secret" not in repr(ConnectionParams(password="secret"))


def test_timeout_config_env(monkeypatch):
    monkeypatch.setenv("REALM_TIMEOUT_HTTP_SECONDS", "5")
    assert get_timeout_config().http_timeout_seconds == 5.0
    monkeypatch.setenv("REALM_TIMEOUT_HTTP_SECONDS", "-1")
    assert get_timeout_config().http_timeout_seconds == 30.0
