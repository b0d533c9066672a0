"""Catalog builders shared by the realm tests."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from realm_providers.config.defaults import DOMAIN_RUNTIME_SERVICE

DOMAIN = "com.bea:Name=d1,Type=Domain"
SECURITY = "com.bea:Name=d1,Type=SecurityConfiguration"
REALM = "Security:Name=myrealm"


def build_catalog(
    providers: Iterable[tuple[str, Optional[str]]],
    directories: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Build a minimal catalog with one bean per ``(name, directory)`` provider.

    The provider bean object names are ``Security:Name=P<index>`` so tests can
    give two providers the same ``Name`` attribute.
    """

    provider_refs = []
    beans: Dict[str, Any] = {
        DOMAIN_RUNTIME_SERVICE: {"attributes": {"DomainConfiguration": {"objectName": DOMAIN}}},
        DOMAIN: {"attributes": {"SecurityConfiguration": {"objectName": SECURITY}}},
        SECURITY: {"attributes": {"DefaultRealm": {"objectName": REALM}}},
        REALM: {"attributes": {"AuthenticationProviders": provider_refs}},
    }
    for index, (name, directory) in enumerate(providers):
        object_name = f"Security:Name=P{index}"
        provider_refs.append({"objectName": object_name})
        bean: Dict[str, Any] = {"attributes": {"Name": name}}
        if directory:
            bean["directory"] = directory
        beans[object_name] = bean
    return {"beans": beans, "directories": directories or {}}
