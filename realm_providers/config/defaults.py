"""realm_providers.config.defaults
===============================

Central place for small, stable default values used across the
realm_providers package and its CLI. They can be overridden via environment
variables or an external config file.

This module avoids importing from other realm_providers packages to prevent
circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Connection ----
DEFAULT_TRANSPORT = "jolokia"
DEFAULT_HOST = "localhost"
# Administration server listen port of a stock domain.
DEFAULT_PORT = 7001
DEFAULT_PROTOCOL = "http"
# Path the Jolokia agent is deployed under.
DEFAULT_BASE_PATH = "/jolokia"

# ---- Realm schema ----
# Root bean of the domain runtime MBean server.
DOMAIN_RUNTIME_SERVICE = (
    "com.bea:Name=DomainRuntimeService,"
    "Type=weblogic.management.mbeanservers.domainruntime.DomainRuntimeServiceMBean"
)
# Attribute chain from the root bean to the authentication provider array.
PROVIDER_ATTRIBUTE_CHAIN = (
    "DomainConfiguration",
    "SecurityConfiguration",
    "DefaultRealm",
    "AuthenticationProviders",
)
PROVIDER_NAME_ATTRIBUTE = "Name"

# ---- Listing ----
DEFAULT_LIST_FILTER = "*"
DEFAULT_LIST_LIMIT = 10

# ---- Mock transport ----
DEFAULT_MOCK_FIXTURE = "domain.json"


__all__ = [
    "DEFAULT_TRANSPORT",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_PROTOCOL",
    "DEFAULT_BASE_PATH",
    "DOMAIN_RUNTIME_SERVICE",
    "PROVIDER_ATTRIBUTE_CHAIN",
    "PROVIDER_NAME_ATTRIBUTE",
    "DEFAULT_LIST_FILTER",
    "DEFAULT_LIST_LIMIT",
    "DEFAULT_MOCK_FIXTURE",
]
