"""realm_providers package

Client for the identity providers of a remote management service.

Purpose:
    Discover the authentication providers configured in the domain's default
    realm and run typed membership, existence and listing queries against
    them. Sessions are opened through a pluggable transport (``jolokia`` for
    a live server, ``mock`` for fixtures).

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`RealmError` and subclasses, :class:`ErrorCode`
    - Sessions: :func:`connect`, :class:`SessionFactory`
    - Queries: :func:`open_client`, :class:`ProviderQueryClient`
    - Building blocks: :class:`HandleResolver`, :class:`CursorPager`,
      :class:`RealmSchema`, :class:`Handle`, :class:`RemoteArg`

Example:
    >>> client = open_client(transport="mock")
    >>> client.list_identity_providers()
    ['DefaultAuthenticator', 'CorporateLDAP', 'DefaultIdentityAsserter']
"""

from typing import Any

from .base import (
    ArgKind,
    ConnectionParams,
    ErrorCode,
    Handle,
    RealmError,
    RemoteArg,
    RemoteCallError,
    RemoteInvoker,
    ResolutionError,
    SessionError,
    UnknownProviderError,
)
from .base.factory import SessionFactory, UnknownTransportError
from .config import get_connection_config, get_realm_config
from .realm import (
    CursorPager,
    HandleResolver,
    PartialDrain,
    ProviderQueryClient,
    ProviderRegistry,
    RealmSchema,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorCode",
    "RealmError",
    "RemoteCallError",
    "ResolutionError",
    "SessionError",
    "UnknownProviderError",
    "UnknownTransportError",
    "ArgKind",
    "ConnectionParams",
    "Handle",
    "RemoteArg",
    "RemoteInvoker",
    "SessionFactory",
    "CursorPager",
    "HandleResolver",
    "PartialDrain",
    "ProviderQueryClient",
    "ProviderRegistry",
    "RealmSchema",
    "connect",
    "open_client",
]


def connect(**overrides: Any) -> Any:
    """Open a session using layered configuration plus ``overrides``.

    Returns the connected ``RemoteInvoker``. Raises :class:`SessionError`
    when the endpoint is unreachable or rejects the credentials.
    """
    return SessionFactory.connect(get_connection_config(overrides))


def open_client(*, strict: bool = False, **overrides: Any) -> ProviderQueryClient:
    """Open a session and resolve the provider registry in one step.

    The realm schema (root bean, attribute chain, name attribute) comes from
    the ``realm`` section of the external config file when present.
    """
    realm_cfg = get_realm_config()
    schema = RealmSchema.from_config(realm_cfg)
    invoker = connect(**overrides)
    return ProviderQueryClient.from_invoker(invoker, schema, strict=strict or bool(realm_cfg.get("strict")))
