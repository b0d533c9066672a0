"""Session factory utilities.

Purpose
-------
Centralize transport-agnostic creation of ``RemoteInvoker`` sessions.
Transport modules are imported lazily using ``importlib`` so the HTTP stack is
only loaded when a session over it is actually opened.

External dependencies
---------------------
- Standard library only (``importlib``). Transports themselves may depend on
  ``httpx``, but are imported on demand.

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries; it
  returns a connected invoker or raises.
- When ``REALM_USE_MOCKS`` is truthy every session is routed to the ``mock``
  transport regardless of the configured one.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type

from ..config.env import mocks_enabled
from .dto.connection_params import ConnectionParams
from .errors import ErrorCode, SessionError


class UnknownTransportError(SessionError):
    """Raised when a transport name is not registered or cannot be loaded."""


class SessionFactory:
    """Open remote sessions based on the transport named in ``ConnectionParams``."""

    _TRANSPORTS: Dict[str, Dict[str, str]] = {
        "jolokia": {"module": "realm_providers.jolokia.client", "class": "JolokiaInvoker"},
        "mock": {"module": "realm_providers.mock.invoker", "class": "MockInvoker"},
    }

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        return tuple(cls._TRANSPORTS)

    @classmethod
    def resolve_class(cls, transport: str) -> Type:
        """Import and return the invoker class registered for ``transport``.

        Raises
        ------
        UnknownTransportError
            If the transport is unknown, its module fails to import, or the
            class is missing from the module.
        """
        name = (transport or "").lower().strip()
        entry = cls._TRANSPORTS.get(name)
        if not entry:
            raise UnknownTransportError(
                code=ErrorCode.UNSUPPORTED,
                message=f"Unknown transport '{transport}' (supported: {', '.join(cls.supported())})",
            )
        module_path, class_name = entry["module"], entry["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownTransportError(
                code=ErrorCode.UNSUPPORTED,
                message=f"Failed to import module '{module_path}' for transport '{transport}': {exc}",
                raw=exc,
            ) from exc
        try:
            return getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownTransportError(
                code=ErrorCode.UNSUPPORTED,
                message=f"Invoker class '{class_name}' not found in '{module_path}'",
                raw=exc,
            ) from exc

    @classmethod
    def connect(cls, params: ConnectionParams, **kwargs: Any) -> Any:
        """Open a session and return a connected ``RemoteInvoker``.

        Extra ``kwargs`` are forwarded to the transport's ``connect``
        classmethod (for example ``client=`` or ``retry_config=`` for Jolokia).
        """
        transport = "mock" if mocks_enabled() else params.transport
        klass = cls.resolve_class(transport)
        return klass.connect(params, **kwargs)


__all__ = ["SessionFactory", "UnknownTransportError"]
