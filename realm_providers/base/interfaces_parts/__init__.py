"""Single-class protocol modules re-exported by ``realm_providers.base.interfaces``."""

from .remote_invoker import RemoteInvoker

__all__ = ["RemoteInvoker"]
