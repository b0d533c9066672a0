"""
Transport-agnostic interfaces for the realm client.

Re-exports Protocols kept in single-class modules under
``realm_providers.base.interfaces_parts`` so imports stay stable.
"""

from __future__ import annotations

from .interfaces_parts import RemoteInvoker

__all__ = ["RemoteInvoker"]
