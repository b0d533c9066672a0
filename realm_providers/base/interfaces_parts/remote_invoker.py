"""RemoteInvoker Protocol (single-class module).

Boundary to the remote management service: read a named attribute of a bean
or invoke a named operation on it with typed arguments.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from ..handles import Handle, RemoteArg


@runtime_checkable
class RemoteInvoker(Protocol):
    """Authenticated capability to read attributes and invoke operations by handle.

    Implementations return bean references as :class:`Handle` (or lists of
    handles for array attributes), primitives unchanged, and ``None`` for
    null values. Every failure is raised as
    :class:`~realm_providers.base.errors.RemoteCallError`.

    Thread-safety is an implementation property. Callers sharing one client
    across threads must use an invoker that is safe for concurrent use; the
    query client adds no locking of its own.
    """

    def get_attribute(self, handle: Handle, name: str) -> Any:
        """Return the value of attribute ``name`` on the bean ``handle``."""
        ...

    def invoke(self, handle: Handle, operation: str, args: Sequence[RemoteArg] = ()) -> Any:
        """Invoke ``operation`` on the bean ``handle`` and return its result."""
        ...
