"""Invocation dispatch helpers shared by the resolver, query client and pager.

``RemoteDispatcher`` wraps a :class:`RemoteInvoker` and is the single place
where remote calls are issued. It

- attaches provider and operation context to every failure,
- converts stray non-``RealmError`` exceptions raised by an invoker into
  :class:`RemoteCallError` (classified, original kept in ``raw``),
- checks result types (booleans, strings) so a malformed answer from the
  service surfaces as ``RemoteCallError(code=VALIDATION)`` instead of a
  silently wrong value,
- emits ``invoke.ok`` / ``invoke.error`` debug events.

Nothing here swallows an error or substitutes a default value.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..base.errors import ErrorCode, RealmError, RemoteCallError, classify_exception
from ..base.handles import Handle, RemoteArg
from ..base.interfaces import RemoteInvoker
from ..base.logging import LogContext, get_logger, normalized_log_event


class RemoteDispatcher:
    """Typed front for a ``RemoteInvoker``."""

    def __init__(self, invoker: RemoteInvoker, logger: Optional[logging.Logger] = None) -> None:
        self._invoker = invoker
        self._logger = logger or get_logger("realm_providers.dispatch")

    @property
    def invoker(self) -> RemoteInvoker:
        return self._invoker

    # ------------------------------------------------------------------
    # Raw calls

    def read_attribute(self, handle: Handle, name: str, *, provider: Optional[str] = None) -> Any:
        """Read attribute ``name`` of ``handle``; failures raise ``RemoteCallError``."""
        ctx = LogContext(provider=provider, bean=handle.object_name, operation=name)
        try:
            value = self._invoker.get_attribute(handle, name)
        except RealmError as exc:
            self._annotate(exc, ctx)
            raise
        except Exception as exc:
            raise self._wrap(exc, ctx) from exc
        normalized_log_event(self._logger, "attribute.ok", ctx, phase="read", level=logging.DEBUG)
        return value

    def invoke(
        self,
        handle: Handle,
        operation: str,
        args: Sequence[RemoteArg] = (),
        *,
        provider: Optional[str] = None,
        cursor: Optional[str] = None,
    ) -> Any:
        """Invoke ``operation`` on ``handle``; failures raise ``RemoteCallError``."""
        ctx = LogContext(provider=provider, bean=handle.object_name, operation=operation, cursor=cursor)
        try:
            result = self._invoker.invoke(handle, operation, tuple(args))
        except RealmError as exc:
            self._annotate(exc, ctx)
            raise
        except Exception as exc:
            raise self._wrap(exc, ctx) from exc
        normalized_log_event(self._logger, "invoke.ok", ctx, phase="invoke", level=logging.DEBUG)
        return result

    # ------------------------------------------------------------------
    # Typed calls

    def invoke_bool(self, handle: Handle, operation: str, args: Sequence[RemoteArg] = (), **kw: Any) -> bool:
        result = self.invoke(handle, operation, args, **kw)
        if not isinstance(result, bool):
            raise self._bad_result(operation, "a boolean", result, kw.get("provider"))
        return result

    def invoke_str(
        self,
        handle: Handle,
        operation: str,
        args: Sequence[RemoteArg] = (),
        *,
        allow_empty: bool = True,
        **kw: Any,
    ) -> str:
        result = self.invoke(handle, operation, args, **kw)
        if not isinstance(result, str) or (not allow_empty and not result):
            expected = "a string" if allow_empty else "a non-empty string"
            raise self._bad_result(operation, expected, result, kw.get("provider"))
        return result

    def invoke_void(self, handle: Handle, operation: str, args: Sequence[RemoteArg] = (), **kw: Any) -> None:
        self.invoke(handle, operation, args, **kw)

    # ------------------------------------------------------------------
    # Error shaping

    def _annotate(self, err: RealmError, ctx: LogContext) -> None:
        if err.provider is None:
            err.provider = ctx.provider
        if err.operation is None:
            err.operation = ctx.operation
        self._log_failure(err, ctx)

    def _wrap(self, exc: Exception, ctx: LogContext) -> RemoteCallError:
        err = RemoteCallError(
            code=classify_exception(exc),
            message=str(exc) or type(exc).__name__,
            provider=ctx.provider,
            operation=ctx.operation,
            raw=exc,
        )
        self._log_failure(err, ctx)
        return err

    def _log_failure(self, err: RealmError, ctx: LogContext) -> None:
        normalized_log_event(
            self._logger,
            "invoke.error",
            ctx,
            phase="invoke",
            error_code=err.code.value,
            level=logging.DEBUG,
            error=err.message,
        )

    @staticmethod
    def _bad_result(operation: str, expected: str, result: Any, provider: Optional[str]) -> RemoteCallError:
        return RemoteCallError(
            code=ErrorCode.VALIDATION,
            message=f"'{operation}' returned {type(result).__name__} {result!r}, expected {expected}",
            provider=provider,
            operation=operation,
        )


__all__ = ["RemoteDispatcher"]
