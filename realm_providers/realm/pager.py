"""Bounded enumeration over a server-side, forward-only cursor.

The remote service exposes listings as a cursor token plus three operations
on the provider bean that produced it:

    haveCurrent(token) -> bool    is there an element at the current position?
    getCurrentName(token) -> str  the element at the current position
    advance(token)                move the position forward

``CursorPager.drain`` runs the pull loop until ``haveCurrent`` answers false.
The client imposes no cap; the service alone decides when the cursor is
exhausted. A failure anywhere in the loop aborts the listing and the caller
receives only the error (all-or-nothing). Retrying means starting a fresh
listing: tokens are not portable across providers and are single-use.

``drain_partial``/``resume`` are the opt-in alternative for callers that would
rather keep what was read before a failure and continue on the same token.
The state records whether the last element was read but not yet advanced
past, so resumption never repeats or skips an element.

Once a drain finishes (or fails) the pager asks the service to ``close`` the
token. A close failure is logged and never replaces the drain outcome.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from ..base.errors import ErrorCode, RealmError
from ..base.handles import Handle, RemoteArg
from ..base.interfaces import RemoteInvoker
from ..base.logging import LogContext, get_logger, normalized_log_event
from .dispatch import RemoteDispatcher

HAVE_CURRENT = "haveCurrent"
GET_CURRENT_NAME = "getCurrentName"
ADVANCE = "advance"
CLOSE = "close"


class DrainStep(str, Enum):
    """Next protocol step of a cursor drain."""

    CHECK = "check"
    ADVANCE = "advance"
    DONE = "done"


@dataclass
class PartialDrain:
    """Progress of a drain that may have stopped on an error.

    Attributes:
        handle: Provider bean that owns the cursor.
        token: Cursor token.
        items: Elements collected so far, in cursor order.
        next_step: Protocol step to run when resuming.
        provider: Provider name, for error context and logs.
        error: Failure that stopped the drain, ``None`` when it completed.
    """

    handle: Handle
    token: str
    items: List[str] = field(default_factory=list)
    next_step: DrainStep = DrainStep.CHECK
    provider: Optional[str] = None
    error: Optional[RealmError] = None

    @property
    def complete(self) -> bool:
        return self.next_step is DrainStep.DONE and self.error is None


class CursorPager:
    """Drive a cursor token to exhaustion."""

    def __init__(
        self,
        invoker: RemoteInvoker,
        *,
        close_cursors: bool = True,
        dispatcher: Optional[RemoteDispatcher] = None,
    ) -> None:
        self._logger = get_logger("realm_providers.pager")
        self._dispatch = dispatcher or RemoteDispatcher(invoker, self._logger)
        self._close_cursors = close_cursors

    def drain(self, handle: Handle, token: str, *, provider: Optional[str] = None) -> List[str]:
        """Return every element the cursor yields, or raise on the first failure.

        Raises
        ------
        RemoteCallError
            Any of the cursor calls failed; elements read so far are discarded.
        """
        state = PartialDrain(handle=handle, token=token, provider=provider)
        try:
            self._run(state)
        finally:
            self._close(state)
        return state.items

    def drain_partial(self, handle: Handle, token: str, *, provider: Optional[str] = None) -> PartialDrain:
        """Drain like ``drain`` but return progress instead of raising.

        The cursor stays open when the drain stopped on an error so it can be
        passed to :meth:`resume`; call :meth:`discard` to give it up.
        """
        return self._run_partial(PartialDrain(handle=handle, token=token, provider=provider))

    def resume(self, partial: PartialDrain) -> PartialDrain:
        """Continue a drain returned by ``drain_partial``/``resume`` on the same token."""
        if partial.complete:
            return partial
        return self._run_partial(replace(partial, items=list(partial.items), error=None))

    def discard(self, partial: PartialDrain) -> None:
        """Ask the service to release the cursor of an unfinished drain."""
        self._close(partial)

    # ------------------------------------------------------------------
    # Protocol loop

    def _run_partial(self, state: PartialDrain) -> PartialDrain:
        try:
            self._run(state)
        except RealmError as exc:
            state.error = exc
            return state
        self._close(state)
        return state

    def _run(self, state: PartialDrain) -> None:
        ctx = LogContext(provider=state.provider, bean=state.handle.object_name, cursor=state.token)
        normalized_log_event(
            self._logger, "cursor.start", ctx, phase="start", count=len(state.items), level=logging.DEBUG
        )
        token_arg = (RemoteArg.string(state.token),)
        call = {"provider": state.provider, "cursor": state.token}
        try:
            while state.next_step is not DrainStep.DONE:
                if state.next_step is DrainStep.ADVANCE:
                    self._dispatch.invoke_void(state.handle, ADVANCE, token_arg, **call)
                    state.next_step = DrainStep.CHECK
                    continue
                if not self._dispatch.invoke_bool(state.handle, HAVE_CURRENT, token_arg, **call):
                    state.next_step = DrainStep.DONE
                    break
                state.items.append(self._dispatch.invoke_str(state.handle, GET_CURRENT_NAME, token_arg, **call))
                state.next_step = DrainStep.ADVANCE
        except RealmError as exc:
            normalized_log_event(
                self._logger,
                "cursor.error",
                ctx,
                phase="drain",
                count=len(state.items),
                error_code=exc.code.value,
                level=logging.WARNING,
                step=state.next_step.value,
            )
            raise
        normalized_log_event(self._logger, "cursor.end", ctx, phase="finalize", count=len(state.items))

    def _close(self, state: PartialDrain) -> None:
        if not self._close_cursors:
            return
        try:
            self._dispatch.invoke_void(
                state.handle,
                CLOSE,
                (RemoteArg.string(state.token),),
                provider=state.provider,
                cursor=state.token,
            )
        except RealmError as exc:
            level = logging.DEBUG if exc.code is ErrorCode.UNSUPPORTED else logging.WARNING
            normalized_log_event(
                self._logger,
                "cursor.close_failed",
                LogContext(provider=state.provider, bean=state.handle.object_name, cursor=state.token),
                phase="close",
                error_code=exc.code.value,
                level=level,
                error=exc.message,
            )


__all__ = [
    "CursorPager",
    "PartialDrain",
    "DrainStep",
    "HAVE_CURRENT",
    "GET_CURRENT_NAME",
    "ADVANCE",
    "CLOSE",
]
