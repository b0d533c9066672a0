"""Typed queries against the authentication providers of a realm.

``ProviderQueryClient`` turns membership/existence checks and listings into
remote calls on the provider bean named by the caller. Provider names are
checked against the registry before anything is sent: an unknown name raises
:class:`UnknownProviderError` and performs no remote call.

Listings start a cursor on the provider (``listUsers``, ``listGroups``,
``listGroupMembers``, ``listMemberGroups``) and hand the token to
:class:`CursorPager`. The ``limit`` passed to the service is a hint for how
much it enumerates; it is not a cap on the returned list.

Nothing is cached: each call re-queries the live remote state.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from ..base.handles import Handle, RemoteArg
from ..base.interfaces import RemoteInvoker
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import DEFAULT_LIST_FILTER, DEFAULT_LIST_LIMIT
from .dispatch import RemoteDispatcher
from .pager import CursorPager, PartialDrain
from .registry import ProviderRegistry
from .resolver import HandleResolver, RealmSchema


class ProviderQueryClient:
    """Membership, existence and listing queries for discovered providers."""

    def __init__(
        self,
        invoker: RemoteInvoker,
        registry: ProviderRegistry,
        *,
        pager: Optional[CursorPager] = None,
    ) -> None:
        self._logger = get_logger("realm_providers.query")
        self._dispatch = RemoteDispatcher(invoker, self._logger)
        self._registry = registry
        self._pager = pager or CursorPager(invoker, dispatcher=self._dispatch)

    @classmethod
    def from_invoker(
        cls,
        invoker: RemoteInvoker,
        schema: Optional[RealmSchema] = None,
        *,
        strict: bool = False,
    ) -> "ProviderQueryClient":
        """Resolve the provider registry once and return a client bound to it."""
        registry = HandleResolver(invoker, schema, strict=strict).resolve()
        return cls(invoker, registry)

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def pager(self) -> CursorPager:
        return self._pager

    # ------------------------------------------------------------------
    # Checks

    def list_identity_providers(self) -> List[str]:
        """Return provider names in discovery order."""
        return self._registry.names()

    def is_member(self, provider: str, user: str, group: str, recursive: Optional[bool] = None) -> bool:
        """Return whether ``user`` belongs to ``group`` according to ``provider``.

        The remote operation takes the group first and the member second.
        When ``recursive`` is given, the three-argument form is used so the
        service also follows nested group membership (or explicitly does not).
        """
        handle = self._registry.handle_for(provider)
        args = [RemoteArg.string(group), RemoteArg.string(user)]
        if recursive is not None:
            args.append(RemoteArg.boolean(recursive))
        return self._dispatch.invoke_bool(handle, "isMember", args, provider=provider)

    def user_exists(self, provider: str, user: str) -> bool:
        handle = self._registry.handle_for(provider)
        return self._dispatch.invoke_bool(handle, "userExists", [RemoteArg.string(user)], provider=provider)

    def group_exists(self, provider: str, group: str) -> bool:
        handle = self._registry.handle_for(provider)
        return self._dispatch.invoke_bool(handle, "groupExists", [RemoteArg.string(group)], provider=provider)

    # ------------------------------------------------------------------
    # Listings

    def list_users(self, provider: str, filter: str = DEFAULT_LIST_FILTER, limit: int = DEFAULT_LIST_LIMIT) -> List[str]:
        """Return user names matching the wildcard ``filter`` (service-interpreted)."""
        return self._list(provider, "listUsers", [RemoteArg.string(filter), RemoteArg.integer(limit)])

    def list_groups(self, provider: str, filter: str = DEFAULT_LIST_FILTER, limit: int = DEFAULT_LIST_LIMIT) -> List[str]:
        """Return group names matching the wildcard ``filter`` (service-interpreted)."""
        return self._list(provider, "listGroups", [RemoteArg.string(filter), RemoteArg.integer(limit)])

    def list_group_members(
        self,
        provider: str,
        group: str,
        filter: str = DEFAULT_LIST_FILTER,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[str]:
        """Return direct members (users and groups) of ``group`` matching ``filter``."""
        args = [RemoteArg.string(group), RemoteArg.string(filter), RemoteArg.integer(limit)]
        return self._list(provider, "listGroupMembers", args)

    def list_member_groups(self, provider: str, member: str) -> List[str]:
        """Return the groups ``member`` (a user or a group) directly belongs to."""
        return self._list(provider, "listMemberGroups", [RemoteArg.string(member)])

    def list_users_partial(
        self, provider: str, filter: str = DEFAULT_LIST_FILTER, limit: int = DEFAULT_LIST_LIMIT
    ) -> PartialDrain:
        """Like ``list_users`` but keep progress on failure (see ``CursorPager.resume``)."""
        handle, token = self._open(provider, "listUsers", [RemoteArg.string(filter), RemoteArg.integer(limit)])
        return self._pager.drain_partial(handle, token, provider=provider)

    def list_groups_partial(
        self, provider: str, filter: str = DEFAULT_LIST_FILTER, limit: int = DEFAULT_LIST_LIMIT
    ) -> PartialDrain:
        """Like ``list_groups`` but keep progress on failure (see ``CursorPager.resume``)."""
        handle, token = self._open(provider, "listGroups", [RemoteArg.string(filter), RemoteArg.integer(limit)])
        return self._pager.drain_partial(handle, token, provider=provider)

    def _list(self, provider: str, operation: str, args: List[RemoteArg]) -> List[str]:
        handle, token = self._open(provider, operation, args)
        items = self._pager.drain(handle, token, provider=provider)
        normalized_log_event(
            self._logger,
            "query.list",
            LogContext(provider=provider, operation=operation),
            phase="finalize",
            count=len(items),
        )
        return items

    def _open(self, provider: str, operation: str, args: List[RemoteArg]) -> Tuple[Handle, str]:
        handle = self._registry.handle_for(provider)
        token = self._dispatch.invoke_str(handle, operation, args, allow_empty=False, provider=provider)
        return handle, token


__all__ = ["ProviderQueryClient"]
