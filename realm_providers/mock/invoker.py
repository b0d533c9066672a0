"""Deterministic in-memory bean server backed by JSON fixtures.

Purpose
-------
Implement the ``RemoteInvoker`` contract without any network traffic so the
resolver, query client, pager and CLI can be exercised offline. Beans,
attribute values and the user/group directories behind each authentication
provider are declared in a JSON fixture bundled under
``realm_providers.mock.fixtures``.

Behaviour mirrors the management service closely enough for the client:

- unknown beans and attributes raise ``RemoteCallError(NOT_FOUND)``;
- operations are matched on name and argument kinds; anything else raises
  ``RemoteCallError(UNSUPPORTED)``; providers without a directory support
  no query operation at all;
- listing operations return a cursor token owned by the provider bean; using
  a token on another bean, or after ``close``, raises
  ``RemoteCallError(VALIDATION)``;
- ``limit`` caps how many matches a listing enumerates (0 or less: no cap).

Tests use ``calls`` to count remote round trips and ``fail_next`` to inject
a failure on a given operation.
"""

from __future__ import annotations

import itertools
import json
import threading
from dataclasses import dataclass
from fnmatch import fnmatchcase
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..base.dto import ConnectionParams
from ..base.errors import ErrorCode, RealmError, RemoteCallError, SessionError
from ..base.handles import ArgKind, Handle, RemoteArg, decode_handles
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import DEFAULT_MOCK_FIXTURE

_S, _I, _B = ArgKind.STRING, ArgKind.INTEGER, ArgKind.BOOLEAN

_OPERATIONS: Dict[str, Tuple[Tuple[ArgKind, ...], ...]] = {
    "isMember": ((_S, _S), (_S, _S, _B)),
    "userExists": ((_S,),),
    "groupExists": ((_S,),),
    "listUsers": ((_S, _I),),
    "listGroups": ((_S, _I),),
    "listGroupMembers": ((_S, _S, _I),),
    "listMemberGroups": ((_S,),),
    "haveCurrent": ((_S,),),
    "getCurrentName": ((_S,),),
    "advance": ((_S,),),
    "close": ((_S,),),
}


def load_fixture_catalog(resource: str = DEFAULT_MOCK_FIXTURE) -> Dict[str, Any]:
    """Load a fixture catalog by bundled resource name or by filesystem path.

    Parameters
    ----------
    resource: str, default ``domain.json``
        Either the name of a file under ``realm_providers.mock.fixtures`` or a
        path to a JSON file on disk.

    Returns
    -------
    Dict[str, Any]
        Parsed catalog with ``beans`` and ``directories`` sections.
    """
    path = Path(resource)
    if path.is_file():
        return json.loads(path.read_text(encoding="utf-8"))
    data = resources.files("realm_providers.mock.fixtures").joinpath(resource).read_text(encoding="utf-8")
    return json.loads(data)


@dataclass
class _Cursor:
    owner: str
    items: List[str]
    position: int = 0


@dataclass
class _Directory:
    users: List[str]
    groups: Dict[str, List[str]]

    def has_group(self, name: str) -> bool:
        return name in self.groups

    def is_member(self, group: str, member: str, recursive: bool) -> bool:
        seen = set()
        pending = [group]
        while pending:
            current = pending.pop()
            if current in seen:
                continue
            seen.add(current)
            members = self.groups.get(current, [])
            if member in members:
                return True
            if recursive:
                pending.extend(m for m in members if m in self.groups)
        return False

    def member_groups(self, member: str) -> List[str]:
        return [g for g, members in self.groups.items() if member in members]


class MockInvoker:
    """``RemoteInvoker`` serving beans from a fixture catalog.

    Safe for concurrent use: all state changes happen under one lock.
    """

    def __init__(self, catalog: Optional[Mapping[str, Any]] = None) -> None:
        self._catalog = dict(catalog) if catalog is not None else load_fixture_catalog()
        self._beans: Mapping[str, Any] = self._catalog.get("beans", {})
        self._directories = {
            name: _Directory(users=list(d.get("users", [])), groups={g: list(m) for g, m in d.get("groups", {}).items()})
            for name, d in self._catalog.get("directories", {}).items()
        }
        self._cursors: Dict[str, _Cursor] = {}
        self._tokens = itertools.count(1)
        self._failures: Dict[str, List[Any]] = {}
        self._lock = threading.RLock()
        self._logger = get_logger("realm_providers.mock")
        self.calls: List[Tuple[str, str, str, Tuple[Any, ...]]] = []

    @classmethod
    def connect(cls, params: ConnectionParams) -> "MockInvoker":
        """Open a mock session, checking credentials when the fixture declares them."""
        fixture = str(params.extra.get("fixture") or DEFAULT_MOCK_FIXTURE)
        try:
            catalog = load_fixture_catalog(fixture)
        except (OSError, ValueError) as exc:
            raise SessionError(
                code=ErrorCode.UNAVAILABLE,
                message=f"Cannot load mock fixture '{fixture}': {exc}",
                raw=exc,
            ) from exc
        expected = catalog.get("credentials") or {}
        if params.username is not None and expected:
            if params.username != expected.get("username") or params.password != expected.get("password"):
                raise SessionError(code=ErrorCode.AUTH, message=f"Invalid credentials for '{params.username}'")
        invoker = cls(catalog)
        normalized_log_event(
            invoker._logger,
            "session.open",
            LogContext(bean=f"mock:{fixture}", operation="connect"),
            phase="connect",
        )
        return invoker

    # ------------------------------------------------------------------
    # Test hooks

    def fail_next(self, operation: str, error: Optional[RealmError] = None, *, after: int = 0) -> None:
        """Make the call to ``operation`` fail after ``after`` successful calls.

        ``operation`` is an attribute or operation name. Without ``error`` a
        ``RemoteCallError(UNAVAILABLE)`` is raised.
        """
        err = error or RemoteCallError(code=ErrorCode.UNAVAILABLE, message=f"injected failure on {operation}")
        with self._lock:
            self._failures[operation] = [after, err]

    def open_cursors(self) -> List[str]:
        """Return tokens of cursors that were not closed."""
        with self._lock:
            return list(self._cursors)

    # ------------------------------------------------------------------
    # RemoteInvoker

    def get_attribute(self, handle: Handle, name: str) -> Any:
        with self._lock:
            self.calls.append(("read", handle.object_name, name, ()))
            self._maybe_fail(name)
            attributes = self._bean(handle).get("attributes", {})
            if name not in attributes:
                raise RemoteCallError(
                    code=ErrorCode.NOT_FOUND,
                    message=f"AttributeNotFoundException: No such attribute: {name}",
                    operation=name,
                )
            return decode_handles(attributes[name])

    def invoke(self, handle: Handle, operation: str, args: Sequence[RemoteArg] = ()) -> Any:
        with self._lock:
            values = tuple(a.value for a in args)
            self.calls.append(("invoke", handle.object_name, operation, values))
            self._maybe_fail(operation)
            bean = self._bean(handle)
            kinds = tuple(a.kind for a in args)
            directory = self._directories.get(bean.get("directory", ""))
            if directory is None or kinds not in _OPERATIONS.get(operation, ()):
                sig = ",".join(k.signature_type for k in kinds)
                raise RemoteCallError(
                    code=ErrorCode.UNSUPPORTED,
                    message=f"ReflectionException: No such operation: {operation}({sig})",
                    operation=operation,
                )
            return getattr(self, f"_op_{operation}")(handle, directory, *values)

    # ------------------------------------------------------------------
    # Operations

    def _op_isMember(self, handle: Handle, d: _Directory, group: str, member: str, recursive: bool = True) -> bool:
        if not d.has_group(group):
            raise RemoteCallError(code=ErrorCode.NOT_FOUND, message=f"NotFoundException: group {group}", operation="isMember")
        return d.is_member(group, member, recursive)

    def _op_userExists(self, handle: Handle, d: _Directory, user: str) -> bool:
        return user in d.users

    def _op_groupExists(self, handle: Handle, d: _Directory, group: str) -> bool:
        return d.has_group(group)

    def _op_listUsers(self, handle: Handle, d: _Directory, wildcard: str, limit: int) -> str:
        return self._open(handle, _match(d.users, wildcard, limit))

    def _op_listGroups(self, handle: Handle, d: _Directory, wildcard: str, limit: int) -> str:
        return self._open(handle, _match(list(d.groups), wildcard, limit))

    def _op_listGroupMembers(self, handle: Handle, d: _Directory, group: str, wildcard: str, limit: int) -> str:
        if not d.has_group(group):
            raise RemoteCallError(
                code=ErrorCode.NOT_FOUND, message=f"NotFoundException: group {group}", operation="listGroupMembers"
            )
        return self._open(handle, _match(d.groups[group], wildcard, limit))

    def _op_listMemberGroups(self, handle: Handle, d: _Directory, member: str) -> str:
        return self._open(handle, d.member_groups(member))

    def _op_haveCurrent(self, handle: Handle, d: _Directory, token: str) -> bool:
        cursor = self._cursor(handle, token, "haveCurrent")
        return cursor.position < len(cursor.items)

    def _op_getCurrentName(self, handle: Handle, d: _Directory, token: str) -> str:
        cursor = self._cursor(handle, token, "getCurrentName")
        if cursor.position >= len(cursor.items):
            raise RemoteCallError(
                code=ErrorCode.VALIDATION, message="InvalidCursorException: cursor exhausted", operation="getCurrentName"
            )
        return cursor.items[cursor.position]

    def _op_advance(self, handle: Handle, d: _Directory, token: str) -> None:
        cursor = self._cursor(handle, token, "advance")
        cursor.position += 1

    def _op_close(self, handle: Handle, d: _Directory, token: str) -> None:
        self._cursor(handle, token, "close")
        del self._cursors[token]

    # ------------------------------------------------------------------
    # Helpers

    def _bean(self, handle: Handle) -> Mapping[str, Any]:
        bean = self._beans.get(handle.object_name)
        if bean is None:
            raise RemoteCallError(
                code=ErrorCode.NOT_FOUND,
                message=f"InstanceNotFoundException: {handle.object_name}",
            )
        return bean

    def _open(self, handle: Handle, items: List[str]) -> str:
        token = f"Cursor_{next(self._tokens)}"
        self._cursors[token] = _Cursor(owner=handle.object_name, items=list(items))
        return token

    def _cursor(self, handle: Handle, token: str, operation: str) -> _Cursor:
        cursor = self._cursors.get(token)
        if cursor is None or cursor.owner != handle.object_name:
            raise RemoteCallError(
                code=ErrorCode.VALIDATION,
                message=f"InvalidCursorException: {token} is not a cursor of {handle.object_name}",
                operation=operation,
            )
        return cursor

    def _maybe_fail(self, name: str) -> None:
        entry = self._failures.get(name)
        if entry is None:
            return
        if entry[0] > 0:
            entry[0] -= 1
            return
        del self._failures[name]
        raise entry[1]


def _match(names: Sequence[str], wildcard: str, limit: int) -> List[str]:
    matched = [n for n in names if fnmatchcase(n, wildcard)]
    return matched if limit <= 0 else matched[:limit]


__all__ = ["MockInvoker", "load_fixture_catalog"]
