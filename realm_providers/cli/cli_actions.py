"""CLI action handlers.

Purpose
-------
Translate parsed arguments into calls on :class:`ProviderQueryClient` and
render results as JSON on stdout. This module has no top-level side effects
and is safe to import in tests.

Fallback & Error Semantics
--------------------------
- Connection options left unset fall through to the config file and the
  environment (see ``realm_providers.config``).
- Failures are printed as a JSON object on stderr and mapped to exit codes:
  ``2`` unknown provider, ``3`` rejected remote call, ``4`` session or
  connection settings, ``5`` broken provider discovery chain.
- Each command emits ``cli.start`` and ``cli.finalize`` (or ``cli.error``)
  structured log events.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from ..base.errors import (
    RealmError,
    RemoteCallError,
    ResolutionError,
    SessionError,
    UnknownProviderError,
)
from ..base.logging import LogContext, configure_logger, get_logger, normalized_log_event
from ..realm import ProviderQueryClient

ClientFactory = Callable[..., ProviderQueryClient]

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_UNKNOWN_PROVIDER = 2
EXIT_REMOTE_CALL = 3
EXIT_SESSION = 4
EXIT_RESOLUTION = 5

_CONNECTION_FIELDS = ("transport", "host", "port", "username", "password", "protocol", "base_path")


def connection_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect connection overrides from parsed arguments (unset flags stay ``None``)."""
    out: Dict[str, Any] = {f: getattr(args, f, None) for f in _CONNECTION_FIELDS}
    fixture = getattr(args, "fixture", None)
    if fixture:
        out["extra"] = {"fixture": fixture}
    return out


def exit_code_for(exc: BaseException) -> int:
    """Map a failure to the CLI exit code."""
    if isinstance(exc, UnknownProviderError):
        return EXIT_UNKNOWN_PROVIDER
    if isinstance(exc, ResolutionError):
        return EXIT_RESOLUTION
    if isinstance(exc, (SessionError, ValidationError)):
        return EXIT_SESSION
    if isinstance(exc, RemoteCallError):
        return EXIT_REMOTE_CALL
    return EXIT_FAILURE


def _error_payload(exc: BaseException) -> Dict[str, Any]:
    if isinstance(exc, RealmError):
        return {
            "error": exc.message,
            "kind": type(exc).__name__,
            "code": exc.code.value,
            "provider": exc.provider,
            "operation": exc.operation,
        }
    return {"error": str(exc), "kind": type(exc).__name__}


def _providers(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    return {"providers": client.list_identity_providers()}


def _users(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    return {"provider": args.provider, "users": client.list_users(args.provider, args.filter, args.limit)}


def _groups(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    return {"provider": args.provider, "groups": client.list_groups(args.provider, args.filter, args.limit)}


def _members(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    members = client.list_group_members(args.provider, args.group, args.filter, args.limit)
    return {"provider": args.provider, "group": args.group, "members": members}


def _member_groups(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "provider": args.provider,
        "member": args.member,
        "groups": client.list_member_groups(args.provider, args.member),
    }


def _is_member(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    result = client.is_member(args.provider, args.user, args.group, recursive=args.recursive)
    return {"provider": args.provider, "user": args.user, "group": args.group, "member": result}


def _user_exists(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    return {"provider": args.provider, "user": args.user, "exists": client.user_exists(args.provider, args.user)}


def _group_exists(client: ProviderQueryClient, args: argparse.Namespace) -> Dict[str, Any]:
    return {"provider": args.provider, "group": args.group, "exists": client.group_exists(args.provider, args.group)}


HANDLERS: Dict[str, Callable[[ProviderQueryClient, argparse.Namespace], Dict[str, Any]]] = {
    "providers": _providers,
    "users": _users,
    "groups": _groups,
    "members": _members,
    "member-groups": _member_groups,
    "is-member": _is_member,
    "user-exists": _user_exists,
    "group-exists": _group_exists,
}


def run_command(args: argparse.Namespace, *, client_factory: Optional[ClientFactory] = None) -> int:
    """Execute one subcommand and print its JSON result.

    Parameters
    ----------
    args: argparse.Namespace
        Parsed arguments; ``args.cmd`` selects the handler.
    client_factory: Optional[ClientFactory]
        Callable ``(strict=..., **overrides) -> ProviderQueryClient``; defaults
        to :func:`realm_providers.open_client`. Injection point for tests.

    Returns
    -------
    int
        ``0`` on success, otherwise one of the ``EXIT_*`` codes.
    """
    if getattr(args, "log_level", None):
        configure_logger(level=args.log_level)
    if client_factory is None:
        from .. import open_client as client_factory

    logger = get_logger("realm_providers.cli")
    ctx = LogContext(provider=getattr(args, "provider", None), operation=args.cmd)
    normalized_log_event(logger, "cli.start", ctx, phase="start")
    try:
        client = client_factory(strict=bool(getattr(args, "strict", False)), **connection_overrides(args))
        result = HANDLERS[args.cmd](client, args)
    except (RealmError, ValidationError) as exc:
        code = exit_code_for(exc)
        normalized_log_event(
            logger,
            "cli.error",
            ctx,
            phase="finalize",
            error_code=getattr(getattr(exc, "code", None), "value", None),
            exit_code=code,
        )
        print(json.dumps(_error_payload(exc)), file=sys.stderr)
        return code
    print(json.dumps(result))
    normalized_log_event(logger, "cli.finalize", ctx, phase="finalize", exit_code=EXIT_OK)
    return EXIT_OK


__all__ = [
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_UNKNOWN_PROVIDER",
    "EXIT_REMOTE_CALL",
    "EXIT_SESSION",
    "EXIT_RESOLUTION",
    "HANDLERS",
    "connection_overrides",
    "exit_code_for",
    "run_command",
]
