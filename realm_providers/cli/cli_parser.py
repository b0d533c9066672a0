"""CLI parser construction for realm-providers.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ..config.defaults import DEFAULT_LIST_FILTER, DEFAULT_LIST_LIMIT


def _connection_options() -> argparse.ArgumentParser:
    """Return a parent parser carrying the connection options.

    Every option defaults to ``None`` so unset flags fall through to the
    config file and environment layers.
    """
    p = argparse.ArgumentParser(add_help=False)
    grp = p.add_argument_group("connection")
    grp.add_argument("--transport", default=None, help="jolokia (default) or mock")
    grp.add_argument("--host", default=None)
    grp.add_argument("--port", type=int, default=None)
    grp.add_argument("--username", default=None)
    grp.add_argument("--password", default=None)
    grp.add_argument("--protocol", choices=("http", "https"), default=None)
    grp.add_argument("--base-path", dest="base_path", default=None)
    grp.add_argument("--fixture", default=None, help="Fixture file for the mock transport")
    grp.add_argument("--strict", action="store_true", help="Fail when the realm has no provider list")
    grp.add_argument("--log-level", dest="log_level", default=None)
    return p


def _add_listing_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--filter", default=DEFAULT_LIST_FILTER, help="Wildcard interpreted by the server")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIST_LIMIT, help="Enumeration hint sent to the server")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser whose namespace carries ``cmd`` plus the subcommand arguments.
    """
    common = _connection_options()
    p = argparse.ArgumentParser(
        prog="realm-providers",
        description="Query the identity providers of a remote management service",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("providers", parents=[common], help="List authentication provider names")

    p_users = sub.add_parser("users", parents=[common], help="List users of a provider")
    p_users.add_argument("provider")
    _add_listing_flags(p_users)

    p_groups = sub.add_parser("groups", parents=[common], help="List groups of a provider")
    p_groups.add_argument("provider")
    _add_listing_flags(p_groups)

    p_members = sub.add_parser("members", parents=[common], help="List direct members of a group")
    p_members.add_argument("provider")
    p_members.add_argument("group")
    _add_listing_flags(p_members)

    p_mgroups = sub.add_parser("member-groups", parents=[common], help="List groups a user or group belongs to")
    p_mgroups.add_argument("provider")
    p_mgroups.add_argument("member")

    p_is = sub.add_parser("is-member", parents=[common], help="Check group membership")
    p_is.add_argument("provider")
    p_is.add_argument("user")
    p_is.add_argument("group")
    rec = p_is.add_mutually_exclusive_group()
    rec.add_argument("--recursive", dest="recursive", action="store_true", default=None)
    rec.add_argument("--no-recursive", dest="recursive", action="store_false")

    p_ue = sub.add_parser("user-exists", parents=[common], help="Check whether a user exists")
    p_ue.add_argument("provider")
    p_ue.add_argument("user")

    p_ge = sub.add_parser("group-exists", parents=[common], help="Check whether a group exists")
    p_ge.add_argument("provider")
    p_ge.add_argument("group")

    return p
