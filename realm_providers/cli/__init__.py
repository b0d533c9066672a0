"""realm-providers command line interface (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``; it performs no
realm logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import run_command
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error).
    """
    args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    return run_command(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
