"""Howl CLI — howl dev / howl serve.

Entry point for the ``howl`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the howl CLI."""
    parser = argparse.ArgumentParser(
        prog="howl",
        description="Multi-product changelog site on the Bengal stack.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    dev_parser = subparsers.add_parser(
        "dev",
        help="Start a development server that reloads content on change",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    dev_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    dev_parser.add_argument("--port", type=int, default=3000, help="Bind port")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the production server",
    )
    serve_parser.add_argument("root", nargs="?", default=".", help="Site root directory")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--workers", type=int, default=0, help="Worker count (0=auto)")

    return parser


def _get_version() -> str:
    from howl import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from howl._errors import HowlError
    from howl.app import dev, serve

    try:
        if args.command == "dev":
            dev(root=args.root, host=args.host, port=args.port)
        elif args.command == "serve":
            serve(root=args.root, host=args.host, port=args.port, workers=args.workers)
    except HowlError as exc:
        print(f"howl: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
