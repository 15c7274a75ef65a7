"""Warbler CLI — route inspection.

Entry point registered as ``warbler`` in ``pyproject.toml``::

    [project.scripts]
    warbler = "warbler.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``warbler`` command."""
    parser = argparse.ArgumentParser(
        prog="warbler",
        description="Warbler — routing and dispatch for Python web apps.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- warbler routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List routes in match order")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    # -- warbler match ----------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Show which route a URL dispatches to")
    match_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    match_parser.add_argument("url", help="URL path to match (e.g. /posts/7)")
    match_parser.add_argument("--method", default="GET", help="HTTP method (default GET)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from warbler.cli._routes import run_routes

        run_routes(args)
    elif args.command == "match":
        from warbler.cli._match import run_match

        run_match(args)
