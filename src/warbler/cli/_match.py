"""``warbler match`` — show which route a URL dispatches to.

Runs only the matching step: no authorization, hooks, or handlers.
"""

import argparse
import sys

from warbler.cli._resolve import load_app_or_exit
from warbler.errors import NoRoutesConfigured


def run_match(args: argparse.Namespace) -> None:
    """Print the route, parameters, and action for ``args.url``.

    Exits with status 1 when nothing matches.
    """
    app = load_app_or_exit(args.app)

    try:
        match = app.dispatcher.match(args.url, args.method)
    except NoRoutesConfigured as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if match is None:
        print(f"No route matches {args.method.upper()} {args.url!r}")
        raise SystemExit(1)

    route = match.route
    print(f"route:   {route.name}")
    print(f"pattern: {route.pattern}")
    if isinstance(route.handler, str):
        print(f"handler: {route.handler}")
        print(f"action:  {match.action}")
    else:
        print(f"handler: {getattr(route.handler, '__name__', repr(route.handler))}")
    if route.security:
        print(f"roles:   {', '.join(sorted(route.security))}")
    for name, value in match.params.items():
        print(f"param:   {name} = {value!r}")
