"""``warbler routes`` — list registered routes.

Resolves an import string to a warbler App and prints every route in
the order it is matched.
"""

import argparse

from warbler.cli._resolve import load_app_or_exit
from warbler.routing.route import Route


def _handler_name(route: Route) -> str:
    if isinstance(route.handler, str):
        if route.action:
            return f"{route.handler}.{route.action}"
        return route.handler
    return getattr(route.handler, "__name__", repr(route.handler))


def format_routes(routes: list[Route]) -> str:
    """Render *routes* as an aligned NAME / METHOD / PATTERN / HANDLER table."""
    rows = [
        (
            route.name,
            route.method or "ANY",
            route.pattern,
            _handler_name(route) + (f"  [{', '.join(sorted(route.security))}]" if route.security else ""),
        )
        for route in routes
    ]
    headers = ("NAME", "METHOD", "PATTERN", "HANDLER")
    widths = [max([len(headers[i]), *(len(r[i]) for r in rows)]) for i in range(3)]

    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    lines = [fmt.format(*headers)]
    sep_len = sum(widths) + 6 + max((len(r[3]) for r in rows), default=0)
    lines.append("-" * min(sep_len, 80))
    lines.extend(fmt.format(*row) for row in rows)
    return "\n".join(lines)


def run_routes(args: argparse.Namespace) -> None:
    """List registered routes for a warbler app."""
    app = load_app_or_exit(args.app)
    app._ensure_frozen()

    routes = app.routes
    if not routes:
        print("No routes registered.")
        return
    print(format_routes(routes))
