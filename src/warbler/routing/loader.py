"""Route definitions from configuration data.

Two encodings are accepted. A list of routes::

    [
        {"name": "home", "url": "/", "handler": "Home"},
        {"name": "post", "url": "/posts/{id}", "handler": "PostController", "method": "get"}
    ]

or a mapping keyed by route name::

    {
        "home": {"url": "/", "handler": "Home"},
        "admin": {"url": "/admin/{_action}", "handler": "Admin", "security": ["admin"]}
    }

Each route takes ``url`` (or ``pattern``), ``handler``, and optionally
``method``, ``security``, and ``action``. Any other key, and the contents
of a nested ``options`` mapping, become the route's options and are passed
to the plugin constructor.

Files ending in ``.json`` or ``.toml`` are read by ``load_routes_file()``.
A TOML file keeps its routes under a top-level ``routes`` key.
"""

import json
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from warbler.errors import InvalidRoute
from warbler.routing.table import RouteTable

_RESERVED = frozenset({"name", "url", "pattern", "handler", "method", "security", "action", "options"})


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """A route definition read from configuration, not yet compiled."""

    name: str
    pattern: str
    handler: str
    method: str | None = None
    security: str | tuple[str, ...] | None = None
    action: str | None = None
    options: dict[str, Any] = field(default_factory=dict)


def _route_spec(name: str, entry: Any) -> RouteSpec:
    if not isinstance(entry, Mapping) or not entry:
        msg = f"Invalid route provided for {name!r}: expected a mapping of route options."
        raise InvalidRoute(msg)

    pattern = entry.get("url", entry.get("pattern"))
    handler = entry.get("handler")
    if not isinstance(pattern, str) or not pattern:
        msg = f"Invalid route provided for {name!r}: missing 'url'."
        raise InvalidRoute(msg)
    if not isinstance(handler, str) or not handler.strip():
        msg = f"Invalid route provided for {name!r}: missing 'handler'."
        raise InvalidRoute(msg)

    options = {k: v for k, v in entry.items() if k not in _RESERVED}
    nested = entry.get("options")
    if nested is not None:
        if not isinstance(nested, Mapping):
            msg = f"Invalid route provided for {name!r}: 'options' must be a mapping."
            raise InvalidRoute(msg)
        options.update(nested)

    security = entry.get("security")
    if security is not None and not isinstance(security, str):
        security = tuple(security)

    return RouteSpec(
        name=name,
        pattern=pattern,
        handler=handler,
        method=entry.get("method") or None,
        security=security or None,
        action=entry.get("action") or None,
        options=options,
    )


def routes_from_config(data: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> list[RouteSpec]:
    """Reduce either configuration encoding to a list of ``RouteSpec``.

    Order is preserved, since it decides which route wins a match.
    Raises ``InvalidRoute`` naming the first malformed entry.
    """
    if isinstance(data, Mapping):
        return [_route_spec(str(name), entry) for name, entry in data.items()]

    if isinstance(data, str | bytes):
        msg = "Route configuration must be a list or mapping, not a string."
        raise InvalidRoute(msg)

    specs: list[RouteSpec] = []
    for index, entry in enumerate(data):
        name = entry.get("name") if isinstance(entry, Mapping) else None
        if not isinstance(name, str) or not name:
            msg = f"Invalid route provided at position {index}: missing 'name'."
            raise InvalidRoute(msg)
        specs.append(_route_spec(name, entry))
    return specs


def load_routes_file(path: str | Path) -> list[RouteSpec]:
    """Read route definitions from a ``.json`` or ``.toml`` file.

    Raises ``InvalidRoute`` if the path is empty, the file is missing or
    unreadable, its contents cannot be parsed or are empty, or the file
    type is not supported.
    """
    if not path:
        msg = "Empty routes file provided."
        raise InvalidRoute(msg)

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".json", ".toml"):
        msg = f"Invalid routes file type {suffix!r}. Only JSON and TOML are accepted."
        raise InvalidRoute(msg)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Routes file {str(path)!r} either does not exist or is not readable."
        raise InvalidRoute(msg) from exc

    try:
        data: Any = json.loads(text) if suffix == ".json" else tomllib.loads(text).get("routes")
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        msg = f"Could not parse the routes file {str(path)!r}: {exc}"
        raise InvalidRoute(msg) from exc

    if not data:
        msg = f"Routes file {str(path)!r} does not define any routes."
        raise InvalidRoute(msg)

    return routes_from_config(data)


def register_routes(table: RouteTable, specs: Iterable[RouteSpec]) -> None:
    """Add every spec to *table* in order."""
    for spec in specs:
        table.add(
            spec.name,
            spec.pattern,
            spec.handler,
            method=spec.method,
            security=spec.security,
            action=spec.action,
            options=spec.options,
        )
