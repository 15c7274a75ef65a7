"""Ordered route table with first-match-wins lookup.

Routes are kept in registration order and scanned linearly. There is no
specificity ranking: when two routes accept a URL, the one registered
first is chosen. Register catch-all routes (``/*``) last.
"""

import inspect
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from warbler._internal.types import Handler
from warbler.errors import InvalidHandler, InvalidRoute, NoRoutesConfigured
from warbler.routing.route import Route

logger = logging.getLogger("warbler.routing")


def normalize_security(value: str | Iterable[str] | None) -> frozenset[str] | None:
    """Turn a role name or collection of role names into a frozenset.

    ``None`` and empty values mean the route is public.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return frozenset({value}) if value else None
    roles = frozenset(str(role).strip() for role in value if str(role).strip())
    return roles or None


class RouteTable:
    """Named routes in insertion order.

    Usage::

        table = RouteTable()
        table.add("home", "/", home)
        table.add("post", "/posts/{id}", "PostController")
        route = table.match("/posts/77", "GET")
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}

    def add(
        self,
        name: str,
        pattern: str,
        handler: Handler | str,
        *,
        method: str | None = None,
        security: str | Iterable[str] | None = None,
        action: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Route:
        """Compile and store a route under *name*.

        Adding a name that already exists replaces the earlier route
        (last write wins); the table keeps the original position.

        Raises ``InvalidRoute`` if *pattern* is empty or not a string and
        ``InvalidHandler`` if *handler* is neither callable nor a
        non-empty string, or is an ``async def`` function. A failed add leaves the table unchanged.
        """
        if not isinstance(pattern, str) or not pattern:
            msg = (
                f"Invalid route provided for {name!r}. "
                "Route patterns must be a string of at least one character."
            )
            raise InvalidRoute(msg)

        if not callable(handler) and not (isinstance(handler, str) and handler.strip()):
            msg = (
                f"Invalid route handler provided for {pattern!r}. Handlers must be "
                "either a callable or a string reference to a plugin."
            )
            raise InvalidHandler(msg)

        if inspect.iscoroutinefunction(handler):
            msg = (
                f"Invalid route handler provided for {pattern!r}. Handlers are called "
                "synchronously; define them with def, not async def."
            )
            raise InvalidHandler(msg)

        route = Route(
            name=name,
            pattern=pattern,
            handler=handler.strip() if isinstance(handler, str) else handler,
            method=method or None,
            security=normalize_security(security),
            action=action or None,
            options=options or {},
        )
        if name in self._routes:
            logger.debug("Route %r redefined; replacing %r with %r", name, self._routes[name].pattern, pattern)
        self._routes[name] = route
        logger.debug("Added route %r -> %s", name, route.matcher.pattern)
        return route

    def match(self, url: str, method: str) -> Route | None:
        """Return the first route accepting *url* and *method*, or ``None``.

        Raises ``NoRoutesConfigured`` if the table is empty, so a
        misconfigured app is distinguishable from an unknown URL.
        """
        if not self._routes:
            raise NoRoutesConfigured

        url = url.rstrip("/")
        for route in self._routes.values():
            if route.matches(url, method):
                logger.debug("%s %r matched route %r", method, url, route.name)
                return route
        return None

    def get(self, name: str) -> Route | None:
        """Return the route registered under *name*, if any."""
        return self._routes.get(name)

    @property
    def routes(self) -> list[Route]:
        """All routes, in match order."""
        return list(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes.values())

    def __contains__(self, name: object) -> bool:
        return name in self._routes
