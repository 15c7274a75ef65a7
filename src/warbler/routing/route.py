"""Route and RouteMatch frozen dataclasses."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from warbler._internal.types import Handler
from warbler.routing.pattern import compile_pattern


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    The matcher is compiled from ``pattern`` when the route is created
    and never recomputed per request.

    ``security`` is ``None`` for public routes, otherwise the set of role
    names of which the current user needs at least one.
    ``options`` is handed to plugin constructors as-is.
    """

    name: str
    pattern: str
    handler: Handler | str
    method: str | None = None
    security: frozenset[str] | None = None
    action: str | None = None
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    matcher: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "matcher", compile_pattern(self.pattern))
        if self.method is not None:
            object.__setattr__(self, "method", self.method.strip().upper())
        if not isinstance(self.options, MappingProxyType):
            object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def allows(self, method: str) -> bool:
        """True if the route accepts *method*.

        Routes without a filter accept any method; ``GET`` routes also
        accept ``HEAD``.
        """
        if self.method is None:
            return True
        method = method.strip().upper()
        return self.method == method or (method == "HEAD" and self.method == "GET")

    def matches(self, url: str, method: str) -> bool:
        """True if *url* and *method* both satisfy this route."""
        return self.allows(method) and self.matcher.match(url) is not None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``params`` holds the named placeholders, minus the reserved
    ``_action``; ``action`` is the handler method that will be called.
    ``base_url`` is the route pattern up to its first placeholder, for
    building links back to the route (``/widgets`` for
    ``/widgets/{_action}/{id}``).
    """

    route: Route
    params: dict[str, str]
    action: str
    base_url: str = ""
