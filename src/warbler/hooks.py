"""Before/after execute hooks.

Hooks run around every matched route, in registration order:

- before hooks receive the route; their return values are ignored and
  they cannot stop the dispatch.
- after hooks receive the route and the current response text. A hook
  that returns a non-empty string replaces the response for the hooks
  after it and for the caller.

Usage::

    @app.before_execute
    def log_route(route):
        logger.info("dispatching %s", route.name)

    @app.after_execute
    def add_footer(route, response):
        return response + "<footer>warbler</footer>"
"""

from collections.abc import Iterator

from warbler._internal.types import AfterHook, BeforeHook
from warbler.errors import ConfigurationError
from warbler.routing.route import Route


class HookQueue[H]:
    """An append-only, ordered list of callbacks.

    No de-duplication and no removal: adding the same callback twice
    runs it twice.
    """

    __slots__ = ("_hooks", "_label")

    def __init__(self, label: str = "hook") -> None:
        self._label = label
        self._hooks: list[H] = []

    def append(self, hook: H) -> H:
        """Add *hook* to the end of the queue and return it."""
        if not callable(hook):
            msg = f"{self._label.capitalize()} queue provided callback is not callable: {hook!r}"
            raise ConfigurationError(msg)
        self._hooks.append(hook)
        return hook

    def __iter__(self) -> Iterator[H]:
        return iter(tuple(self._hooks))

    def __len__(self) -> int:
        return len(self._hooks)


def run_before(queue: HookQueue[BeforeHook], route: Route) -> None:
    """Call every before hook with *route*, discarding results."""
    for hook in queue:
        hook(route)


def run_after(queue: HookQueue[AfterHook], route: Route, response: str) -> str:
    """Thread *response* through every after hook and return the result."""
    for hook in queue:
        replacement = hook(route, response)
        if isinstance(replacement, str) and replacement:
            response = replacement
    return response
