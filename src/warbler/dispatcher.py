"""Request dispatch — match, authorize, run hooks, invoke the handler.

One ``dispatch()`` call walks a single request through::

    MATCHING -> AUTHORIZING -> BEFORE_HOOKS -> INVOKING -> AFTER_HOOKS -> DONE

leaving early as ``NOT_FOUND`` when no route matches and ``FORBIDDEN``
when the route's security check fails. Neither early exit is an
exception: both come back as a ``DispatchResult`` carrying the error page.

Exceptions raised by handlers are not caught here. The ASGI layer turns
them into 500 responses.

Thread safety:
    ``RouterState`` is written during setup only and frozen before the
    first request, after which concurrent dispatches share it read-only.
    Plugin instances are created per dispatch and never shared.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from warbler._internal.types import AfterHook, BeforeHook, Handler
from warbler.context import match_var
from warbler.errors import ConfigurationError
from warbler.hooks import HookQueue, run_after, run_before
from warbler.plugins.resolver import HandlerResolver
from warbler.routing.params import extract_params, split_action
from warbler.routing.pattern import base_url
from warbler.routing.route import Route, RouteMatch
from warbler.routing.table import RouteTable
from warbler.security import Authorizer
from warbler.server.errors import ErrorResponder, TemplateErrorResponder

logger = logging.getLogger("warbler.dispatch")

_QUERY_FRAGMENT_RE = re.compile(r"[?#].*", re.DOTALL)


class DispatchState(Enum):
    """Where a request is in (or where it left) the dispatch pipeline."""

    MATCHING = "matching"
    AUTHORIZING = "authorizing"
    BEFORE_HOOKS = "before_hooks"
    INVOKING = "invoking"
    AFTER_HOOKS = "after_hooks"
    DONE = "done"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """Outcome of one dispatch.

    ``state`` is ``DONE``, ``NOT_FOUND`` or ``FORBIDDEN``. ``match`` is
    ``None`` only when nothing matched.
    """

    state: DispatchState
    status: int
    body: str
    match: RouteMatch | None = None

    @property
    def ok(self) -> bool:
        return self.state is DispatchState.DONE


def normalize_url(url: str) -> str:
    """Strip the query string, fragment, and trailing slash from *url*."""
    return _QUERY_FRAGMENT_RE.sub("", url).rstrip("/")


class RouterState:
    """The route table and hook queues of one application.

    Mutable during setup. ``freeze()`` is called before the first
    dispatch; any later registration raises ``ConfigurationError``.
    """

    __slots__ = ("_frozen", "after", "before", "routes")

    def __init__(self) -> None:
        self.routes = RouteTable()
        self.before: HookQueue[BeforeHook] = HookQueue("before")
        self.after: HookQueue[AfterHook] = HookQueue("after")
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def add_route(
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
        """Register a route. See ``RouteTable.add``."""
        self._check_not_frozen()
        return self.routes.add(
            name,
            pattern,
            handler,
            method=method,
            security=security,
            action=action,
            options=options,
        )

    def add_before_execute(self, hook: BeforeHook) -> BeforeHook:
        """Queue *hook* to run after authorization, before the handler."""
        self._check_not_frozen()
        return self.before.append(hook)

    def add_after_execute(self, hook: AfterHook) -> AfterHook:
        """Queue *hook* to run after the handler."""
        self._check_not_frozen()
        return self.after.append(hook)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify routes or hooks after dispatching has started. "
                "Register them before the first request."
            )
            raise ConfigurationError(msg)


class Dispatcher:
    """Runs requests against a ``RouterState``.

    Args:
        state: Routes and hooks to dispatch against.
        resolver: Invokes the matched handler.
        authorizer: Checks routes that declare ``security``. Secured
            routes are forbidden when there is none.
        responder: Produces the 404 and forbidden pages.
        default_action: Action used when neither the URL nor the route
            names one.
        forbidden_status: Status reported for failed authorization.
    """

    __slots__ = ("authorizer", "default_action", "forbidden_status", "resolver", "responder", "state")

    def __init__(
        self,
        state: RouterState,
        resolver: HandlerResolver,
        *,
        authorizer: Authorizer | None = None,
        responder: ErrorResponder | None = None,
        default_action: str = "_default",
        forbidden_status: int = 503,
    ) -> None:
        self.state = state
        self.resolver = resolver
        self.authorizer = authorizer
        self.responder: ErrorResponder = responder or TemplateErrorResponder()
        self.default_action = default_action
        self.forbidden_status = forbidden_status

    def match(self, url: str, method: str = "GET") -> RouteMatch | None:
        """Match *url* and resolve its parameters and action.

        Returns ``None`` when no route matches.
        Raises ``NoRoutesConfigured`` when the route table is empty.
        """
        url = normalize_url(url)
        route = self.state.routes.match(url, method)
        if route is None:
            return None

        url_action, params = split_action(extract_params(url, route))
        action = url_action or route.action or self.default_action
        return RouteMatch(route=route, params=params, action=action, base_url=base_url(route.pattern))

    def dispatch(self, url: str, method: str = "GET") -> DispatchResult:
        """Run one request through the pipeline."""
        # MATCHING
        match = self.match(url, method)
        if match is None:
            logger.debug("%s %r -> %s", method, url, DispatchState.NOT_FOUND.value)
            return DispatchResult(
                state=DispatchState.NOT_FOUND,
                status=404,
                body=self.responder.get_error(404),
            )
        route = match.route

        # AUTHORIZING
        if route.security and not self._authorized(route):
            logger.debug("%s %r -> %s (route %r)", method, url, DispatchState.FORBIDDEN.value, route.name)
            return DispatchResult(
                state=DispatchState.FORBIDDEN,
                status=self.forbidden_status,
                body=self.responder.get_error(self.forbidden_status),
                match=match,
            )

        token = match_var.set(match)
        try:
            # BEFORE_HOOKS
            run_before(self.state.before, route)

            # INVOKING
            logger.debug("%s %r -> route %r, action %r", method, url, route.name, match.action)
            response = self.resolver.resolve(
                route.handler,
                match.action,
                route.options,
                tuple(match.params.values()),
            )

            # AFTER_HOOKS
            response = run_after(self.state.after, route, response)
        finally:
            match_var.reset(token)

        return DispatchResult(state=DispatchState.DONE, status=200, body=response, match=match)

    def run_url(self, url: str, method: str = "GET") -> str:
        """Dispatch *url* and return only the response body."""
        return self.dispatch(url, method).body

    def _authorized(self, route: Route) -> bool:
        if self.authorizer is None:
            return False
        return bool(self.authorizer.is_authorized(route.security or ()))
