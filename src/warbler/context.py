"""Request-scoped context via ContextVar.

Provides ``request_var``, the current ``Request`` for this task/thread,
and ``match_var``, the ``RouteMatch`` being dispatched. The ASGI handler
sets the request before dispatch; the dispatcher sets the match while
hooks and the handler run. Both are reset afterwards, so authorizers,
hooks, and plugins can inspect them without the values being threaded
through every call.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from contextvars import ContextVar

from warbler.http.request import Request
from warbler.routing.route import RouteMatch

request_var: ContextVar[Request] = ContextVar("warbler_request")
"""The current request. Set by the ASGI handler before dispatch."""

match_var: ContextVar[RouteMatch] = ContextVar("warbler_route_match")
"""The matched route. Set by the dispatcher around hooks and the handler."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


def get_route_match() -> RouteMatch:
    """Return the route match being dispatched.

    Raises ``LookupError`` outside a dispatch.
    """
    return match_var.get()


def get_base_url() -> str:
    """Return the matched route's pattern up to its first placeholder.

    Handlers use it to build links back to their own route::

        @app.route("/posts/{id}")
        def post(id):
            return f'<a href="{get_base_url()}">All posts</a>'
    """
    return match_var.get().base_url
