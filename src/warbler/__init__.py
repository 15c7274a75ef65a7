"""Warbler — a small routing and dispatch framework for Python web apps.

Routes map URL patterns to callables or to plugin classes loaded by name.
Matched requests pass through an authorization check and before/after
hooks, and the handler's return value becomes the response body.

Basic usage::

    from warbler import App

    app = App()

    @app.route("/")
    def index():
        return "Hello, World!"

    @app.route("/posts/{id}")
    def post(id):
        return f"Post {id}"

    app.add_route("admin", "/admin/{_action}", "AdminController", security="admin")

Serve ``app`` with any ASGI server, or call ``app.dispatch("/posts/7")``
directly.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "DispatchResult",
    "DispatchState",
    "HTTPError",
    "HandlerNotFound",
    "InvalidHandler",
    "InvalidRoute",
    "NoRoutesConfigured",
    "Plugin",
    "Request",
    "Response",
    "RoleAuthorizer",
    "Route",
    "WarblerError",
    "get_base_url",
    "get_request",
    "get_route_match",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import warbler`` fast while providing a clean top-level API.
    """
    if name == "App":
        from warbler.app import App

        return App

    if name == "AppConfig":
        from warbler.config import AppConfig

        return AppConfig

    if name in ("DispatchResult", "DispatchState"):
        from warbler import dispatcher as _dispatcher

        return getattr(_dispatcher, name)

    if name == "Plugin":
        from warbler.plugins.base import Plugin

        return Plugin

    if name == "Request":
        from warbler.http.request import Request

        return Request

    if name == "Response":
        from warbler.http.response import Response

        return Response

    if name == "RoleAuthorizer":
        from warbler.security import RoleAuthorizer

        return RoleAuthorizer

    if name == "Route":
        from warbler.routing.route import Route

        return Route

    if name in ("get_base_url", "get_request", "get_route_match"):
        from warbler import context as _context

        return getattr(_context, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "HandlerNotFound",
        "InvalidHandler",
        "InvalidRoute",
        "NoRoutesConfigured",
        "WarblerError",
    ):
        from warbler import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
