"""Warbler exception hierarchy.

Shared across the route table, resolver, dispatcher, and HTTP layer so
every module raises and catches the same types.

Registration problems are exceptions raised at setup time. A request
that matches no route, or fails authorization, is not an exception: the
dispatcher reports it as a ``DispatchResult``.
"""

from dataclasses import dataclass


class WarblerError(Exception):
    """Base for all warbler-specific errors."""


class ConfigurationError(WarblerError):
    """Raised when app configuration is invalid.

    Typically raised during setup or ``App._freeze()`` at startup.
    """


class RouteError(ConfigurationError):
    """Base for errors raised while building the route table."""


class InvalidRoute(RouteError):  # noqa: N818
    """The route pattern or route definition is malformed."""


class InvalidHandler(RouteError):  # noqa: N818
    """The route handler is neither callable nor a plugin reference."""


class NoRoutesConfigured(RouteError):  # noqa: N818
    """A URL was matched against an empty route table."""

    def __init__(self, detail: str = "No routes have been defined for the application.") -> None:
        super().__init__(detail)


class HandlerNotFound(WarblerError):  # noqa: N818
    """A plugin reference could not be resolved to a file or class."""

    def __init__(self, reference: str, path: str = "", detail: str = "") -> None:
        self.reference = reference
        self.path = path
        super().__init__(detail or f"Invalid source provided for plugin {reference!r}")


class PluginError(WarblerError):
    """A plugin was used in a way it does not support."""


@dataclass(frozen=True, slots=True)
class HTTPError(WarblerError):
    """An error that maps directly to an HTTP status code.

    Handlers raise these to short-circuit with a specific status. The
    ASGI handler catches them and renders the page through the app's
    error responder.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)
