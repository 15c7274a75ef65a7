"""Error pages and the error handling pipeline for warbler requests.

The dispatcher asks an ``ErrorResponder`` for the body of 404 and 503
pages. The ASGI handler uses the same responder for ``HTTPError`` raised
by handlers and for unexpected failures (500).
"""

import html
import logging
from typing import Protocol, runtime_checkable

from kida import Environment
from kida.environment.exceptions import TemplateNotFoundError

from warbler.errors import HTTPError
from warbler.http.request import Request
from warbler.http.response import Response

logger = logging.getLogger("warbler.server")

ERROR_TEMPLATE = "errors/{status}.html"


@runtime_checkable
class ErrorResponder(Protocol):
    """Produces the body of an error page for an HTTP status code."""

    def get_error(self, status: int, detail: str = "") -> str: ...


def default_error_page(status: int, detail: str = "") -> str:
    """Minimal HTML error page."""
    return f"<h1>Oh no! {status}!</h1><p>{html.escape(detail)}</p>"


class TemplateErrorResponder:
    """Renders ``errors/<status>.html`` when the app provides one.

    The template receives ``status`` and ``detail``. Without an
    environment, or when the template does not exist, the built-in page
    is returned.
    """

    __slots__ = ("env",)

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env

    def get_error(self, status: int, detail: str = "") -> str:
        if self.env is None:
            return default_error_page(status, detail)
        try:
            template = self.env.get_template(ERROR_TEMPLATE.format(status=status))
        except TemplateNotFoundError:
            return default_error_page(status, detail)
        return template.render({"status": status, "detail": detail})


def handle_http_error(
    exc: HTTPError,
    request: Request,
    responder: ErrorResponder,
) -> Response:
    """Map an HTTPError raised by a handler to a Response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
    return Response(body=responder.get_error(exc.status, exc.detail), status=exc.status)


def handle_internal_error(
    exc: Exception,
    request: Request,
    responder: ErrorResponder,
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)
    detail = f"{type(exc).__name__}: {exc}" if debug else ""
    return Response(body=responder.get_error(500, detail), status=500)
