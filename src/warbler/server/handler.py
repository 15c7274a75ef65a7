"""ASGI handler — translates ASGI scope/messages to warbler types.

The only component that touches raw ASGI directly. Converts the scope to
a typed Request, runs it through the dispatcher, and sends the Response
back through ASGI send(). This is also the boundary where exceptions
escaping a handler become error pages.
"""

from contextvars import Token

from kida import Environment

from warbler._internal.asgi import Receive, Scope, Send
from warbler.context import request_var
from warbler.dispatcher import Dispatcher, DispatchResult
from warbler.errors import HTTPError
from warbler.http.request import Request
from warbler.http.response import Response
from warbler.server.errors import handle_http_error, handle_internal_error
from warbler.server.sender import send_response
from warbler.templating.integration import environment_var


def to_response(result: DispatchResult) -> Response:
    """Turn a dispatch outcome into an HTTP response."""
    return Response(body=result.body, status=result.status)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: Dispatcher,
    kida_env: Environment | None = None,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    # Set context vars (reset after dispatch)
    token: Token[Request] = request_var.set(request)
    env_token: Token[Environment] | None = None
    if kida_env is not None:
        env_token = environment_var.set(kida_env)

    try:
        result = dispatcher.dispatch(request.path, request.method)
        response = to_response(result)
    except HTTPError as exc:
        response = handle_http_error(exc, request, dispatcher.responder)
    except Exception as exc:
        response = handle_internal_error(exc, request, dispatcher.responder, debug)
    finally:
        if env_token is not None:
            environment_var.reset(env_token)
        request_var.reset(token)

    await send_response(response, send, head=request.method == "HEAD")
