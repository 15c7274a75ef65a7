"""Path parameter extraction.

Pulls the values of ``/{name}`` placeholders out of a matched URL::

    extract_params("/events/2024-05-01/launch", "/events/{date}/{title}")
    # {"date": "2024-05-01", "title": "launch"}

The ``_action`` placeholder is reserved: the dispatcher removes it from
the parameters and uses its value as the handler method to call.
"""

from warbler.routing.pattern import compile_pattern, placeholder_names
from warbler.routing.route import Route

ACTION_PARAM = "_action"


def extract_params(url: str, route: Route | str) -> dict[str, str]:
    """Map each placeholder of *route* to its value in *url*.

    Returns an empty dict, without running any regex, when the pattern
    declares no placeholders. A placeholder whose segment is absent from
    the URL maps to ``""``.
    """
    pattern = route.pattern if isinstance(route, Route) else route
    names = placeholder_names(pattern)
    if not names:
        return {}

    match = compile_pattern(pattern).match(url.rstrip("/"))
    groups: tuple[str | None, ...] = match.groups() if match else ()

    params: dict[str, str] = {}
    for i, name in enumerate(names):
        value = groups[i] if i < len(groups) else None
        params[name] = value or ""
    return params


def split_action(params: dict[str, str]) -> tuple[str | None, dict[str, str]]:
    """Separate the reserved ``_action`` value from the other parameters.

    A blank ``_action`` (e.g. ``/widgets`` against ``/widgets/{_action}``)
    is dropped without overriding anything.
    """
    if ACTION_PARAM not in params:
        return None, params
    rest = {k: v for k, v in params.items() if k != ACTION_PARAM}
    return params[ACTION_PARAM] or None, rest
