"""Plugin — the base controller class for string handler references.

A plugin is a class living in a file of the same name inside the app's
plugin directory (``plugins/PostController.py`` defines
``class PostController``). Each request that routes to it gets a fresh
instance built from the route's options.

Usage::

    from warbler.plugins import Plugin

    class PostController(Plugin):
        per_page = 10

        def _default(self):
            return self.render("posts/index.html", per_page=self.per_page)

        def show(self, id):
            return self.render("posts/show.html", id=id)
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from kida import Environment

from warbler.errors import PluginError
from warbler.templating.integration import current_environment, environment_for

logger = logging.getLogger("warbler.plugins")


class Plugin:
    """Base controller. Subclasses override ``_default`` and add actions.

    Options whose key names a public attribute declared on the class
    replace that attribute on the instance. Anything else is ignored,
    so several plugins can share one route options block.
    """

    # Overrides the app's template directory for this plugin
    view_path: str | Path = ""

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        self.configure(options or {})

    def configure(self, options: Mapping[str, Any]) -> bool:
        """Apply recognised *options*; return True if any were given."""
        if not options:
            return False
        for key, value in options.items():
            if key.startswith("_") or not hasattr(type(self), key):
                logger.debug("%s ignores option %r", type(self).__name__, key)
                continue
            setattr(self, key, value)
        return True

    def _default(self) -> Any:
        msg = (
            f"You have reached the default action of {type(self).__name__}. "
            "Define a _default() method on the plugin."
        )
        raise PluginError(msg)

    @property
    def environment(self) -> Environment:
        """The template environment this plugin renders with."""
        if self.view_path:
            return environment_for(str(self.view_path))
        return current_environment()

    def render(self, template: str, **context: Any) -> str:
        """Render *template* with *context*."""
        return self.environment.get_template(template).render(context)

    def render_string(self, source: str, **context: Any) -> str:
        """Render an inline template *source* with *context*."""
        return self.environment.from_string(source).render(context)
