"""Kida environment setup and request binding.

Creates a kida Environment from warbler's AppConfig. The environment is
created once during ``App._freeze()`` and made visible to plugins for the
duration of each request through ``environment_var``.
"""

from contextvars import ContextVar
from functools import lru_cache
from pathlib import Path

from kida import Environment, FileSystemLoader

from warbler.config import AppConfig
from warbler.errors import ConfigurationError

environment_var: ContextVar[Environment] = ContextVar("warbler_environment")
"""The app's template environment. Set by the ASGI handler before dispatch."""


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration."""
    return Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )


@lru_cache(maxsize=32)
def environment_for(template_dir: str | Path) -> Environment:
    """Return a shared Environment rooted at *template_dir*.

    Used by plugins that override the app's template directory.
    """
    return Environment(loader=FileSystemLoader(str(template_dir)), autoescape=True)


def current_environment() -> Environment:
    """Return the environment bound to the current request.

    Raises ``ConfigurationError`` when called outside a request and no
    environment has been bound.
    """
    try:
        return environment_var.get()
    except LookupError:
        msg = (
            "No template environment is active. Render inside a request, "
            "bind one with environment_var, or give the plugin a view_path."
        )
        raise ConfigurationError(msg) from None
