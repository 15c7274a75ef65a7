"""Locate the App named on the command line.

``APP`` arguments look like ``package.module:attribute``. The attribute
defaults to ``app``; when it names a factory function, the factory is
called with no arguments.
"""

import importlib
import sys

from warbler.app import App


def resolve_app(import_string: str) -> App:
    """Import *import_string* and return the warbler App it names.

    Raises ``ModuleNotFoundError`` or ``AttributeError`` when the target
    does not exist and ``TypeError`` when it is not an App (or a factory
    returning one).
    """
    module_name, _, attr = import_string.partition(":")
    target = getattr(importlib.import_module(module_name), attr or "app")

    if not isinstance(target, App) and callable(target):
        try:
            target = target()
        except Exception as exc:
            msg = f"App factory {import_string!r} failed: {exc}"
            raise TypeError(msg) from exc

    if isinstance(target, App):
        return target

    msg = f"{import_string!r} resolved to {type(target).__name__}, not a warbler.App instance"
    raise TypeError(msg)


def load_app_or_exit(import_string: str) -> App:
    """Like ``resolve_app``, but report failures on stderr and exit 1."""
    try:
        return resolve_app(import_string)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
