"""Plugins — controller classes referenced from routes by name.

    from warbler.plugins import Plugin
"""

from warbler.plugins.base import Plugin
from warbler.plugins.resolver import HandlerResolver, PluginRegistry, normalize_action

__all__ = ["HandlerResolver", "Plugin", "PluginRegistry", "normalize_action"]
