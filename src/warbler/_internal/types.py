"""Shared type aliases used across warbler modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: a callable taking the path params positionally
Handler: TypeAlias = Callable[..., Any]

# Before hooks receive the route; after hooks receive (route, response)
BeforeHook: TypeAlias = Callable[..., Any]
AfterHook: TypeAlias = Callable[..., Any]

# Plugin factory, called with the route's options mapping
PluginFactory: TypeAlias = Callable[..., Any]
