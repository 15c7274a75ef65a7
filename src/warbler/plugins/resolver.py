"""Handler resolution — turns a route's handler into response text.

A handler is either a callable, invoked with the path parameters
positionally, or a string naming a plugin. Plugin names are looked up in
a ``PluginRegistry`` first. On a miss, the resolver loads the plugin file
from the plugin directory, registers the class it finds there, and uses
it for this and every later request in the process.

Resolution of ``"PostController"`` with ``plugin_dir="plugins"``::

    plugins/PostController.py  ->  class PostController  ->  PostController(options)

then the action method (or ``_default``) is called on the new instance.
"""

import importlib.util
import logging
import re
import sys
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from warbler._internal.types import PluginFactory
from warbler.errors import HandlerNotFound
from warbler.plugins.base import Plugin

logger = logging.getLogger("warbler.plugins")

_ACTION_SEPARATORS_RE = re.compile(r"[-\s]")


def normalize_action(action: str | None) -> str:
    """Map a URL-friendly action name to a method name.

    ``"this-method name"`` -> ``"this_method_name"``.
    """
    if not action:
        return ""
    return _ACTION_SEPARATORS_RE.sub("_", action.strip())


def to_text(result: Any) -> str:
    """Coerce a handler's return value to response text."""
    if result is None:
        return ""
    if isinstance(result, bytes):
        return result.decode("utf-8")
    return str(result)


class PluginRegistry:
    """Plugin name -> factory called with the route's options.

    Factories are usually plugin classes. Register them at startup::

        registry = PluginRegistry()
        registry.register("PostController", PostController)
    """

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        self._factories: dict[str, PluginFactory] = {}

    def register(self, name: str, factory: PluginFactory) -> PluginFactory:
        """Register *factory* under *name*, replacing any earlier entry."""
        if not callable(factory):
            msg = f"Plugin factory for {name!r} is not callable: {factory!r}"
            raise TypeError(msg)
        self._factories[name] = factory
        return factory

    def get(self, name: str) -> PluginFactory | None:
        return self._factories.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)


class HandlerResolver:
    """Invokes route handlers, loading plugin classes on demand.

    Args:
        plugin_dir: Directory searched for plugin references without a
            directory component.
        registry: Registry of known plugins. A fresh one is created when
            omitted.
        extension: File extension appended to bare plugin names.
        default_action: Method called when no usable action is given.
    """

    __slots__ = ("_loaded", "default_action", "extension", "plugin_dir", "registry")

    def __init__(
        self,
        plugin_dir: str | Path = "plugins",
        registry: PluginRegistry | None = None,
        *,
        extension: str = ".py",
        default_action: str = "_default",
    ) -> None:
        self.plugin_dir = Path(plugin_dir)
        self.registry = registry if registry is not None else PluginRegistry()
        self.extension = extension
        self.default_action = default_action
        # Resolved file path -> module, so a file is executed once per process
        self._loaded: dict[Path, Any] = {}

    def resolve(
        self,
        handler: Any,
        action: str | None = None,
        options: Mapping[str, Any] | None = None,
        params: Sequence[str] = (),
    ) -> str:
        """Invoke *handler* and return its result as text.

        Exceptions raised by the handler propagate unchanged.
        Raises ``HandlerNotFound`` if a plugin reference cannot be loaded.
        """
        if callable(handler):
            return to_text(handler(*params))

        factory = self.find(handler)
        plugin = factory(dict(options or {}))
        method_name = normalize_action(action)
        method = getattr(plugin, method_name, None) if self.is_action(method_name) else None
        if method is not None and callable(method):
            logger.debug("Calling %s.%s", type(plugin).__name__, method_name)
            return to_text(method(*params))

        logger.debug("Calling %s.%s", type(plugin).__name__, self.default_action)
        return to_text(getattr(plugin, self.default_action)())

    def is_action(self, name: str) -> bool:
        """True if *name* may be called as an action on a plugin.

        Private names and anything the ``Plugin`` base class defines, such
        as ``render`` or ``configure``, are not actions. Requests naming
        one get the default action instead.
        """
        return bool(name) and not name.startswith("_") and not hasattr(Plugin, name)

    def find(self, reference: str) -> PluginFactory:
        """Return the factory for plugin *reference*, loading it if needed."""
        factory = self.registry.get(reference)
        if factory is not None:
            return factory

        path = self.plugin_path(reference)
        factory = self.registry.get(path.stem)
        if factory is not None and Path(reference).parent == Path("."):
            return factory

        cls = self._load_class(reference, path)
        self.registry.register(reference, cls)
        return cls

    def plugin_path(self, reference: str) -> Path:
        """Map a plugin reference to the file it should live in.

        ``"Post"`` -> ``<plugin_dir>/Post.py``; ``"Post.py"`` ->
        ``<plugin_dir>/Post.py``; ``"lib/Post.py"`` is used as given.
        """
        ref = Path(reference)
        if ref.parent != Path("."):
            return ref
        if ref.suffix:
            return self.plugin_dir / ref.name
        return self.plugin_dir / f"{ref.name}{self.extension}"

    def _load_class(self, reference: str, path: Path) -> type:
        if not path.is_file():
            raise HandlerNotFound(reference, str(path))

        resolved = path.resolve()
        module = self._loaded.get(resolved)
        if module is None:
            module = self._exec_module(reference, resolved)

        cls = getattr(module, path.stem, None)
        if not isinstance(cls, type):
            raise HandlerNotFound(
                reference,
                str(path),
                f"Plugin file {str(path)!r} does not define a class named {path.stem!r}",
            )
        return cls

    def _exec_module(self, reference: str, path: Path) -> Any:
        module_name = f"_warbler_plugin_{path.stem}_{abs(hash(path)):x}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise HandlerNotFound(reference, str(path))

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            del sys.modules[module_name]
            raise
        self._loaded[path] = module
        logger.debug("Loaded plugin module %s from %s", module_name, path)
        return module
