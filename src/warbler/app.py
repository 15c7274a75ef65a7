"""Warbler application class.

Mutable during setup (route registration, plugins, hooks).
Frozen at runtime when ``dispatch()`` or ``__call__()`` is first invoked.
"""

import inspect
import threading
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from kida import Environment

from warbler._internal.asgi import Receive, Scope, Send
from warbler._internal.types import AfterHook, BeforeHook, Handler, PluginFactory
from warbler.config import AppConfig, load_config
from warbler.dispatcher import Dispatcher, DispatchResult, RouterState
from warbler.plugins.resolver import HandlerResolver, PluginRegistry
from warbler.routing.loader import load_routes_file, register_routes, routes_from_config
from warbler.routing.route import Route
from warbler.security import Authorizer
from warbler.server.errors import ErrorResponder, TemplateErrorResponder
from warbler.server.handler import handle_request
from warbler.templating.integration import create_environment, environment_var


class App:
    """The warbler application.

    Mutable during setup (routes, plugins, hooks).
    Frozen at runtime when ``dispatch()`` or ``__call__()`` is first invoked.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the dispatcher, even when several ASGI workers
        receive their first request at once.
    """

    __slots__ = (
        "_authorizer",
        "_custom_kida_env",
        "_custom_responder",
        "_dispatcher",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_plugins",
        "_shutdown_hooks",
        "_startup_hooks",
        "_state",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        authorizer: Authorizer | None = None,
        responder: ErrorResponder | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._state = RouterState()
        self._plugins = PluginRegistry()
        self._authorizer = authorizer
        self._custom_responder = responder
        self._custom_kida_env = kida_env
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._dispatcher: Dispatcher | None = None
        self._kida_env: Environment | None = None

    @classmethod
    def from_config(cls, path: str | Path, env: str = "dev", **kwargs: Any) -> "App":
        """Create an App from a JSON or TOML config file.

        See ``warbler.config.load_config`` for the file layout. A
        ``routes_file`` entry is loaded when the app freezes.
        """
        return cls(load_config(path, env), **kwargs)

    # -- Route registration --

    def route(
        self,
        pattern: str,
        *,
        name: str | None = None,
        method: str | None = None,
        security: str | Iterable[str] | None = None,
        action: str | None = None,
        **options: Any,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            pattern: URL pattern. ``*`` is a wildcard, ``/{name}`` a
                parameter passed to the handler positionally.
            name: Route name. Defaults to the function name.
            method: Restrict to one HTTP method. Any method by default.
            security: Role name(s) required to access the route.
            action: Handler method for plugin routes.
            **options: Passed to plugin constructors.
        """

        def decorator(func: Handler) -> Handler:
            self.add_route(
                name or func.__name__,
                pattern,
                func,
                method=method,
                security=security,
                action=action,
                **options,
            )
            return func

        return decorator

    def add_route(
        self,
        name: str,
        pattern: str,
        handler: Handler | str,
        *,
        method: str | None = None,
        security: str | Iterable[str] | None = None,
        action: str | None = None,
        **options: Any,
    ) -> Route:
        """Register a route. *handler* is a callable or a plugin name.

        Routes are matched in registration order; re-using a name
        replaces the earlier route.
        """
        self._check_not_frozen()
        return self._state.add_route(
            name,
            pattern,
            handler,
            method=method,
            security=security,
            action=action,
            options=options,
        )

    def load_routes(self, source: str | Path | Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> None:
        """Register routes from a ``.json``/``.toml`` file or in-memory config data."""
        self._check_not_frozen()
        if isinstance(source, str | Path):
            specs = load_routes_file(source)
        else:
            specs = routes_from_config(source)
        register_routes(self._state.routes, specs)

    @property
    def routes(self) -> list[Route]:
        """Registered routes, in match order."""
        return self._state.routes.routes

    # -- Plugins --

    def plugin(self, name: str | None = None) -> Callable[[PluginFactory], PluginFactory]:
        """Register a plugin class under *name* (defaults to the class name)."""

        def decorator(factory: PluginFactory) -> PluginFactory:
            self.register_plugin(name or factory.__name__, factory)
            return factory

        return decorator

    def register_plugin(self, name: str, factory: PluginFactory) -> None:
        """Make *factory* available to routes whose handler is *name*."""
        self._check_not_frozen()
        self._plugins.register(name, factory)

    # -- Lifecycle hooks --

    def before_execute(self, func: BeforeHook) -> BeforeHook:
        """Register a hook called with the route before each handler runs.

        Runs after authorization. Return values are ignored.
        """
        self._check_not_frozen()
        return self._state.add_before_execute(func)

    def after_execute(self, func: AfterHook) -> AfterHook:
        """Register a hook called with ``(route, response)`` after each handler.

        Returning a non-empty string replaces the response.
        """
        self._check_not_frozen()
        return self._state.add_after_execute(func)

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Dispatch --

    @property
    def dispatcher(self) -> Dispatcher:
        """The compiled dispatcher. Freezes the app on first access."""
        self._ensure_frozen()
        assert self._dispatcher is not None
        return self._dispatcher

    def dispatch(self, url: str, method: str = "GET") -> DispatchResult:
        """Dispatch *url* synchronously, outside any server.

        Handler exceptions propagate to the caller.
        """
        dispatcher = self.dispatcher
        assert self._kida_env is not None
        token = environment_var.set(self._kida_env)
        try:
            return dispatcher.dispatch(url, method)
        finally:
            environment_var.reset(token)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        dispatcher = self.dispatcher
        await handle_request(
            scope,
            receive,
            send,
            dispatcher=dispatcher,
            kida_env=self._kida_env,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Answer the server's lifespan messages.

        Startup freezes the app, loading any routes file, then runs the
        startup hooks. Shutdown runs the shutdown hooks.
        """
        while True:
            event = (await receive())["type"]

            if event == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self._run_hooks(self._startup_hooks)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif event == "lifespan.shutdown":
                await self._run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    @staticmethod
    async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
        for hook in hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        # 1. Routes from the configured file, after decorator routes
        if self.config.routes_file:
            register_routes(self._state.routes, load_routes_file(self.config.routes_file))
        self._state.freeze()

        # 2. Template environment
        self._kida_env = self._custom_kida_env or create_environment(self.config)

        # 3. Dispatcher
        self._dispatcher = Dispatcher(
            self._state,
            HandlerResolver(
                self.config.plugin_dir,
                self._plugins,
                extension=self.config.plugin_extension,
                default_action=self.config.default_action,
            ),
            authorizer=self._authorizer,
            responder=self._custom_responder or TemplateErrorResponder(self._kida_env),
            default_action=self.config.default_action,
            forbidden_status=self.config.forbidden_status,
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, plugins, and hooks before the first request."
            )
            raise RuntimeError(msg)
