"""Gazelle application class.

Mutable during setup (routes, hooks, plugins, error handlers).
Frozen at runtime when ``__call__()`` or ``dispatch()`` is first invoked.
"""

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from gazelle._internal.asgi import Receive, Scope, Send
from gazelle._internal.invoke import invoke
from gazelle._internal.types import ErrorHandler, Handler
from gazelle.config import AppConfig
from gazelle.context import GazelleContext
from gazelle.hooks import PostResponseHook, PreRequestHook
from gazelle.http.request import Request
from gazelle.http.response import Response
from gazelle.plugins.protocol import Plugin
from gazelle.routing.router import Router
from gazelle.server.handler import handle_request
from gazelle.server.pipeline import dispatch

logger = logging.getLogger("gazelle.app")

P = TypeVar("P")


class App:
    """The gazelle application.

    Usage::

        app = App()
        app.register_plugin(JwtPlugin("supersecret"))

        app.get(
            "/hello",
            lambda: "Hello, Gazelle!",
            pre_hooks=[app.get_plugin(JwtPlugin).authentication_hook],
        )

    Routes are inserted into the tree immediately, so an ambiguous pattern
    raises at the registration call.

    Thread safety:
        Setup is single-threaded (decorators at import time). The freeze
        transition uses a Lock + double-check so exactly one caller
        compiles the router, even if several ASGI workers hit the first
        request concurrently.
    """

    __slots__ = (
        "_context",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._context: GazelleContext = GazelleContext()
        self._router: Router = Router()
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. Use ``:name`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
            pre_hooks: Hooks run before the handler, after inherited ones.
            post_hooks: Hooks run after the handler, after inherited ones.
        """
        pre = tuple(pre_hooks)
        post = tuple(post_hooks)

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add_route(method, path, func, pre_hooks=pre, post_hooks=post)
            return func

        return decorator

    def add_route(
        self,
        method: str,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register *handler* for *method* at *path*.

        Raises ``AmbiguousRouteError`` on a conflicting pattern.
        """
        self._check_not_frozen()
        self._router.add(method, path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def get(
        self,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register a GET handler."""
        self.add_route("GET", path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def post(
        self,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register a POST handler."""
        self.add_route("POST", path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def put(
        self,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register a PUT handler."""
        self.add_route("PUT", path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def patch(
        self,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register a PATCH handler."""
        self.add_route("PATCH", path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def delete(
        self,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register a DELETE handler."""
        self.add_route("DELETE", path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def head(
        self,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register a HEAD handler."""
        self.add_route("HEAD", path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def options(
        self,
        path: str,
        handler: Handler,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Register an OPTIONS handler."""
        self.add_route("OPTIONS", path, handler, pre_hooks=pre_hooks, post_hooks=post_hooks)

    def hooks(
        self,
        path: str,
        *,
        pre_hooks: Iterable[PreRequestHook] = (),
        post_hooks: Iterable[PostResponseHook] = (),
    ) -> None:
        """Attach hooks to *path* without registering a handler.

        Shared hooks attached here run for every route below *path*::

            app.hooks("/api", pre_hooks=[jwt.authentication_hook])
            app.get("/api/users", list_users)  # authenticated
            app.hooks("/", post_hooks=[cors.headers_hook])  # every route
        """
        self._check_not_frozen()
        self._router.attach_hooks(path, pre_hooks=pre_hooks, post_hooks=post_hooks)

    @property
    def router(self) -> Router:
        return self._router

    # -- Plugins --

    def register_plugin(self, plugin: Plugin) -> None:
        """Initialize *plugin* once and make it available via ``get_plugin``."""
        self._check_not_frozen()
        self._context.register(plugin)

    def get_plugin(self, plugin_type: type[P]) -> P:
        """Return the registered instance of *plugin_type*.

        Raises ``PluginNotRegistered`` if it was never registered.
        """
        return self._context.get(plugin_type)

    @property
    def context(self) -> GazelleContext:
        return self._context

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator.

        Used for framework-generated errors (404 for unmatched paths,
        500 for handler failures, ``HTTPError`` raised by handlers)::

            @app.error(404)
            def not_found(request):
                return f"Nothing at {request.path}"
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Lifecycle hooks --

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

    # -- Request handling --

    async def dispatch(self, request: Request) -> Response:
        """Run *request* through the pipeline without any transport."""
        self._ensure_frozen()
        return await dispatch(
            request,
            self._router,
            error_handlers=self._error_handlers,
            config=self.config,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            error_handlers=self._error_handlers,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), then
        runs registered startup/shutdown hooks.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Freeze the app and run startup hooks in registration order."""
        self._ensure_frozen()
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            await invoke(hook)

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
        self._router.compile()
        self._frozen = True
        logger.debug(
            "App frozen: %d routes, %d plugins",
            len(self._router.routes),
            len(self._context),
        )

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, hooks, and plugins before the first request."
            )
            raise RuntimeError(msg)
