"""Gazelle — a minimal HTTP routing engine with hooks and plugins.

Routes live in a tree of path segments. Pre-request and post-response hooks
attach to any level of the tree and are inherited by child routes unless
marked otherwise. Plugins are initialized once and expose hooks for reuse.

Basic usage::

    from gazelle import App

    app = App()

    app.get("/hello", lambda: "Hello, Gazelle!")

Authentication (``pip install gazelle[jwt]``)::

    from gazelle.plugins import JwtPlugin

    app.register_plugin(JwtPlugin("supersecret"))
    app.hooks("/api", pre_hooks=[app.get_plugin(JwtPlugin).authentication_hook])
"""

__version__ = "0.1.0"
__all__ = [
    "AmbiguousRouteError",
    "App",
    "AppConfig",
    "ConfigurationError",
    "Continue",
    "GazelleContext",
    "GazelleError",
    "HTTPError",
    "Headers",
    "HookContractError",
    "NotFound",
    "PluginNotRegistered",
    "PostResponseHook",
    "PreRequestHook",
    "Request",
    "Response",
    "ShortCircuit",
    "Unauthorized",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import gazelle`` fast while providing a clean top-level API.
    """
    if name == "App":
        from gazelle.app import App

        return App

    if name == "AppConfig":
        from gazelle.config import AppConfig

        return AppConfig

    if name == "GazelleContext":
        from gazelle.context import GazelleContext

        return GazelleContext

    if name in ("Headers", "Request", "Response"):
        from gazelle import http as _http

        return getattr(_http, name)

    if name in ("Continue", "PostResponseHook", "PreRequestHook", "ShortCircuit"):
        from gazelle import hooks as _hooks

        return getattr(_hooks, name)

    if name in (
        "AmbiguousRouteError",
        "ConfigurationError",
        "GazelleError",
        "HTTPError",
        "HookContractError",
        "NotFound",
        "PluginNotRegistered",
        "Unauthorized",
    ):
        from gazelle import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
