"""Gazelle exception hierarchy.

Shared across Router, App, pipeline, and plugins so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class GazelleError(Exception):
    """Base for all gazelle-specific errors."""


class ConfigurationError(GazelleError):
    """Raised when app wiring is invalid.

    Surfaces at setup time (route registration, plugin registration),
    never per request.
    """


class AmbiguousRouteError(ConfigurationError):
    """Raised when a registration would make matching ambiguous.

    Two dynamic siblings under the same parent (``/a/:x`` and ``/a/:y``),
    or the same method registered twice on the same path.
    """


class PluginNotRegistered(GazelleError, LookupError):  # noqa: N818
    """Raised when looking up a plugin that was never registered."""

    def __init__(self, plugin_type: type) -> None:
        self.plugin_type = plugin_type
        super().__init__(
            f"Plugin {plugin_type.__name__} is not registered. "
            "Call app.register_plugin() before asking for it."
        )


class HookContractError(GazelleError):
    """Raised when a hook returns something other than a hook result."""


@dataclass(frozen=True, slots=True)
class HTTPError(GazelleError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, hooks, or handlers. The pipeline catches these
    and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request path and method."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Unauthorized(HTTPError):  # noqa: N818
    """401 — the request lacks valid credentials."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(status=401, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413 — the request body exceeds ``AppConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            status=413,
            detail=f"Request body exceeds the {limit} byte limit",
        )
