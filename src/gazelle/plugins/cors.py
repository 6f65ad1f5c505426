"""CORS plugin.

Provides a pre-request hook that answers preflight requests and a
post-response hook that adds CORS headers to every other response::

    app.register_plugin(CorsPlugin(CorsConfig(allow_origins=("https://example.com",))))
    cors = app.get_plugin(CorsPlugin)

    app.hooks("/", pre_hooks=[cors.preflight_hook], post_hooks=[cors.headers_hook])
    app.get("/api/data", data)
    app.options("/api/data", cors.preflight)

Preflight requests still need a route to match, hence the ``OPTIONS``
registration; the pre hook answers before that handler runs.

Routes that want every CORS header without a post hook use ``cors_hook``
alone::

    app.get("/", index, pre_hooks=[cors.cors_hook])
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from gazelle.hooks import Continue, PostResponseHook, PreRequestHook, ShortCircuit
from gazelle.http.request import Request
from gazelle.http.response import Response

if TYPE_CHECKING:
    from gazelle.context import GazelleContext


ALLOW_ORIGIN = "Access-Control-Allow-Origin"
ALLOW_METHODS = "Access-Control-Allow-Methods"
ALLOW_HEADERS = "Access-Control-Allow-Headers"
EXPOSE_HEADERS = "Access-Control-Expose-Headers"
ALLOW_CREDENTIALS = "Access-Control-Allow-Credentials"
MAX_AGE = "Access-Control-Max-Age"


@dataclass(frozen=True, slots=True)
class CorsConfig:
    """CORS configuration.

    All fields have secure defaults (nothing is allowed).
    Override what you need::

        CorsConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # 10 minutes


class CorsPlugin:
    """Standards-compliant CORS as a pair of hooks.

    - ``preflight_hook`` short-circuits ``OPTIONS`` preflights from allowed
      origins with 204 and the preflight headers.
    - ``headers_hook`` adds ``Access-Control-Allow-Origin`` (plus ``Vary``,
      credentials and expose headers) to responses for allowed origins,
      including short-circuited preflights.
    - ``cors_hook`` does both from the pre-request side: every CORS header
      is set on the response before the handler runs, and preflights are
      answered with 204.
    """

    __slots__ = ("_cors_hook", "_headers_hook", "_preflight_hook", "config")

    def __init__(self, config: CorsConfig | None = None) -> None:
        self.config = config or CorsConfig()
        self._preflight_hook = PreRequestHook(self._on_request)
        self._headers_hook = PostResponseHook(self._on_response)
        self._cors_hook = PreRequestHook(self._on_request_all)

    def initialize(self, context: GazelleContext) -> None:
        """CORS holds no derived state; configuration is fixed at construction."""

    @property
    def preflight_hook(self) -> PreRequestHook:
        return self._preflight_hook

    @property
    def headers_hook(self) -> PostResponseHook:
        return self._headers_hook

    @property
    def cors_hook(self) -> PreRequestHook:
        return self._cors_hook

    @staticmethod
    def preflight(response: Response) -> Response:
        """``OPTIONS`` handler for preflights the hook declined (disallowed origin)."""
        return response.with_status(204).with_body("")

    def is_allowed_origin(self, origin: str) -> bool:
        """Check if the origin is in the allow list."""
        if "*" in self.config.allow_origins:
            return True
        return origin in self.config.allow_origins

    def _on_request(self, request: Request, response: Response) -> Continue | ShortCircuit:
        origin = request.headers.get("origin")
        if request.method != "OPTIONS" or origin is None or not self.is_allowed_origin(origin):
            return Continue(request, response)
        return ShortCircuit(self._preflight_response(request, response))

    def _on_response(self, request: Request, response: Response) -> Continue:
        origin = request.headers.get("origin")
        if origin is None or not self.is_allowed_origin(origin):
            return Continue(request, response)
        return Continue(request, self._add_cors_headers(response, origin))

    def _on_request_all(self, request: Request, response: Response) -> Continue | ShortCircuit:
        origin = request.headers.get("origin")
        if origin is None or not self.is_allowed_origin(origin):
            return Continue(request, response)
        response = self._add_all_cors_headers(response, origin)
        if request.method == "OPTIONS":
            return ShortCircuit(response.with_status(204).with_body(""))
        return Continue(request, response)

    def _add_all_cors_headers(self, response: Response, origin: str) -> Response:
        """Origin headers plus every configured header, empty lists included."""
        cfg = self.config
        response = self._add_origin_headers(response, origin)
        return response.with_headers({
            ALLOW_METHODS: ", ".join(cfg.allow_methods),
            ALLOW_HEADERS: ", ".join(cfg.allow_headers),
            EXPOSE_HEADERS: ", ".join(cfg.expose_headers),
            ALLOW_CREDENTIALS: "true" if cfg.allow_credentials else "false",
            MAX_AGE: str(cfg.max_age),
        })

    def _preflight_response(self, request: Request, response: Response) -> Response:
        """Build a preflight response. Origin headers are added by the post hook."""
        cfg = self.config
        response = response.with_status(204).with_body("")

        if request.headers.get("access-control-request-method"):
            response = response.with_header(ALLOW_METHODS, ", ".join(cfg.allow_methods))

        if cfg.allow_headers:
            response = response.with_header(ALLOW_HEADERS, ", ".join(cfg.allow_headers))

        return response.with_header(MAX_AGE, str(cfg.max_age))

    def _add_origin_headers(self, response: Response, origin: str) -> Response:
        if "*" in self.config.allow_origins and not self.config.allow_credentials:
            return response.with_header(ALLOW_ORIGIN, "*")
        return response.with_header(ALLOW_ORIGIN, origin).with_header("Vary", "Origin")

    def _add_cors_headers(self, response: Response, origin: str) -> Response:
        cfg = self.config
        response = self._add_origin_headers(response, origin)

        if cfg.allow_credentials:
            response = response.with_header(ALLOW_CREDENTIALS, "true")

        if cfg.expose_headers:
            response = response.with_header(EXPOSE_HEADERS, ", ".join(cfg.expose_headers))

        return response
