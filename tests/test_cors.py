"""Tests for the CORS plugin."""

from gazelle.app import App
from gazelle.plugins.cors import CorsConfig, CorsPlugin
from gazelle.testing import TestClient


def _make_cors_app(config: CorsConfig | None = None) -> App:
    """Helper: create an app with the CORS hooks on the root and a simple route."""
    app = App()
    app.register_plugin(CorsPlugin(config))
    cors = app.get_plugin(CorsPlugin)
    app.hooks("/", pre_hooks=[cors.preflight_hook], post_hooks=[cors.headers_hook])

    app.get("/api/data", lambda: "hello")
    app.post("/api/data", lambda: ("created", 201))
    app.options("/api/data", cors.preflight)
    return app


class TestCorsNonCorsRequests:
    """Requests without an Origin header should pass through unaffected."""

    async def test_no_origin_header(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data")
            assert response.status == 200
            assert "access-control-allow-origin" not in response.headers


class TestCorsSimpleRequests:
    async def test_allowed_origin_gets_cors_headers(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://example.com"})
            assert response.status == 200
            assert response.headers["access-control-allow-origin"] == "https://example.com"
            assert response.headers["vary"] == "Origin"

    async def test_disallowed_origin_no_headers(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://evil.com"})
            assert response.status == 200
            assert "access-control-allow-origin" not in response.headers

    async def test_wildcard_origin(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://any.site"})
            assert response.headers["access-control-allow-origin"] == "*"
            assert "vary" not in response.headers

    async def test_credentials_echo_origin(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("*",), allow_credentials=True))
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.com"})
            assert response.headers["access-control-allow-origin"] == "https://a.com"
            assert response.headers["access-control-allow-credentials"] == "true"

    async def test_expose_headers(self) -> None:
        app = _make_cors_app(
            CorsConfig(allow_origins=("*",), expose_headers=("X-Request-Id", "X-Total")),
        )
        async with TestClient(app) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.com"})
            assert response.headers["access-control-expose-headers"] == "X-Request-Id, X-Total"

    async def test_post_keeps_status(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.post("/api/data", headers={"Origin": "https://a.com"})
            assert response.status == 201
            assert response.headers["access-control-allow-origin"] == "*"


class TestCorsPreflight:
    async def test_preflight_short_circuits_with_204(self) -> None:
        app = _make_cors_app(
            CorsConfig(
                allow_origins=("https://example.com",),
                allow_methods=("GET", "POST"),
                allow_headers=("Authorization", "Content-Type"),
                max_age=3600,
            ),
        )
        async with TestClient(app) as client:
            response = await client.options(
                "/api/data",
                headers={
                    "Origin": "https://example.com",
                    "Access-Control-Request-Method": "POST",
                },
            )
            assert response.status == 204
            assert response.body == b""
            assert response.headers["access-control-allow-methods"] == "GET, POST"
            assert response.headers["access-control-allow-headers"] == "Authorization, Content-Type"
            assert response.headers["access-control-max-age"] == "3600"
            assert response.headers["access-control-allow-origin"] == "https://example.com"

    async def test_preflight_disallowed_origin(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("https://example.com",)))
        async with TestClient(app) as client:
            response = await client.options(
                "/api/data",
                headers={"Origin": "https://evil.com", "Access-Control-Request-Method": "POST"},
            )
            assert response.status == 204
            assert "access-control-allow-origin" not in response.headers
            assert "access-control-allow-methods" not in response.headers

    async def test_preflight_needs_a_route(self) -> None:
        app = _make_cors_app(CorsConfig(allow_origins=("*",)))
        async with TestClient(app) as client:
            response = await client.options("/unknown", headers={"Origin": "https://a.com"})
            assert response.status == 404


ALL_CORS_HEADERS = (
    "access-control-allow-origin",
    "access-control-allow-methods",
    "access-control-allow-headers",
    "access-control-expose-headers",
    "access-control-allow-credentials",
    "access-control-max-age",
)


class TestCorsHook:
    """``cors_hook`` alone, attached to a single route."""

    def _app(self, config: CorsConfig) -> App:
        app = App()
        app.register_plugin(CorsPlugin(config))
        cors = app.get_plugin(CorsPlugin)
        app.get("/", lambda: "Hello, Gazelle!", pre_hooks=[cors.cors_hook])
        app.options("/", cors.preflight, pre_hooks=[cors.cors_hook])
        return app

    async def test_plain_request_gets_every_header(self) -> None:
        app = self._app(CorsConfig(allow_origins=("example.com",)))
        async with TestClient(app) as client:
            response = await client.get("/", headers={"Origin": "example.com"})
            assert response.status == 200
            assert response.text == "Hello, Gazelle!"
            for name in ALL_CORS_HEADERS:
                assert name in response.headers
            assert response.headers["access-control-allow-origin"] == "example.com"
            assert response.headers["access-control-allow-methods"] == "GET, HEAD, OPTIONS"
            assert response.headers["access-control-allow-credentials"] == "false"
            assert response.headers["access-control-max-age"] == "600"

    async def test_headers_appear_once(self) -> None:
        app = self._app(
            CorsConfig(allow_origins=("*",), allow_credentials=True, expose_headers=("X-Total",)),
        )
        async with TestClient(app) as client:
            response = await client.get("/", headers={"Origin": "https://a.com"})
            assert response.headers.get_list("access-control-allow-credentials") == ["true"]
            assert response.headers.get_list("access-control-expose-headers") == ["X-Total"]
            assert response.headers["access-control-allow-origin"] == "https://a.com"

    async def test_preflight_answered_before_handler(self) -> None:
        app = self._app(CorsConfig(allow_origins=("example.com",), allow_methods=("GET", "PUT")))
        async with TestClient(app) as client:
            response = await client.options(
                "/",
                headers={"Origin": "example.com", "Access-Control-Request-Method": "PUT"},
            )
            assert response.status == 204
            assert response.body == b""
            assert response.headers["access-control-allow-methods"] == "GET, PUT"

    async def test_disallowed_origin_untouched(self) -> None:
        app = self._app(CorsConfig(allow_origins=("example.com",)))
        async with TestClient(app) as client:
            response = await client.get("/", headers={"Origin": "evil.com"})
            assert response.status == 200
            for name in ALL_CORS_HEADERS:
                assert name not in response.headers


class TestCorsConfig:
    def test_defaults_allow_nothing(self) -> None:
        plugin = CorsPlugin()
        assert plugin.config.allow_origins == ()
        assert not plugin.is_allowed_origin("https://example.com")

    def test_hooks_are_stable(self) -> None:
        plugin = CorsPlugin()
        assert plugin.preflight_hook is plugin.preflight_hook
        assert plugin.headers_hook.share_with_child_routes is True
