"""Tests for the JWT authentication plugin."""

import time

import pytest

from gazelle.app import App
from gazelle.errors import ConfigurationError
from gazelle.http.request import Request
from gazelle.plugins.jwt import (
    BAD_BEARER_SCHEMA_MESSAGE,
    INVALID_TOKEN_MESSAGE,
    JWT_METADATA_KEY,
    MISSING_AUTH_HEADER_MESSAGE,
    JwtPlugin,
)
from gazelle.testing import TestClient

SECRET = "a-test-secret-that-is-at-least-32-bytes-long"


def _make_app(*, protect_root: bool = True) -> App:
    app = App()
    app.register_plugin(JwtPlugin(SECRET))
    jwt = app.get_plugin(JwtPlugin)

    def whoami(request: Request) -> str:
        return request.metadata[JWT_METADATA_KEY]["sub"]

    if protect_root:
        app.hooks("/", pre_hooks=[jwt.authentication_hook])
    app.get("/hello", lambda: "Hello, Gazelle!")
    app.get("/me", whoami)
    app.get("/users/:id/posts", lambda id: f"posts of {id}")
    return app


class TestJwtCodec:
    def test_sign_and_verify(self) -> None:
        app = App()
        app.register_plugin(JwtPlugin(SECRET))
        jwt = app.get_plugin(JwtPlugin)

        token = jwt.sign({"sub": "alice"})
        assert jwt.verify(token) == {"sub": "alice"}

    def test_verify_rejects_other_secret(self) -> None:
        signer = JwtPlugin("another-secret-that-is-also-32-bytes-long")
        signer.initialize(None)  # type: ignore[arg-type]
        verifier = JwtPlugin(SECRET)
        verifier.initialize(None)  # type: ignore[arg-type]

        assert verifier.verify(signer.sign({"sub": "mallory"})) is None

    def test_verify_rejects_expired(self) -> None:
        jwt = JwtPlugin(SECRET)
        jwt.initialize(None)  # type: ignore[arg-type]
        token = jwt.sign({"sub": "alice", "exp": int(time.time()) - 60})
        assert jwt.verify(token) is None

    def test_verify_rejects_garbage(self) -> None:
        jwt = JwtPlugin(SECRET)
        jwt.initialize(None)  # type: ignore[arg-type]
        assert jwt.verify("not.a.token") is None

    def test_empty_secret(self) -> None:
        with pytest.raises(ConfigurationError):
            JwtPlugin("")

    def test_use_before_initialize(self) -> None:
        jwt = JwtPlugin(SECRET)
        with pytest.raises(ConfigurationError):
            jwt.authentication_hook  # noqa: B018
        with pytest.raises(ConfigurationError):
            jwt.sign({"sub": "alice"})


class TestJwtAuthenticationHook:
    @pytest.mark.parametrize("path", ["/hello", "/me", "/users/1/posts"])
    async def test_missing_header_is_401_everywhere(self, path: str) -> None:
        app = _make_app()
        async with TestClient(app) as client:
            response = await client.get(path)
        assert response.status == 401
        assert response.text == MISSING_AUTH_HEADER_MESSAGE

    async def test_wrong_schema(self) -> None:
        app = _make_app()
        async with TestClient(app) as client:
            response = await client.get("/hello", headers={"Authorization": "Basic dXNlcjpwYXNz"})
        assert response.status == 401
        assert response.text == BAD_BEARER_SCHEMA_MESSAGE

    async def test_invalid_token(self) -> None:
        app = _make_app()
        async with TestClient(app) as client:
            response = await client.get("/hello", headers={"Authorization": "Bearer nope"})
        assert response.status == 401
        assert response.text == INVALID_TOKEN_MESSAGE

    async def test_valid_token_reaches_handler(self) -> None:
        app = _make_app()
        token = app.get_plugin(JwtPlugin).sign({"sub": "alice"})
        async with TestClient(app) as client:
            response = await client.get("/hello", headers={"Authorization": f"Bearer {token}"})
        assert response.status == 200
        assert response.text == "Hello, Gazelle!"

    async def test_claims_in_metadata(self) -> None:
        app = _make_app()
        token = app.get_plugin(JwtPlugin).sign({"sub": "alice"})
        async with TestClient(app) as client:
            response = await client.get("/me", headers={"Authorization": f"Bearer {token}"})
        assert response.text == "alice"

    async def test_unprotected_route(self) -> None:
        app = _make_app(protect_root=False)
        async with TestClient(app) as client:
            response = await client.get("/hello")
        assert response.status == 200

    async def test_unshared_hook_protects_only_its_node(self) -> None:
        app = App()
        app.register_plugin(JwtPlugin(SECRET))
        hook = app.get_plugin(JwtPlugin).get_authentication_hook(share_with_child_routes=False)
        app.get("/admin", lambda: "admin", pre_hooks=[hook])
        app.get("/admin/public", lambda: "public")

        async with TestClient(app) as client:
            assert (await client.get("/admin")).status == 401
            assert (await client.get("/admin/public")).status == 200
