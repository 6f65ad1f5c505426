"""Tests for gazelle.http.response and content negotiation."""

import dataclasses

import pytest

from gazelle.http.headers import Headers
from gazelle.http.response import Response
from gazelle.server.negotiation import negotiate


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body == ""
        assert response.content_type == "text/plain; charset=utf-8"
        assert len(response.headers) == 0

    def test_frozen(self) -> None:
        response = Response("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            response.status = 500  # type: ignore[misc]

    def test_headers_coerced_from_mapping(self) -> None:
        response = Response(headers={"X-A": "1"})  # type: ignore[arg-type]
        assert isinstance(response.headers, Headers)
        assert response.headers["x-a"] == "1"

    def test_headers_coerced_from_pairs(self) -> None:
        response = Response(headers=(("X-A", "1"),))  # type: ignore[arg-type]
        assert response.headers["X-A"] == "1"

    def test_body_helpers(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"abc").text == "abc"


class TestResponseTransformations:
    def test_with_status(self) -> None:
        original = Response("x")
        updated = original.with_status(404)
        assert updated.status == 404
        assert original.status == 200

    def test_with_body(self) -> None:
        assert Response("a").with_body("b").body == "b"

    def test_with_header_appends(self) -> None:
        response = Response().with_header("Vary", "Origin").with_header("Vary", "Accept")
        assert response.headers.get_list("vary") == ["Origin", "Accept"]

    def test_with_headers(self) -> None:
        response = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert response.headers["x-a"] == "1"
        assert response.headers["x-b"] == "2"

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("application/json").content_type == "application/json"

    def test_copy_with_leaves_original(self) -> None:
        original = Response("a", headers=Headers((("X-A", "1"),)))
        copy = original.copy_with(body="b", status=201)

        assert copy.body == "b"
        assert copy.status == 201
        assert copy.headers == original.headers
        assert original.body == "a"
        assert original.status == 200

    def test_chaining(self) -> None:
        response = Response("Hello, Gazelle!").with_status(201).with_header("X-Powered-By", "gazelle")
        assert response.status == 201
        assert response.headers["x-powered-by"] == "gazelle"


class TestNegotiate:
    def test_response_passthrough(self) -> None:
        response = Response("direct", status=202)
        assert negotiate(response, Response()) is response

    def test_str_layers_onto_base(self) -> None:
        base = Response().with_header("X-Hook", "1")
        result = negotiate("hello", base)
        assert result.body == "hello"
        assert result.headers["x-hook"] == "1"

    def test_bytes(self) -> None:
        result = negotiate(b"\x00\x01", Response())
        assert result.body == b"\x00\x01"
        assert result.content_type == "application/octet-stream"

    def test_tuple_status(self) -> None:
        result = negotiate(("created", 201), Response())
        assert result.status == 201
        assert result.body == "created"

    def test_tuple_status_headers(self) -> None:
        result = negotiate(("moved", 301, {"Location": "/new"}), Response())
        assert result.status == 301
        assert result.headers["location"] == "/new"

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError) as exc_info:
            negotiate(42, Response())
        assert "int" in str(exc_info.value)
