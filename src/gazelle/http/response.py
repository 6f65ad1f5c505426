"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by construction,
built incrementally by hooks and handlers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from gazelle.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``::

        Response("Hello, Gazelle!").with_header("X-Powered-By", "gazelle")
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: Headers = field(default_factory=Headers)

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", _coerce_headers(self.headers))

    # -- Chainable transformations --

    def copy_with(self, **changes: Any) -> Response:
        """Return a new Response with *changes* applied."""
        return replace(self, **changes)

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=body)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=self.headers.with_value(name, value))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        merged = self.headers
        for name, value in headers.items():
            merged = merged.with_value(name, value)
        return replace(self, headers=merged)

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


def _coerce_headers(value: Any) -> Headers:
    if isinstance(value, Mapping):
        return Headers.from_mapping(value)
    return Headers(value)
