"""Immutable HTTP request.

The request is honest about what it is: received data that doesn't change.
Hooks that derive facts (a decoded token, a start timestamp) produce a new
Request layered over the old one with ``with_metadata()``.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from gazelle.http.headers import Headers
from gazelle.http.query import QueryParams


def _frozen_mapping(value: Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(value, MappingProxyType):
        return value
    return MappingProxyType(dict(value))


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path_params`` and ``metadata`` are read-only mappings; every update
    goes through ``copy_with()`` / ``with_metadata()`` and returns a new
    Request, so values handed to earlier hooks never change.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    body: bytes = b""
    path_params: Mapping[str, str] = field(default_factory=dict)
    metadata: Mapping[str, Any] = field(default_factory=dict)
    client: tuple[str, int] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "path_params", _frozen_mapping(self.path_params))
        object.__setattr__(self, "metadata", _frozen_mapping(self.metadata))

    # -- Copy-on-write updates --

    def copy_with(self, **changes: Any) -> Request:
        """Return a new Request with *changes* applied."""
        return replace(self, **changes)

    def with_metadata(self, **values: Any) -> Request:
        """Return a new Request whose metadata layers *values* over the current mapping."""
        return replace(self, metadata={**self.metadata, **values})

    def with_header(self, name: str, value: str) -> Request:
        """Return a new Request with an additional header value."""
        return replace(self, headers=self.headers.with_value(name, value))

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.body.decode("utf-8")

    def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(self.body)
