"""HTTP value types — immutable Headers, QueryParams, Request, Response."""

from gazelle.http.headers import Headers
from gazelle.http.query import QueryParams
from gazelle.http.request import Request
from gazelle.http.response import Response

__all__ = ["Headers", "QueryParams", "Request", "Response"]
