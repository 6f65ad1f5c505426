"""ASGI handler — translates ASGI scope/messages to gazelle types.

The only component that touches raw ASGI directly. Reads the request
body, builds an immutable Request, runs the dispatch pipeline, and sends
the Response back through ASGI send().
"""

import logging
from collections.abc import Callable
from typing import Any

from gazelle._internal.asgi import Receive, Scope, Send
from gazelle.config import AppConfig
from gazelle.errors import PayloadTooLarge
from gazelle.http.headers import Headers
from gazelle.http.query import QueryParams
from gazelle.http.request import Request
from gazelle.http.response import Response
from gazelle.routing.router import Router
from gazelle.server.errors import handle_http_error
from gazelle.server.pipeline import dispatch
from gazelle.server.sender import send_response

logger = logging.getLogger("gazelle.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    error_handlers: dict[int | type, Callable[..., Any]],
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = request_from_scope(scope)
    try:
        body = await read_body(receive, config.max_content_length)
    except PayloadTooLarge as exc:
        response = await handle_http_error(exc, request, error_handlers, config)
    else:
        request = request.copy_with(body=body)
        try:
            response = await dispatch(
                request,
                router,
                error_handlers=error_handlers,
                config=config,
            )
        except Exception:
            # Only reachable when a user error handler itself fails
            logger.exception("Error handler failed for %s %s", request.method, request.path)
            response = Response(
                body="Internal Server Error",
                status=500,
                content_type=config.default_content_type,
            )

    await send_response(response, send, method=request.method)


def request_from_scope(scope: Scope) -> Request:
    """Create a body-less Request from an ASGI HTTP scope."""
    client = scope.get("client")
    return Request(
        method=scope["method"],
        path=scope["path"],
        headers=Headers.from_raw(scope.get("headers", ())),
        query=QueryParams(scope.get("query_string", b"")),
        client=tuple(client) if client else None,
    )


async def read_body(receive: Receive, limit: int) -> bytes:
    """Drain the ASGI receive channel into one bytes object.

    Raises ``PayloadTooLarge`` as soon as more than *limit* bytes arrive.
    """
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        chunk = message.get("body", b"")
        if chunk:
            size += len(chunk)
            if size > limit:
                raise PayloadTooLarge(limit)
            chunks.append(chunk)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)
