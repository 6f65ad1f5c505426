"""Error handling for gazelle requests.

Maps HTTPError exceptions and unexpected failures to Response objects,
using registered error handlers or plain-text defaults.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from gazelle._internal.invoke import invoke
from gazelle.config import AppConfig
from gazelle.errors import HTTPError
from gazelle.http.request import Request
from gazelle.http.response import Response
from gazelle.server.negotiation import negotiate

logger = logging.getLogger("gazelle.server")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    base: Response,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    params = list(inspect.signature(handler).parameters.values())

    if len(params) >= 2:
        result = await invoke(handler, request, exc)
    elif len(params) == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)

    return negotiate(result, base)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    config: AppConfig,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    base = Response(status=exc.status, content_type=config.default_content_type)
    for name, value in exc.headers:
        base = base.with_header(name, value)

    # Try exact exception type, then status code
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        return await call_error_handler(handler, request, exc, base)

    return base.with_body(exc.detail or f"Error {exc.status}")


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    config: AppConfig,
) -> Response:
    """Handle unexpected exceptions as 500 errors. Detail is shown only in debug."""
    logger.exception("500 %s %s", request.method, request.path)

    base = Response(status=500, content_type=config.default_content_type)

    handler = error_handlers.get(type(exc)) or error_handlers.get(500)
    if handler is not None:
        return await call_error_handler(handler, request, exc, base)

    if config.debug:
        return base.with_body(f"500: {type(exc).__name__}: {exc}")
    return base.with_body("Internal Server Error")
