"""Dispatch pipeline — one request through match, hooks, and handler.

States run strictly in sequence for a given request::

    Matching -> PreHooks -> Handling -> PostHooks -> Done
                   |                        ^
                   +---- ShortCircuit ------+

- Matching: no route -> 404 via the error mapper. No hooks run.
- PreHooks: each hook receives the previous (request, response) pair.
  ``ShortCircuit`` skips the remaining pre hooks and the handler, then
  runs the post hooks of the levels already entered.
- Handling: ``HTTPError`` maps to its status, anything else to 500.
  Never retried.
- PostHooks: every hook runs; none can stop the chain.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from gazelle._internal.invoke import invoke
from gazelle._internal.types import Handler
from gazelle.config import AppConfig
from gazelle.errors import HTTPError, NotFound
from gazelle.hooks import PostResponseHook, ShortCircuit
from gazelle.http.request import Request
from gazelle.http.response import Response
from gazelle.routing.chain import HookChain, effective_hooks
from gazelle.routing.router import Router
from gazelle.server.errors import handle_http_error, handle_internal_error
from gazelle.server.negotiation import negotiate

logger = logging.getLogger("gazelle.server")

# Annotations converted when binding path params
_SIMPLE_TYPES = (int, float, str)


async def dispatch(
    request: Request,
    router: Router,
    *,
    error_handlers: dict[int | type, Callable[..., Any]],
    config: AppConfig,
) -> Response:
    """Process a single request through the full pipeline.

    A failure raised by a hook abandons the chain and is mapped straight
    to an error response.
    """
    # Matching
    try:
        match = router.match(request.method, request.path)
    except HTTPError as exc:
        return await handle_http_error(exc, request, error_handlers, config)

    request = request.copy_with(path_params=match.path_params)
    chain = effective_hooks(match.node, match.method)
    try:
        return await _run_chain(match.handler, chain, request, error_handlers, config)
    except HTTPError as exc:
        return await handle_http_error(exc, request, error_handlers, config)
    except Exception as exc:
        return await handle_internal_error(exc, request, error_handlers, config)


async def _run_chain(
    handler: Handler,
    chain: HookChain,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    config: AppConfig,
) -> Response:
    response = Response(content_type=config.default_content_type)

    # PreHooks
    for depth, hook in chain.pre:
        result = await hook(request, response)
        if isinstance(result, ShortCircuit):
            logger.debug(
                "%s %s short-circuited with %d",
                request.method,
                request.path,
                result.response.status,
            )
            return await _run_post_hooks(chain.post_through(depth), request, result.response)
        request, response = result.request, result.response

    # Handling
    try:
        response = await _invoke_handler(handler, request, response)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, config)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, config)

    # PostHooks
    return await _run_post_hooks(chain.post_hooks, request, response)


async def _run_post_hooks(
    hooks: tuple[PostResponseHook, ...],
    request: Request,
    response: Response,
) -> Response:
    for hook in hooks:
        result = await hook(request, response)
        request, response = result.request, result.response
    return response


async def _invoke_handler(handler: Handler, request: Request, response: Response) -> Response:
    """Call the matched handler and negotiate its return value."""
    kwargs = _build_handler_kwargs(handler, request, response)
    result = await invoke(handler, **kwargs)
    return negotiate(result, response)


def _build_handler_kwargs(
    handler: Handler,
    request: Request,
    response: Response,
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. ``response`` parameter (by name or ``Response`` annotation): the
       response threaded through the pre hooks
    3. Path parameters (by name, converted to int/float when annotated;
       a value that does not convert is ``NotFound``)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}
    path_params = request.path_params

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name == "response" or param.annotation is Response:
            kwargs[name] = response
        elif name in path_params:
            value = path_params[name]
            if param.annotation in _SIMPLE_TYPES:
                try:
                    kwargs[name] = param.annotation(value)
                except ValueError:
                    raise NotFound() from None
            else:
                kwargs[name] = value

    return kwargs
