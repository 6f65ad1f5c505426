"""Pre-request and post-response hooks.

A hook is a callable over ``(request, response)`` wrapped with a sharing
policy. Hooks can be ``def`` or ``async def``::

    async def stamp(request: Request, response: Response) -> HookResult:
        return Continue(request.with_metadata(seen=True), response)

    app.get("/", index, pre_hooks=[PreRequestHook(stamp)])

Pre-hooks stop the chain by returning ``ShortCircuit(response)``. A plain
``(request, response)`` tuple continues, except from a pre-hook that changed
the response status: that response is answered as-is, skipping the handler.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

from gazelle._internal.invoke import invoke
from gazelle.errors import HookContractError
from gazelle.http.request import Request
from gazelle.http.response import Response


@dataclass(frozen=True, slots=True)
class Continue:
    """Proceed to the next step with this request/response pair."""

    request: Request
    response: Response


@dataclass(frozen=True, slots=True)
class ShortCircuit:
    """Stop before the handler and answer with *response*."""

    response: Response


HookResult: TypeAlias = Continue | ShortCircuit | tuple[Request, Response]

HookFunc: TypeAlias = Callable[[Request, Response], HookResult | Awaitable[HookResult]]


@dataclass(frozen=True, slots=True)
class PreRequestHook:
    """Runs before the handler.

    With ``share_with_child_routes=True`` (the default) the hook also runs
    for every route registered below the node it is attached to.
    """

    hook: HookFunc
    share_with_child_routes: bool = True

    async def __call__(self, request: Request, response: Response) -> Continue | ShortCircuit:
        result = await invoke(self.hook, request, response)
        return _normalize(result, self.hook, baseline=response)


@dataclass(frozen=True, slots=True)
class PostResponseHook:
    """Runs after the handler (or after a short-circuit). Cannot stop the chain."""

    hook: HookFunc
    share_with_child_routes: bool = True

    async def __call__(self, request: Request, response: Response) -> Continue:
        result = await invoke(self.hook, request, response)
        return _normalize(result, self.hook, baseline=None)


def _normalize(result: Any, hook: Any, *, baseline: Response | None) -> Any:
    """Coerce a hook's return value into ``Continue`` or ``ShortCircuit``.

    *baseline* is the response the pre-hook received; ``None`` for post hooks,
    which may not stop the chain. A tuple from a pre-hook whose response
    status differs from the baseline is an early answer.
    """
    match result:
        case Continue():
            return result
        case ShortCircuit() if baseline is not None:
            return result
        case ShortCircuit():
            msg = f"Post-response hook {_name(hook)} returned ShortCircuit; post hooks cannot stop the chain"
            raise HookContractError(msg)
        case (Request() as request, Response() as response):
            if baseline is not None and response.status != baseline.status:
                return ShortCircuit(response)
            return Continue(request, response)
    msg = (
        f"Hook {_name(hook)} returned {type(result).__name__}; expected "
        "Continue, ShortCircuit, or a (request, response) tuple"
    )
    raise HookContractError(msg)


def _name(hook: Any) -> str:
    return getattr(hook, "__qualname__", None) or repr(hook)
