"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable. Plain values are
layered onto the response the pre-hooks produced, so headers set before
the handler survive a ``return "text"``.
"""

from typing import Any

from gazelle.http.response import Response


def negotiate(value: Any, base: Response) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``              -> pass through
    2. ``str``                   -> *base* with this body
    3. ``bytes``                 -> *base* with this body, application/octet-stream
    4. ``(value, int)``          -> negotiate value, override status
    5. ``(value, int, dict)``    -> negotiate value, override status + add headers
    """
    match value:
        case Response():
            return value
        case str():
            return base.with_body(value)
        case bytes():
            return base.with_body(value).with_content_type("application/octet-stream")
        case (inner, int() as status):
            return negotiate(inner, base).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner, base).with_status(status).with_headers(headers)
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return Response, str, bytes, or a (value, status[, headers]) tuple."
            )
            raise TypeError(msg)
