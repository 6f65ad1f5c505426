"""ASGI response sending — translates a gazelle Response to ASGI messages."""

from gazelle._internal.asgi import Send
from gazelle.http.response import Response


def _body_allowed(status: int, method: str) -> bool:
    """Whether the status and method permit a response body."""
    # RFC: 1xx, 204, and 304 responses, and HEAD answers, carry no body.
    return not (100 <= status < 200 or status in {204, 304} or method == "HEAD")


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw_headers.extend(
        pair for pair in response.headers.raw if pair[0] not in (b"content-type", b"content-length")
    )

    body = response.body_bytes if _body_allowed(response.status, method) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )
