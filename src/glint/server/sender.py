"""Writes a complete ``Response`` to an ASGI connection."""

from glint._internal.asgi import Send
from glint.http.response import Response

# Statuses that never carry a message body.
_NO_BODY = frozenset({204, 304})


def _has_body(status: int) -> bool:
    return status >= 200 and status not in _NO_BODY


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* as one start message and one body message.

    A ``HEAD`` response advertises the ``GET`` body length but sends no
    body bytes.
    """
    headers = [(b"content-type", response.content_type.encode("latin-1"))]
    headers += [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in response.headers]

    body = b""
    if _has_body(response.status):
        body = response.body_bytes
        headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send({"type": "http.response.start", "status": response.status, "headers": headers})
    await send({"type": "http.response.body", "body": b"" if head else body})
