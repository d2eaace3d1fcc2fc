"""ASGI request handling.

The only place that converts between raw ASGI and glint types: builds the
``Request``, runs it through the middleware chain into the router, maps
errors to responses, and sends the result, streaming or complete.
"""

import logging
from collections.abc import Sequence
from functools import partial
from glint._internal.asgi import Receive, Scope, Send
from glint.errors import HTTPError
from glint.http.request import Request
from glint.http.response import SSEResponse
from glint.middleware.protocol import AnyResponse, Middleware, Next
from glint.realtime.sse import handle_sse
from glint.routing.router import Router
from glint.server.errors import handle_http_error, handle_internal_error
from glint.server.sender import send_response

logger = logging.getLogger("glint.server")


def build_chain(router: Router, middleware: Sequence[Middleware]) -> Next:
    """Compose *middleware* around route dispatch; the first entry runs first."""

    async def dispatch(request: Request) -> AnyResponse:
        route = router.match(request.method, request.path)
        return await route.handler(request)

    chain: Next = dispatch
    for mw in reversed(middleware):
        chain = partial(mw, next=chain)
    return chain


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    chain: Next,
) -> None:
    """Serve one HTTP request through *chain*."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)
    try:
        response = await chain(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request)

    if isinstance(response, SSEResponse):
        logger.debug("stream %s", request.url)
        await handle_sse(response.event_stream, send, receive)
        return

    logger.debug("%d %s %s", response.status, request.method, request.url)
    await send_response(response, send, head=request.method == "HEAD")

