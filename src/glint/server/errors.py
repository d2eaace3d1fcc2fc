"""Error handling pipeline for glint requests.

Maps HTTPError exceptions and unexpected failures to plain-text
Response objects.
"""

import logging

from glint.errors import HTTPError
from glint.http.request import Request
from glint.http.response import Response
from glint.server.terminal_errors import log_error

logger = logging.getLogger("glint.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a plain-text Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    detail = exc.detail or f"Error {exc.status}"
    resp = Response(body=detail + "\n", content_type="text/plain; charset=utf-8").with_status(
        exc.status
    )
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    log_error(exc, request)
    return Response(
        body="Internal Server Error\n",
        status=500,
        content_type="text/plain; charset=utf-8",
    )
