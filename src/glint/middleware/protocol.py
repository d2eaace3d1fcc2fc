"""Middleware shape and the response/next-handler aliases it uses.

Middleware wraps the rest of the pipeline::

    async def stamp(request: Request, next: Next) -> AnyResponse:
        response = await next(request)
        return response.with_header("X-Served-By", "glint")

Plain functions and objects with an async ``__call__`` both qualify.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from glint.http.request import Request
from glint.http.response import Response, SSEResponse

AnyResponse: TypeAlias = Response | SSEResponse

Next: TypeAlias = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
