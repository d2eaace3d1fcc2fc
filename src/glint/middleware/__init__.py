"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    StaticFiles -- Serve the watched directory, rewriting HTML documents
"""

from glint.middleware.protocol import AnyResponse, Middleware, Next
from glint.middleware.static import StaticFiles

__all__ = [
    "AnyResponse",
    "Middleware",
    "Next",
    "StaticFiles",
]
