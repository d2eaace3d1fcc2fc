"""Immutable HTTP request.

Frozen request metadata.  A static file server only ever
looks at the method, path and a few headers, so that is all a request
carries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from glint.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers) is frozen at creation.
    """

    method: str
    path: str
    headers: Headers
    query_string: bytes
    http_version: str
    client: tuple[str, int] | None

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> Request:
        """Create a Request from an ASGI scope."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query_string=scope.get("query_string", b""),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
