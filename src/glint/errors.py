"""Glint exception hierarchy.

Shared across the watcher, the request pipeline, middleware and the CLI
so every module raises and catches the same types.
"""

from dataclasses import dataclass


class GlintError(Exception):
    """Base for all glint-specific errors."""


class ConfigurationError(GlintError):
    """Raised when server configuration is invalid.

    Typically raised by ``ServeConfig.validate()`` before startup.
    """


class WatcherError(GlintError):
    """Raised when the filesystem notification mechanism cannot start.

    Fatal at startup: the CLI turns it into a non-zero exit.
    """


class ServerError(GlintError):
    """Raised when the server cannot listen on the configured address."""


@dataclass(frozen=True, slots=True)
class HTTPError(GlintError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or handlers. The ASGI handler
    catches these and turns them into plain-text error responses.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no file or route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Forbidden(HTTPError):  # noqa: N818
    """403: the request resolved outside the served directory."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
