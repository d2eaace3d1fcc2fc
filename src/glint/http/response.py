"""Outgoing responses.

``Response`` carries a complete body and is sent in one piece by the
sender.  ``SSEResponse`` hands the connection over to the event-stream
handler instead.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from glint.realtime.events import EventStream


@dataclass(frozen=True, slots=True)
class Response:
    """A complete HTTP response.

    Frozen; ``with_status`` and ``with_header`` return modified copies::

        Response(body, content_type="text/css").with_header("Cache-Control", "no-cache")
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def redirect(cls, location: str, status: int = 301) -> Response:
        return cls(status=status, headers=(("Location", location),))

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Copy with *name* appended; earlier values for *name* are kept."""
        return replace(self, headers=(*self.headers, (name, value)))

    @property
    def body_bytes(self) -> bytes:
        body = self.body
        return body.encode("utf-8") if isinstance(body, str) else body

    @property
    def text(self) -> str:
        body = self.body
        return body.decode("utf-8") if isinstance(body, bytes) else body

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or None."""
        wanted = name.lower()
        return next((v for k, v in self.headers if k.lower() == wanted), None)


@dataclass(frozen=True, slots=True)
class SSEResponse:
    """Marker telling the request handler to stream *event_stream*.

    Status and headers are fixed by the SSE handler, so the ``with_*``
    methods return the response unchanged and middleware can treat both
    response types alike.
    """

    event_stream: EventStream

    def with_status(self, status: int) -> SSEResponse:  # noqa: ARG002
        return self

    def with_header(self, name: str, value: str) -> SSEResponse:  # noqa: ARG002
        return self
