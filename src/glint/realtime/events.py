"""Server-Sent Events wire types.

``SSEEvent`` is one message; ``EventStream`` is what a route returns to
keep the connection open and stream messages from an async iterator.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

# Comment frame sent while a stream is idle.  Browsers ignore it, so the
# only message a reload client ever sees is still ``data: reload``.
HEARTBEAT = b": heartbeat\n\n"


@dataclass(frozen=True, slots=True)
class SSEEvent:
    """One data-only Server-Sent Event.  ``data`` may span several lines."""

    data: str

    def encode(self) -> bytes:
        """Wire form, terminated by the blank line that ends an event."""
        lines = "".join(f"data: {line}\n" for line in self.data.split("\n"))
        return f"{lines}\n".encode()


# The only message the reload stream ever carries: ``data: reload\n\n``.
RELOAD_EVENT = SSEEvent(data="reload")


@dataclass(frozen=True, slots=True)
class EventStream:
    """A stream of events produced by *generator*.

    ``heartbeat_interval`` is how long the stream may stay silent before
    a ``HEARTBEAT`` comment is written to keep intermediaries from
    closing the connection.
    """

    generator: AsyncIterator[SSEEvent]
    heartbeat_interval: float = 15.0
