"""The ``/__livereload`` streaming endpoint.

Each connection registers a channel with the broadcaster, forwards every
signal it receives as one ``data: reload`` frame, and deregisters when
the connection ends.
"""

from collections.abc import AsyncIterator, Awaitable, Callable

from glint.http.request import Request
from glint.http.response import SSEResponse
from glint.realtime.broadcaster import Broadcaster
from glint.realtime.events import RELOAD_EVENT, EventStream, SSEEvent


async def reload_events(broadcaster: Broadcaster) -> AsyncIterator[SSEEvent]:
    """Yield one reload event per signal delivered to a fresh channel.

    Registration happens on first iteration; the ``finally`` releases the
    channel when the SSE handler closes the generator.
    """
    channel = broadcaster.add()
    try:
        async for _ in channel:
            yield RELOAD_EVENT
    finally:
        broadcaster.remove(channel)


def reload_endpoint(
    broadcaster: Broadcaster,
    *,
    heartbeat_interval: float = 15.0,
) -> Callable[[Request], Awaitable[SSEResponse]]:
    """Build the route handler serving the reload stream."""

    async def livereload(request: Request) -> SSEResponse:  # noqa: ARG001
        return SSEResponse(
            EventStream(reload_events(broadcaster), heartbeat_interval=heartbeat_interval)
        )

    return livereload
