"""Server-Sent Events transport over ASGI.

``handle_sse`` owns the connection once a route returns an
``SSEResponse``: it writes the stream headers, forwards every value the
event generator yields as its own body message, fills idle gaps with
heartbeat comments, and stops as soon as the client goes away.
Heartbeats are SSE comments rather than messages: a reload client still
only ever receives ``data: reload``.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

from glint._internal.asgi import Receive, Send
from glint.realtime.events import HEARTBEAT, EventStream

logger = logging.getLogger("glint.server")

_STREAM_HEADERS = [
    (b"content-type", b"text/event-stream"),
    (b"cache-control", b"no-cache"),
    (b"connection", b"keep-alive"),
    (b"x-accel-buffering", b"no"),
]


async def _next_value(events: AsyncIterator[Any]) -> Any:
    return await anext(events)


async def _until_disconnect(receive: Receive) -> None:
    while (await receive())["type"] != "http.disconnect":
        pass


async def _write(send: Send, chunk: bytes) -> bool:
    """Send one body chunk; False once the transport is gone."""
    try:
        await send({"type": "http.response.body", "body": chunk, "more_body": True})
    except (RuntimeError, OSError) as exc:
        logger.debug("SSE write failed, dropping client: %s", exc)
        return False
    return True


async def handle_sse(event_stream: EventStream, send: Send, receive: Receive) -> None:
    """Stream *event_stream* until it ends, the client leaves, or a write fails.

    One ``asyncio.wait`` multiplexes the pending ``__anext__`` of the
    generator, the disconnect watcher, and the heartbeat timeout.  The
    pending ``__anext__`` task survives heartbeat timeouts, so no value is
    lost between them.

    The generator is always closed on the way out, so any ``finally``
    block inside it (deregistering a broadcast client) runs whichever way
    the stream ended.
    """
    await send({"type": "http.response.start", "status": 200, "headers": _STREAM_HEADERS})

    events = event_stream.generator.__aiter__()
    disconnect = asyncio.create_task(_until_disconnect(receive))
    pending: asyncio.Task[Any] | None = None

    try:
        while True:
            if pending is None:
                pending = asyncio.create_task(_next_value(events))
            done, _ = await asyncio.wait(
                {pending, disconnect},
                timeout=event_stream.heartbeat_interval,
                return_when=asyncio.FIRST_COMPLETED,
            )
            if disconnect in done:
                break
            if not done:
                chunk = HEARTBEAT
            else:
                finished, pending = pending, None
                try:
                    chunk = finished.result().encode()
                except StopAsyncIteration:
                    break
                except Exception:
                    logger.exception("event stream generator failed")
                    break
            if not await _write(send, chunk):
                break
    finally:
        for task in (pending, disconnect):
            if task is not None and not task.done():
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task
        aclose = getattr(events, "aclose", None)
        if aclose is not None:
            await aclose()
        # The transport may already be gone.
        with contextlib.suppress(RuntimeError, OSError):
            await send({"type": "http.response.body", "body": b"", "more_body": False})
