"""Tests for glint.realtime.sse: the SSE connection lifecycle."""

import asyncio

from glint.realtime.events import RELOAD_EVENT, EventStream, SSEEvent
from glint.realtime.sse import handle_sse


class _Connection:
    """Records sent messages; ``receive`` blocks until ``disconnect()``."""

    def __init__(self, *, fail_body: bool = False) -> None:
        self.messages: list[dict] = []
        self.fail_body = fail_body
        self._gone = asyncio.Event()

    def disconnect(self) -> None:
        self._gone.set()

    async def receive(self) -> dict:
        await self._gone.wait()
        return {"type": "http.disconnect"}

    async def send(self, message: dict) -> None:
        if self.fail_body and message["type"] == "http.response.body" and message["body"]:
            raise OSError("connection reset")
        self.messages.append(message)

    @property
    def body(self) -> bytes:
        return b"".join(
            m.get("body", b"") for m in self.messages if m["type"] == "http.response.body"
        )


class TestEventEncoding:
    def test_reload_event_wire_format(self) -> None:
        assert RELOAD_EVENT.encode() == b"data: reload\n\n"

    def test_multiline_data(self) -> None:
        assert SSEEvent(data="a\nb").encode() == b"data: a\ndata: b\n\n"


class TestHandleSSE:
    async def test_streams_then_closes(self) -> None:
        async def gen():
            yield RELOAD_EVENT
            yield SSEEvent(data="second")

        conn = _Connection()
        await asyncio.wait_for(handle_sse(EventStream(gen()), conn.send, conn.receive), 2)

        assert conn.messages[0]["type"] == "http.response.start"
        assert dict(conn.messages[0]["headers"])[b"content-type"] == b"text/event-stream"
        assert conn.body == b"data: reload\n\ndata: second\n\n"
        assert conn.messages[-1] == {"type": "http.response.body", "body": b"", "more_body": False}

    async def test_disconnect_closes_generator(self) -> None:
        closed = asyncio.Event()

        async def gen():
            try:
                await asyncio.Event().wait()
                yield RELOAD_EVENT
            finally:
                closed.set()

        conn = _Connection()
        task = asyncio.create_task(handle_sse(EventStream(gen()), conn.send, conn.receive))
        await asyncio.sleep(0.05)
        conn.disconnect()
        await asyncio.wait_for(task, 2)

        assert closed.is_set()

    async def test_write_failure_drops_client(self) -> None:
        closed = asyncio.Event()

        async def gen():
            try:
                while True:
                    yield RELOAD_EVENT
            finally:
                closed.set()

        conn = _Connection(fail_body=True)
        await asyncio.wait_for(handle_sse(EventStream(gen()), conn.send, conn.receive), 2)

        assert closed.is_set()
        assert conn.body == b""

    async def test_heartbeat_while_idle(self) -> None:
        async def gen():
            await asyncio.sleep(0.25)
            yield RELOAD_EVENT

        conn = _Connection()
        await asyncio.wait_for(
            handle_sse(EventStream(gen(), heartbeat_interval=0.05), conn.send, conn.receive), 2
        )

        assert b": heartbeat\n\n" in conn.body
        assert conn.body.endswith(b"data: reload\n\n")
