"""Reload broadcaster: fans one signal out to every connected browser.

Each streaming connection owns a ``ReloadChannel``: a single-slot buffer
holding at most one pending "reload" signal.  ``Broadcaster.notify()``
offers a signal to every channel without blocking; a channel whose slot
is still full keeps its pending signal and the new one is dropped, since
only "a reload happened" matters, never how many times.

Thread safety:
    add/remove/notify/close are serialized by one ``threading.Lock``.
    Critical sections only touch the dict and flip flags; nothing awaits
    or blocks while the lock is held.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import AsyncIterator

logger = logging.getLogger("glint.realtime")


class ReloadChannel:
    """Single-slot delivery buffer for one streaming connection.

    Consumed by exactly one task, on the event loop that created it::

        async for _ in channel:
            await send_reload()
    """

    __slots__ = ("_closed", "_pending", "_wakeup")

    def __init__(self) -> None:
        self._pending = False
        self._closed = False
        self._wakeup = asyncio.Event()

    @property
    def pending(self) -> bool:
        """True while a signal waits to be consumed."""
        return self._pending

    @property
    def closed(self) -> bool:
        return self._closed

    def offer(self) -> bool:
        """Deposit a signal unless one is already pending.

        Returns ``False`` when the signal was dropped (slot full or
        channel closed).
        """
        if self._closed or self._pending:
            return False
        self._pending = True
        self._wakeup.set()
        return True

    def close(self) -> None:
        """Release the channel.  A pending signal is still delivered first."""
        self._closed = True
        self._wakeup.set()

    async def receive(self) -> bool:
        """Wait for the next signal.  Returns ``False`` once closed and drained."""
        while True:
            if self._pending:
                self._pending = False
                return True
            if self._closed:
                return False
            self._wakeup.clear()
            await self._wakeup.wait()

    async def __aiter__(self) -> AsyncIterator[None]:
        while await self.receive():
            yield None


class Broadcaster:
    """The set of connected reload clients.

    Constructed once per app and handed to both the change coalescer
    (which calls ``notify``) and the streaming endpoint (which calls
    ``add`` / ``remove``).
    """

    __slots__ = ("_clients", "_lock")

    def __init__(self) -> None:
        self._clients: dict[ReloadChannel, None] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._clients)

    def add(self) -> ReloadChannel:
        """Register a new client and return its channel."""
        channel = ReloadChannel()
        with self._lock:
            self._clients[channel] = None
            total = len(self._clients)
        logger.debug("reload client connected (%d total)", total)
        return channel

    def remove(self, channel: ReloadChannel) -> None:
        """Deregister *channel* and close it.  Safe to call more than once."""
        with self._lock:
            self._clients.pop(channel, None)
            channel.close()
            left = len(self._clients)
        logger.debug("reload client disconnected (%d left)", left)

    def notify(self) -> int:
        """Offer one reload signal to every client.

        Returns how many clients accepted a new signal; clients that still
        hold an unconsumed signal are skipped.
        """
        with self._lock:
            delivered = sum(1 for channel in self._clients if channel.offer())
            total = len(self._clients)
        logger.info("reload -> %d of %d client(s)", delivered, total)
        return delivered

    def close(self) -> None:
        """Close every channel so all streaming loops end (server shutdown)."""
        with self._lock:
            channels = list(self._clients)
            self._clients.clear()
            for channel in channels:
                channel.close()
