"""Debounced change coalescing.

Holds at most one pending ``asyncio.TimerHandle``.  Every ``trigger()``
cancels the pending timer and arms a new one, so a burst of changes
produces a single callback, fired ``delay`` seconds after the last change.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("glint.watch")


class Coalescer:
    """Collapse bursts of ``trigger()`` calls into one *callback* invocation.

    Must be used from a running event loop.  Not thread-safe: all calls
    come from the directory watcher's single event task.
    """

    __slots__ = ("_callback", "_delay", "_handle")

    def __init__(self, delay: float, callback: Callable[[], Any]) -> None:
        self._delay = delay
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """True while a timer is armed and has not fired yet."""
        return self._handle is not None

    def trigger(self) -> None:
        """(Re)arm the timer, superseding any pending one."""
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        try:
            self._callback()
        except Exception:
            logger.exception("reload callback failed")
