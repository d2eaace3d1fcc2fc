"""Recursive directory watcher built on watchdog.

Every non-excluded directory under the root is scheduled individually
(``recursive=False``), so the set of watched directories is explicit and
exclusions prune whole subtrees.  Directories created after startup are
registered as their creation events arrive, which keeps the watch set in
step with the live tree without a restart.

The watchdog observer thread never touches watcher state.  Its handler
turns each event into a ``ChangeEvent`` (or, if that fails, passes the
exception along) and hands it to the event loop through one
``asyncio.Queue``.  A single task drains the queue, so the watch set and
the coalescer are only ever mutated from one place.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch

from glint.errors import WatcherError
from glint.watch.filters import is_excluded

logger = logging.getLogger("glint.watch")

# Access-only notifications.  Serving a file opens it, and that must never
# cause a reload.
_IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """One filesystem change, detached from watchdog's event classes.

    ``path`` is the destination for moves and the source otherwise.
    """

    kind: str
    path: str
    is_directory: bool = False

    @classmethod
    def from_watchdog(cls, event: FileSystemEvent) -> ChangeEvent:
        dest = getattr(event, "dest_path", "")
        return cls(
            kind=event.event_type,
            path=os.fsdecode(dest or event.src_path),
            is_directory=event.is_directory,
        )


class _ForwardingHandler(FileSystemEventHandler):
    """Runs on the observer thread; only enqueues onto the event loop."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        queue: asyncio.Queue[ChangeEvent | Exception],
    ) -> None:
        super().__init__()
        self._loop = loop
        self._queue = queue

    def dispatch(self, event: FileSystemEvent) -> None:
        if event.event_type in _IGNORED_EVENT_TYPES:
            return
        item: ChangeEvent | Exception
        try:
            item = ChangeEvent.from_watchdog(event)
        except Exception as exc:
            item = exc
        # call_soon_threadsafe raises RuntimeError once the loop is closed.
        with contextlib.suppress(RuntimeError):
            self._loop.call_soon_threadsafe(self._queue.put_nowait, item)


class DirectoryWatcher:
    """Watch *root* and call *on_change* for every accepted change event.

    Usage::

        coalescer = Coalescer(0.1, broadcaster.notify)
        watcher = DirectoryWatcher("site", (".git",), coalescer.trigger)
        await watcher.start()
        ...
        await watcher.stop()
    """

    __slots__ = (
        "_exclusions",
        "_handler",
        "_observer",
        "_on_change",
        "_queue",
        "_root",
        "_task",
        "_watches",
    )

    def __init__(
        self,
        root: str | Path,
        exclusions: Iterable[str],
        on_change: Callable[[], Any],
    ) -> None:
        self._root = Path(root).resolve()
        self._exclusions = tuple(exclusions)
        self._on_change = on_change
        self._handler: _ForwardingHandler | None = None
        self._observer: BaseObserver | None = None
        self._queue: asyncio.Queue[ChangeEvent | Exception] | None = None
        self._task: asyncio.Task[None] | None = None
        self._watches: dict[str, ObservedWatch] = {}

    @property
    def root(self) -> Path:
        return self._root

    @property
    def watched(self) -> Mapping[str, ObservedWatch]:
        """Read-only view of the watched directories, keyed by path."""
        return MappingProxyType(self._watches)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the observer, register the tree, and spawn the event task.

        Raises:
            WatcherError: If the notification mechanism cannot be started
                or the root itself cannot be watched.
        """
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._handler = _ForwardingHandler(loop, self._queue)

        observer = Observer()
        try:
            observer.start()
        except (OSError, RuntimeError) as exc:
            msg = f"cannot start filesystem watcher: {exc}"
            raise WatcherError(msg) from exc
        self._observer = observer

        self._register_tree(str(self._root))
        if str(self._root) not in self._watches:
            self._observer = None
            observer.stop()
            msg = f"cannot watch {self._root}"
            raise WatcherError(msg)
        logger.debug("watching %d directories under %s", len(self._watches), self._root)
        self._task = asyncio.create_task(self._run(), name="glint-watcher")

    async def stop(self) -> None:
        """Cancel the event task and shut the observer down.  Idempotent."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            await asyncio.to_thread(observer.join)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _excluded(self, path: str) -> bool:
        # Matched relative to the root so the root's own location never counts.
        return is_excluded(os.path.relpath(path, self._root), self._exclusions)

    def _register_tree(self, top: str) -> None:
        """Register *top* and every non-excluded directory beneath it."""
        if self._excluded(top):
            return
        for dirpath, dirnames, _filenames in os.walk(top, onerror=_log_walk_error):
            # Top-down walk: pruning dirnames skips excluded subtrees entirely.
            dirnames[:] = [
                name
                for name in dirnames
                if not self._excluded(os.path.join(dirpath, name))
            ]
            self._register(dirpath)

    def _register(self, path: str) -> None:
        """Schedule one directory.  Failures are logged and skipped."""
        assert self._observer is not None and self._handler is not None
        try:
            stale = self._watches.get(path)
            if stale is not None:
                # Deleted and recreated: the old watch points at a dead inode.
                self._observer.unschedule(stale)
            self._watches[path] = self._observer.schedule(self._handler, path, recursive=False)
        except (OSError, KeyError) as exc:
            logger.debug("could not watch %s: %s", path, exc)

    # ------------------------------------------------------------------
    # Event loop
    # ------------------------------------------------------------------

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            item = await self._queue.get()
            if isinstance(item, Exception):
                logger.warning("watch error: %s", item)
                continue
            self.handle_event(item)

    def handle_event(self, event: ChangeEvent) -> bool:
        """Filter one change event; returns True when it was forwarded.

        Directory creations (and directories moved into the tree) are
        registered before the change is forwarded, so files written into
        them afterwards are observed.
        """
        if event.kind in _IGNORED_EVENT_TYPES:
            return False
        if self._excluded(event.path):
            return False

        if event.kind in ("created", "moved") and os.path.isdir(event.path):
            self._register_tree(event.path)

        self._on_change()
        return True


def _log_walk_error(exc: OSError) -> None:
    logger.debug("skipping unreadable path: %s", exc)
