"""Tests for glint.watch.watcher: recursive watching with dynamic registration."""

import asyncio
import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from glint.errors import WatcherError
from glint.watch.watcher import ChangeEvent, DirectoryWatcher


@pytest.fixture
def tree(tmp_path) -> Path:
    root = (tmp_path / "root").resolve()
    (root / "a" / "b").mkdir(parents=True)
    (root / ".git" / "objects").mkdir(parents=True)
    (root / "node_modules" / "pkg").mkdir(parents=True)
    (root / "index.html").write_text("<body></body>")
    return root


class _Counter:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


async def _eventually(predicate, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            msg = "condition not met in time"
            raise AssertionError(msg)
        await asyncio.sleep(0.01)


class TestRegistration:
    async def test_watches_every_non_excluded_directory(self, tree) -> None:
        watcher = DirectoryWatcher(tree, (".git", "node_modules"), _Counter())
        await watcher.start()
        try:
            assert set(watcher.watched) == {
                str(tree),
                str(tree / "a"),
                str(tree / "a" / "b"),
            }
            assert watcher.running
        finally:
            await watcher.stop()
        assert not watcher.running

    async def test_no_exclusions_watches_everything(self, tree) -> None:
        watcher = DirectoryWatcher(tree, (), _Counter())
        await watcher.start()
        try:
            assert str(tree / ".git" / "objects") in watcher.watched
            assert str(tree / "node_modules" / "pkg") in watcher.watched
        finally:
            await watcher.stop()

    async def test_root_location_never_excludes_root(self, tmp_path) -> None:
        root = (tmp_path / "build" / "site").resolve()
        root.mkdir(parents=True)
        watcher = DirectoryWatcher(root, ("build",), _Counter())
        await watcher.start()
        try:
            assert str(root) in watcher.watched
        finally:
            await watcher.stop()

    async def test_stop_is_idempotent(self, tree) -> None:
        watcher = DirectoryWatcher(tree, (), _Counter())
        await watcher.start()
        await watcher.stop()
        await watcher.stop()


class TestHandleEvent:
    async def test_forwards_file_change(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (".git",), counter)
        await watcher.start()
        try:
            event = ChangeEvent("modified", str(tree / "index.html"))
            assert watcher.handle_event(event) is True
            assert counter.count == 1
        finally:
            await watcher.stop()

    async def test_drops_excluded_path(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (".git",), counter)
        await watcher.start()
        try:
            event = ChangeEvent("modified", str(tree / ".git" / "index"))
            assert watcher.handle_event(event) is False
            assert counter.count == 0
        finally:
            await watcher.stop()

    async def test_drops_access_events(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (), counter)
        await watcher.start()
        try:
            for kind in ("opened", "closed_no_write"):
                assert watcher.handle_event(ChangeEvent(kind, str(tree / "index.html"))) is False
            assert counter.count == 0
        finally:
            await watcher.stop()

    async def test_created_directory_registers_subtree(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, ("node_modules",), counter)
        await watcher.start()
        try:
            new = tree / "new"
            (new / "deep" / "node_modules").mkdir(parents=True)
            watcher.handle_event(ChangeEvent("created", str(new), is_directory=True))

            assert str(new) in watcher.watched
            assert str(new / "deep") in watcher.watched
            assert str(new / "deep" / "node_modules") not in watcher.watched
            assert counter.count == 1
        finally:
            await watcher.stop()

    async def test_created_file_does_not_register(self, tree) -> None:
        watcher = DirectoryWatcher(tree, (), _Counter())
        await watcher.start()
        try:
            before = set(watcher.watched)
            (tree / "page.html").write_text("x")
            watcher.handle_event(ChangeEvent("created", str(tree / "page.html")))
            assert set(watcher.watched) == before
        finally:
            await watcher.stop()


class TestChangeEvent:
    def test_move_uses_destination(self) -> None:
        raw = SimpleNamespace(
            event_type="moved", src_path="/a/old", dest_path="/a/new", is_directory=True
        )
        event = ChangeEvent.from_watchdog(raw)
        assert event == ChangeEvent("moved", "/a/new", is_directory=True)

    def test_bytes_paths_decoded(self) -> None:
        raw = SimpleNamespace(
            event_type="modified", src_path=b"/a/x.css", dest_path=b"", is_directory=False
        )
        assert ChangeEvent.from_watchdog(raw).path == "/a/x.css"


class TestLiveEvents:
    async def test_file_write_is_observed(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (".git",), counter)
        await watcher.start()
        try:
            (tree / "a" / "b" / "page.html").write_text("<body>x</body>")
            await _eventually(lambda: counter.count > 0)
        finally:
            await watcher.stop()

    async def test_excluded_write_is_not_observed(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (".git",), counter)
        await watcher.start()
        try:
            (tree / ".git" / "objects" / "abc").write_text("x")
            await asyncio.sleep(0.3)
            assert counter.count == 0
        finally:
            await watcher.stop()

    async def test_new_directory_picked_up(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (), counter)
        await watcher.start()
        try:
            new = tree / "posts"
            new.mkdir()
            await _eventually(lambda: str(new) in watcher.watched)

            seen = counter.count
            (new / "first.html").write_text("<body>1</body>")
            await _eventually(lambda: counter.count > seen)
        finally:
            await watcher.stop()

    async def test_recreated_directory_is_rewatched(self, tree) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (), counter)
        await watcher.start()
        try:
            target = tree / "a" / "b"
            target.rmdir()
            await asyncio.sleep(0.1)
            target.mkdir()
            await asyncio.sleep(0.2)

            seen = counter.count
            (target / "again.html").write_text("x")
            await _eventually(lambda: counter.count > seen)
        finally:
            await watcher.stop()


class TestStartFailure:
    async def test_missing_root_raises(self, tmp_path) -> None:
        watcher = DirectoryWatcher(tmp_path / "missing", (), _Counter())
        with pytest.raises(WatcherError, match="cannot watch"):
            await watcher.start()
        assert not watcher.running
        await watcher.stop()


class TestRecoverableFailures:
    async def test_error_item_is_logged_and_loop_continues(self, tree, caplog) -> None:
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (), counter)
        await watcher.start()
        try:
            watcher._queue.put_nowait(OSError("event overflow"))
            watcher._queue.put_nowait(ChangeEvent("modified", str(tree / "index.html")))
            await _eventually(lambda: counter.count == 1)

            assert watcher.running
            warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
            assert any("event overflow" in r.getMessage() for r in warnings)
        finally:
            await watcher.stop()

    async def test_failed_registration_is_skipped(self, tree, monkeypatch, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="glint.watch")
        counter = _Counter()
        watcher = DirectoryWatcher(tree, (), counter)
        await watcher.start()
        try:
            def refuse(*args, **kwargs):
                raise OSError("inotify watch limit reached")

            monkeypatch.setattr(watcher._observer, "schedule", refuse)
            new = tree / "late"
            new.mkdir()
            event = ChangeEvent("created", str(new), is_directory=True)

            assert watcher.handle_event(event) is True
            assert counter.count == 1
            assert str(new) not in watcher.watched
            assert "could not watch" in caplog.text
        finally:
            await watcher.stop()
