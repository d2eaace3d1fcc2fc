"""Tests for glint.app: lifecycle, freezing, and the ASGI entry point."""

import asyncio

from glint.app import App
from glint.config import ServeConfig
from glint.middleware.static import StaticFiles
from glint.testing import TestClient


class TestLifecycle:
    async def test_startup_starts_watcher(self, make_app) -> None:
        app = make_app()
        assert app.watcher is None
        await app.startup()
        try:
            assert app.watcher is not None
            assert app.watcher.running
            assert str(app.config.root_path) in app.watcher.watched
        finally:
            await app.shutdown()
        assert app.watcher is None

    async def test_shutdown_cancels_pending_reload(self, make_app) -> None:
        app = make_app(debounce=10)
        async with TestClient(app):
            app.coalescer.trigger()
            assert app.coalescer.pending
        assert not app.coalescer.pending


class TestRequests:
    async def test_unknown_path_is_404(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.get("/missing.txt")
        assert response.status == 404
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_other_methods_bypass_files(self, make_app) -> None:
        async with TestClient(make_app()) as client:
            response = await client.post("/style.css", body=b"x")
        assert response.status == 404

    async def test_unexpected_error_is_500(self, make_app, monkeypatch, caplog) -> None:
        def broken(self, file_path):
            raise ValueError("broken")

        monkeypatch.setattr(StaticFiles, "_serve_document", broken)
        async with TestClient(make_app()) as client:
            response = await client.get("/")
        assert response.status == 500
        assert response.text == "Internal Server Error\n"
        assert "500 GET /" in caplog.text

    async def test_compiled_once(self, make_app) -> None:
        app = make_app()
        async with TestClient(app) as client:
            chain = app._chain
            await client.get("/")
        assert app._chain is chain


class TestLifespan:
    async def test_lifespan_protocol(self, make_app) -> None:
        app = make_app()
        inbox: asyncio.Queue[dict] = asyncio.Queue()
        outbox: list[dict] = []

        async def send(message: dict) -> None:
            outbox.append(message)

        await inbox.put({"type": "lifespan.startup"})
        await inbox.put({"type": "lifespan.shutdown"})
        await app({"type": "lifespan"}, inbox.get, send)

        assert [m["type"] for m in outbox] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        assert app.watcher is None

    async def test_lifespan_startup_failure(self, tmp_path) -> None:
        app = App(ServeConfig(root=tmp_path / "missing", open_browser=False))
        inbox: asyncio.Queue[dict] = asyncio.Queue()
        outbox: list[dict] = []

        async def send(message: dict) -> None:
            outbox.append(message)

        await inbox.put({"type": "lifespan.startup"})
        await app({"type": "lifespan"}, inbox.get, send)

        assert outbox[0]["type"] == "lifespan.startup.failed"
