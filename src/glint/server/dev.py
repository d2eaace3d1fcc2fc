"""Development server.

Runs a uvicorn server around the live glint ``App`` object.  The socket
is bound and the app's own startup (which starts the directory watcher)
runs before uvicorn takes over, so a busy port or a watcher failure
aborts with a ``GlintError`` before anything is served.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
from typing import TYPE_CHECKING

import uvicorn

from glint.errors import ServerError
from glint.server.banner import print_banner
from glint.server.browser import open_browser

if TYPE_CHECKING:
    from glint.app import App
    from glint.config import ServeConfig

logger = logging.getLogger("glint.server")

# How often the supervisor checks uvicorn's started/should_exit flags.
_POLL_INTERVAL = 0.05


def run_dev_server(app: App) -> None:
    """Serve *app* until interrupted."""
    asyncio.run(serve(app))


def bind_socket(config: ServeConfig) -> socket.socket:
    """Open the listening socket for *config*.

    Raises:
        ServerError: If the address cannot be bound.
    """
    family = socket.AF_INET6 if ":" in config.host else socket.AF_INET
    try:
        return socket.create_server((config.host, config.port), family=family)
    except OSError as exc:
        msg = f"cannot listen on {config.host}:{config.port}: {exc.strerror or exc}"
        raise ServerError(msg) from exc


async def serve(app: App) -> None:
    """Start the app, serve it with uvicorn, and shut it down afterwards.

    uvicorn waits for open connections to finish before it exits, and
    reload streams never finish on their own.  A supervisor task closes
    the broadcaster as soon as shutdown begins so those streams end.
    """
    config = app.config
    sock = bind_socket(config)
    try:
        await app.startup()
    except BaseException:
        sock.close()
        raise

    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.host,
            port=config.port,
            lifespan="off",
            log_level=config.log_level,
            access_log=False,
        )
    )
    supervisor = asyncio.create_task(_supervise(app, server), name="glint-supervisor")
    try:
        await server.serve(sockets=[sock])
    finally:
        supervisor.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await supervisor
        await app.shutdown()
        sock.close()


async def _supervise(app: App, server: uvicorn.Server) -> None:
    while not server.started:
        if server.should_exit:
            return
        await asyncio.sleep(_POLL_INTERVAL)

    print_banner(app.config)
    if app.config.open_browser:
        await asyncio.to_thread(open_browser, app.config.url)

    while not server.should_exit:
        await asyncio.sleep(_POLL_INTERVAL)
    logger.debug("shutting down; closing %d reload stream(s)", len(app.broadcaster))
    app.broadcaster.close()
