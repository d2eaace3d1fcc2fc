"""Glint application class.

Compiled on first use: ``startup()`` or the first ``__call__()`` builds the
router (the reload stream) and the request chain (static files) exactly once.

The app owns the live-reload machinery: one ``Broadcaster`` shared by
the change coalescer and the reload stream endpoint, and the
``DirectoryWatcher`` feeding the coalescer.
"""

import logging
import threading

from glint._internal.asgi import Receive, Scope, Send
from glint.config import ServeConfig
from glint.inject import ReloadInjector
from glint.middleware.protocol import Next
from glint.middleware.static import StaticFiles
from glint.realtime.broadcaster import Broadcaster
from glint.realtime.endpoint import reload_endpoint
from glint.routing.router import Route, Router
from glint.server.handler import build_chain, handle_request
from glint.watch.coalescer import Coalescer
from glint.watch.watcher import DirectoryWatcher

logger = logging.getLogger("glint.server")


class App:
    """The glint application: a static file server with live reload.

    Usage::

        app = App(ServeConfig(root="site", debounce=0.2))
        app.run()

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        caller compiles the app.
    """

    __slots__ = (
        "_chain",
        "_freeze_lock",
        "_frozen",
        "_router",
        "_watcher",
        "broadcaster",
        "coalescer",
        "config",
        "injector",
    )

    def __init__(self, config: ServeConfig | None = None) -> None:
        self.config: ServeConfig = config or ServeConfig()
        self.broadcaster: Broadcaster = Broadcaster()
        self.coalescer: Coalescer = Coalescer(self.config.debounce, self.broadcaster.notify)
        self.injector: ReloadInjector = ReloadInjector(
            self.config.reload_path,
            anchor=self.config.inject_anchor,
            cache_bust=self.config.cache_bust,
        )
        self._watcher: DirectoryWatcher | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state: set during _freeze()
        self._router: Router | None = None
        self._chain: Next | None = None

    @property
    def watcher(self) -> DirectoryWatcher | None:
        """The running directory watcher, once ``startup()`` has run."""
        return self._watcher

    async def startup(self) -> None:
        """Freeze the app and start watching the root.

        Raises:
            WatcherError: If the filesystem watcher cannot be started.
        """
        self._ensure_frozen()
        if self._watcher is None:
            watcher = DirectoryWatcher(
                self.config.root_path,
                self.config.exclude,
                self.coalescer.trigger,
            )
            await watcher.start()
            self._watcher = watcher

    async def shutdown(self) -> None:
        """End every reload stream and stop watching."""
        self.coalescer.cancel()
        self.broadcaster.close()
        watcher, self._watcher = self._watcher, None
        if watcher is not None:
            await watcher.stop()

    # -- Server --

    def run(self) -> None:
        """Serve until interrupted."""
        from glint.server.dev import run_dev_server

        run_dev_server(self)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan scope directly, then delegates HTTP scopes
        to the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._chain is not None
        await handle_request(scope, receive, send, chain=self._chain)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol around ``startup``/``shutdown``."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freezing --

    def _ensure_frozen(self) -> None:
        if self._frozen:
            return
        with self._freeze_lock:
            if not self._frozen:
                self._freeze()

    def _freeze(self) -> None:
        """Compile the reload route and the static file chain.  Called exactly once."""
        config = self.config
        reload_route = Route(
            config.reload_path,
            reload_endpoint(self.broadcaster, heartbeat_interval=config.heartbeat_interval),
            frozenset({"GET"}),
            name="livereload",
        )
        self._router = Router([reload_route])

        static = StaticFiles(
            config.root_path,
            rewrite_html=self.injector,
            reserved=[reload_route.path],
            cache_control=config.cache_control,
            directory_listing=config.directory_listing,
        )
        self._chain = build_chain(self._router, [static])
        self._frozen = True
