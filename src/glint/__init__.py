"""Glint: a static file server that reloads the browser when files change.

Serves a directory over HTTP, watches it recursively, and pushes a
``reload`` event over Server-Sent Events to every open page whenever
something changes.  HTML pages get a small script injected that listens
for that event.

Basic usage::

    from glint import App, ServeConfig

    app = App(ServeConfig(root="site"))
    app.run()

Or from the shell::

    glint site --port 3000
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "Broadcaster",
    "ConfigurationError",
    "DirectoryWatcher",
    "GlintError",
    "HTTPError",
    "InjectAnchor",
    "Request",
    "Response",
    "ServeConfig",
    "ServerError",
    "WatcherError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import glint`` fast (the CLI reads ``__version__`` before
    anything else is needed).
    """
    if name == "App":
        from glint.app import App

        return App

    if name == "ServeConfig":
        from glint.config import ServeConfig

        return ServeConfig

    if name == "InjectAnchor":
        from glint.inject import InjectAnchor

        return InjectAnchor

    if name == "Broadcaster":
        from glint.realtime.broadcaster import Broadcaster

        return Broadcaster

    if name == "DirectoryWatcher":
        from glint.watch.watcher import DirectoryWatcher

        return DirectoryWatcher

    if name == "Request":
        from glint.http.request import Request

        return Request

    if name == "Response":
        from glint.http.response import Response

        return Response

    if name in ("GlintError", "ConfigurationError", "HTTPError", "ServerError", "WatcherError"):
        from glint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
