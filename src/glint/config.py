"""Server configuration.

ServeConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path

from glint.errors import ConfigurationError
from glint.inject import InjectAnchor

DEFAULT_EXCLUDE: tuple[str, ...] = (".git", "node_modules", ".zig-cache", "__pycache__")


@dataclass(frozen=True, slots=True)
class ServeConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServeConfig(root="site", port=3000, debounce=0.25)
    """

    # Served directory
    root: str | Path = "."

    # Server
    host: str = "127.0.0.1"
    port: int = 9222

    # Watching
    debounce: float = 0.1  # Quiet period in seconds before a reload fires
    exclude: tuple[str, ...] = DEFAULT_EXCLUDE

    # Browser
    open_browser: bool = True

    # Reload stream
    reload_path: str = "/__livereload"
    heartbeat_interval: float = 15.0

    # HTML injection
    inject_anchor: InjectAnchor = InjectAnchor.BODY
    cache_bust: bool = False

    # Static files
    cache_control: str = "no-cache"
    directory_listing: bool = True

    # Logging
    log_level: str = "info"

    @property
    def root_path(self) -> Path:
        """The served directory as an absolute path."""
        return Path(self.root).expanduser().resolve()

    @property
    def url(self) -> str:
        """URL to open in the browser."""
        host = "localhost" if self.host in ("", "0.0.0.0", "::") else self.host
        return f"http://{host}:{self.port}"

    def validate(self) -> None:
        """Raise ``ConfigurationError`` for values the server cannot run with."""
        if not self.root_path.is_dir():
            msg = f"Directory not found: {self.root}"
            raise ConfigurationError(msg)
        if self.debounce < 0:
            msg = f"Debounce must not be negative (got {self.debounce})"
            raise ConfigurationError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"Port out of range: {self.port}"
            raise ConfigurationError(msg)
        if not self.reload_path.startswith("/"):
            msg = f"Reload path must start with '/': {self.reload_path!r}"
            raise ConfigurationError(msg)
        if self.heartbeat_interval <= 0:
            msg = f"Heartbeat interval must be positive (got {self.heartbeat_interval})"
            raise ConfigurationError(msg)
