"""Startup banner for the live-reload server.

One line naming what is served and where, plus the active options::

    Live ./site at http://localhost:9222 (debounce=100ms)

Respects TTY detection: no ANSI codes when piped or redirected.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from glint.config import ServeConfig


def _use_color(stream: object | None = None) -> bool:
    """True if the output stream supports ANSI color."""
    s = stream or sys.stdout
    try:
        return s.isatty()  # type: ignore[union-attr]
    except Exception:
        return False


class _Palette:
    """ANSI escape sequences; empty strings when color is disabled."""

    __slots__ = ("bold", "cyan", "dim", "green", "reset")

    def __init__(self, *, enabled: bool) -> None:
        if enabled:
            self.reset = "\033[0m"
            self.bold = "\033[1m"
            self.dim = "\033[2m"
            self.green = "\033[32m"
            self.cyan = "\033[36m"
        else:
            self.reset = ""
            self.bold = ""
            self.dim = ""
            self.green = ""
            self.cyan = ""


def format_duration(seconds: float) -> str:
    """Render a delay the way it is typed on the command line."""
    if seconds >= 1 and float(seconds).is_integer():
        return f"{int(seconds)}s"
    return f"{round(seconds * 1000, 3):g}ms"


def format_banner(config: ServeConfig, *, color: bool | None = None) -> str:
    """Build the startup line for *config*."""
    c = _Palette(enabled=_use_color() if color is None else color)
    options = [f"debounce={format_duration(config.debounce)}"]
    if config.cache_bust:
        options.append("cache-bust")
    if config.inject_anchor != "body":
        options.append(f"inject-at={config.inject_anchor}")
    return (
        f"{c.green}{c.bold}Live{c.reset} {config.root} at "
        f"{c.cyan}{config.url}{c.reset} {c.dim}({', '.join(options)}){c.reset}"
    )


def print_banner(config: ServeConfig, stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    print(format_banner(config, color=_use_color(out)), file=out, flush=True)
