"""Glint CLI: serve a directory with live reload.

Entry point registered as ``glint`` in ``pyproject.toml``::

    [project.scripts]
    glint = "glint.cli:main"
"""

import argparse
import re

from glint import __version__
from glint.config import DEFAULT_EXCLUDE

_UNITS = {"ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3, "s": 1.0, "m": 60.0, "h": 3600.0}
_BARE = re.compile(r"\d+(?:\.\d+)?")
_TERM = re.compile(r"(\d+(?:\.\d+)?)\s*(ns|us|µs|ms|s|m|h)\s*")


def parse_duration(text: str) -> float:
    """Parse a duration such as ``100ms``, ``1.5s``, ``1m30s`` into seconds.

    Terms with units (``ns``, ``us``, ``ms``, ``s``, ``m``, ``h``) may be
    chained; a bare number means milliseconds.
    """
    text = text.strip()
    if _BARE.fullmatch(text):
        return float(text) / 1000
    total = 0.0
    pos = 0
    while pos < len(text):
        match = _TERM.match(text, pos)
        if match is None:
            break
        total += float(match[1]) * _UNITS[match[2]]
        pos = match.end()
    if not text or pos != len(text):
        msg = f"invalid duration {text!r} (expected e.g. 100ms, 1.5s or 1m)"
        raise argparse.ArgumentTypeError(msg)
    return total


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="glint",
        description="Glint: serve a directory and reload the browser when files change.",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        metavar="DIR",
        help="Directory to serve (default: current directory)",
    )
    parser.add_argument("--dir", dest="dir_option", default=None, help="Directory to serve")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host address")
    parser.add_argument("--port", type=int, default=9222, help="Bind port number")
    parser.add_argument(
        "--debounce",
        type=parse_duration,
        default=0.1,
        help=(
            "Quiet period before reloading, e.g. 100ms, 1.5s or 1m30s;"
            " a bare number is milliseconds (default: 100ms)"
        ),
    )
    parser.add_argument(
        "--exclude",
        default=",".join(DEFAULT_EXCLUDE),
        help="Comma-separated path substrings to ignore (default: %(default)s)",
    )
    parser.add_argument(
        "--open",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Open the browser on startup",
    )
    parser.add_argument(
        "--inject-at",
        choices=("body", "head"),
        default="body",
        help="Where to place the reload script in HTML pages (default: body)",
    )
    parser.add_argument(
        "--cache-bust",
        action="store_true",
        help="Re-fetch stylesheets, scripts and images on reload",
    )
    parser.add_argument(
        "--log-level",
        choices=("debug", "info", "warning", "error"),
        default="info",
        help="Logging verbosity (default: info)",
    )
    parser.add_argument("--version", action="version", version=f"glint {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``glint`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.directory is not None and args.dir_option is not None:
        parser.error("give the directory either as DIR or --dir, not both")

    from glint.cli._serve import serve_directory

    serve_directory(args)
