"""Terminal error reporting for the glint server.

Unexpected request failures are logged without the wall of event-loop
and server frames a raw ``logger.exception()`` produces.  Verbosity comes
from the ``GLINT_TRACEBACK`` environment variable:

- ``compact`` (default): error summary plus the frames from user code
- ``minimal``: one line with the error and where it was raised
- ``full``: the standard traceback
"""

from __future__ import annotations

import logging
import os
import sysconfig
import traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glint.http.request import Request

logger = logging.getLogger("glint.server")

_LIBRARY_ROOTS = tuple(
    {sysconfig.get_paths()[key] for key in ("stdlib", "platstdlib", "purelib", "platlib")}
)

# Frames shown by the compact format
_MAX_FRAMES = 5


def _is_app_frame(filename: str) -> bool:
    """True for frames from user code, not the stdlib or installed packages."""
    if filename.startswith("<"):
        return False
    return not filename.startswith(_LIBRARY_ROOTS)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary followed by at most five application frames.

    Falls back to the innermost three frames when none are from user
    code, so there is always a location to look at.
    """
    frames = traceback.extract_tb(exc.__traceback__)
    shown = [frame for frame in frames if _is_app_frame(frame.filename)] or frames[-3:]

    lines = [f"{type(exc).__name__}: {exc}"]
    if shown:
        lines.append("  Traceback (most recent call last):")
    for frame in shown[-_MAX_FRAMES:]:
        lines.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
        if frame.line:
            lines.append(f"      {frame.line.strip()}")
    return "\n".join(lines)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary for minimal verbosity."""
    frames = traceback.extract_tb(exc.__traceback__)
    where = f" at {frames[-1].filename}:{frames[-1].lineno}" if frames else ""
    return f"{type(exc).__name__}{where}: {exc}"


def log_error(exc: BaseException, request: Request | None = None) -> None:
    """Log an internal error at the ``GLINT_TRACEBACK`` verbosity."""
    prefix = f"500 {request.method} {request.path}" if request is not None else "Server error"
    match os.environ.get("GLINT_TRACEBACK", "compact").lower():
        case "full":
            logger.error(prefix, exc_info=exc)
        case "minimal":
            logger.error("%s: %s", prefix, format_minimal_error(exc))
        case _:
            logger.error("%s\n%s", prefix, format_compact_traceback(exc))
