"""Static file serving middleware.

Serves the watched directory at the site root with automatic index file
resolution.  HTML documents are read fully and passed through a rewriter
(the reload snippet injector) before they are sent; everything else is
served as-is.

Falls through to the next handler for missing files and for reserved
paths such as the reload stream.
"""

import html
import mimetypes
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path
from urllib.parse import quote

from glint.errors import Forbidden
from glint.http.request import Request
from glint.http.response import Response
from glint.middleware.protocol import AnyResponse, Next

HTML_SUFFIXES = frozenset({".html", ".htm"})


class StaticFiles:
    """Middleware that serves files from a directory at the site root.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        static = StaticFiles(
            "site",
            rewrite_html=ReloadInjector("/__livereload"),
            reserved=("/__livereload",),
        )
        response = await static(request, next)
    """

    __slots__ = (
        "_cache_control",
        "_directory",
        "_directory_listing",
        "_index",
        "_reserved",
        "_rewrite_html",
    )

    def __init__(
        self,
        directory: str | Path,
        *,
        rewrite_html: Callable[[bytes], bytes] | None = None,
        reserved: Iterable[str] = (),
        index: str = "index.html",
        cache_control: str = "no-cache",
        directory_listing: bool = True,
    ) -> None:
        self._directory = Path(directory).resolve()
        self._rewrite_html = rewrite_html
        self._reserved = frozenset(reserved)
        self._index = index
        self._cache_control = cache_control
        self._directory_listing = directory_listing

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        """Serve a static file or fall through."""
        # Only serve GET and HEAD
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        path = request.path
        if path in self._reserved:
            return await next(request)

        relative = path.lstrip("/")

        # Resolve the file path and check for traversal
        try:
            file_path = (self._directory / relative).resolve() if relative else self._directory
        except (OSError, ValueError):
            return await next(request)
        if not file_path.is_relative_to(self._directory):
            raise Forbidden()

        # Directory: index file, listing, or a redirect to the slashed URL
        if file_path.is_dir():
            index_path = file_path / self._index
            has_index = index_path.is_file()
            if not has_index and not self._directory_listing:
                return await next(request)
            if not path.endswith("/"):
                return Response.redirect(_slashed_location(request))
            if not has_index:
                return self._list_directory(file_path, path)
            file_path = index_path

        if not file_path.is_file():
            return await next(request)

        if file_path.suffix.lower() in HTML_SUFFIXES:
            return self._serve_document(file_path)
        return self._serve_file(file_path, request)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _serve_document(self, file_path: Path) -> Response:
        """Read an HTML file, rewrite it, and build a response.  Never cached."""
        body = file_path.read_bytes()
        if self._rewrite_html is not None:
            body = self._rewrite_html(body)
        return Response(
            body=body,
            content_type="text/html; charset=utf-8",
        ).with_header("Cache-Control", "no-store")

    def _serve_file(self, file_path: Path, request: Request) -> Response:
        """Read a file and build a response, honouring ``If-Modified-Since``."""
        stat = file_path.stat()
        last_modified = formatdate(stat.st_mtime, usegmt=True)
        if _not_modified(request.headers.get("if-modified-since"), stat.st_mtime):
            return (
                Response(body=b"", status=304)
                .with_header("Last-Modified", last_modified)
                .with_header("Cache-Control", self._cache_control)
            )

        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/") or content_type == "application/javascript":
            content_type += "; charset=utf-8"

        return (
            Response(body=file_path.read_bytes(), content_type=content_type)
            .with_header("Last-Modified", last_modified)
            .with_header("Cache-Control", self._cache_control)
        )

    def _list_directory(self, directory: Path, url_path: str) -> Response:
        """Plain HTML listing for a directory without an index file.

        The listing is generated markup, not a served document, so it does
        not pass through the HTML rewriter.
        """
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
        title = html.escape(url_path)
        lines = [
            "<!doctype html>",
            f"<title>Index of {title}</title>",
            f"<h1>Index of {title}</h1>",
            "<pre>",
        ]
        if url_path != "/":
            lines.append('<a href="../">../</a>')
        for entry in entries:
            name = entry.name + ("/" if entry.is_dir() else "")
            lines.append(f'<a href="{quote(name)}">{html.escape(name)}</a>')
        lines.append("</pre>")
        return Response(body="\n".join(lines) + "\n").with_header(
            "Cache-Control", "no-store"
        )


def _not_modified(header: str | None, mtime: float) -> bool:
    """True when an ``If-Modified-Since`` value is at or after *mtime*."""
    if not header:
        return False
    try:
        since = parsedate_to_datetime(header)
    except (TypeError, ValueError):
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=UTC)
    return int(mtime) <= since.timestamp() and since <= datetime.now(UTC)


def _slashed_location(request: Request) -> str:
    """Percent-encoded ``Location`` for *request*'s path plus a trailing slash."""
    location = quote(request.path, safe="/") + "/"
    if request.query_string:
        location += "?" + request.query_string.decode("latin-1")
    return location
