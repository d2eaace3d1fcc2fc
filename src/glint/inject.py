"""Reload snippet injection for served HTML documents.

Splices a ``<script>`` element that listens on the reload stream into
every HTML document before it is written to the client.  The anchor is
configurable:

- ``InjectAnchor.BODY`` inserts the snippet right before the first
  ``</body>``.
- ``InjectAnchor.HEAD`` inserts it right after the first opening
  ``<head>`` tag.

When the anchor is absent the snippet is appended to the end of the
document, so every page gains reload capability regardless of structure.
"""

import json
import re
from enum import StrEnum


class InjectAnchor(StrEnum):
    """Where the reload snippet goes in an HTML document."""

    BODY = "body"
    HEAD = "head"


_ANCHORS: dict[InjectAnchor, re.Pattern[bytes]] = {
    InjectAnchor.BODY: re.compile(rb"</body\s*>", re.IGNORECASE),
    InjectAnchor.HEAD: re.compile(rb"<head(?:\s[^>]*)?>", re.IGNORECASE),
}

_RELOAD_JS = """\
<script>
(() => {
  const source = new EventSource(%(path)s);
  source.onmessage = () => location.reload();
})();
</script>"""

# Asset URLs get a fresh query parameter before the reload so the browser
# cannot reuse a stale copy of a changed stylesheet, script, or image.
_CACHE_BUST_JS = """\
<script>
(() => {
  const source = new EventSource(%(path)s);
  source.onmessage = () => {
    const stamp = String(Date.now());
    document
      .querySelectorAll('link[rel="stylesheet"][href], script[src], img[src]')
      .forEach((el) => {
        const attr = el.tagName === "LINK" ? "href" : "src";
        const url = new URL(el.getAttribute(attr), location.href);
        if (url.origin !== location.origin) return;
        url.searchParams.set("_glint", stamp);
        el.setAttribute(attr, url.href);
      });
    location.reload();
  };
})();
</script>"""


def reload_snippet(path: str = "/__livereload", *, cache_bust: bool = False) -> bytes:
    """Build the client-side script that reloads the page on each message."""
    template = _CACHE_BUST_JS if cache_bust else _RELOAD_JS
    return (template % {"path": json.dumps(path)}).encode("utf-8")


def inject_reload(
    document: bytes,
    snippet: bytes,
    *,
    anchor: InjectAnchor = InjectAnchor.BODY,
) -> bytes:
    """Insert *snippet* at the first *anchor* in *document*.

    Exactly one insertion happens.  The match is ASCII case-insensitive
    (``</BODY>`` counts).  Without an anchor the snippet is appended.
    """
    match = _ANCHORS[anchor].search(document)
    if match is None:
        return document + snippet
    at = match.start() if anchor is InjectAnchor.BODY else match.end()
    return document[:at] + snippet + document[at:]


def count_snippets(document: bytes, snippet: bytes) -> int:
    """How many copies of *snippet* appear in *document*."""
    return document.count(snippet)


class ReloadInjector:
    """Callable that rewrites HTML documents with a fixed snippet and anchor.

    Handed to ``StaticFiles`` so every ``.html`` file it serves passes
    through the rewriter::

        injector = ReloadInjector("/__livereload", anchor=InjectAnchor.HEAD)
        body = injector(path.read_bytes())
    """

    __slots__ = ("_anchor", "_snippet")

    def __init__(
        self,
        path: str = "/__livereload",
        *,
        anchor: InjectAnchor = InjectAnchor.BODY,
        cache_bust: bool = False,
    ) -> None:
        self._snippet = reload_snippet(path, cache_bust=cache_bust)
        self._anchor = anchor

    @property
    def snippet(self) -> bytes:
        return self._snippet

    @property
    def anchor(self) -> InjectAnchor:
        return self._anchor

    def __call__(self, document: bytes) -> bytes:
        return inject_reload(document, self._snippet, anchor=self._anchor)
