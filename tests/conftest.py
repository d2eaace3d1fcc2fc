"""Shared fixtures: a small site directory and an app serving it."""

import pytest

from glint.app import App
from glint.config import ServeConfig


@pytest.fixture
def site(tmp_path):
    """A served directory with pages, assets, and nested folders."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text(
        "<!doctype html><html><head><title>Home</title></head>"
        "<body><h1>Home</h1></body></html>"
    )
    (root / "style.css").write_text("body { color: red; }")
    (root / "app.js").write_text("console.log('hello');")
    (root / "data.bin").write_bytes(b"\x00\x01\x02\x03")
    (root / "fragment.html").write_text("<p>no body tag</p>")

    docs = root / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<html><body>Docs</body></html>")

    assets = root / "assets"
    assets.mkdir()
    (assets / "logo.svg").write_text("<svg></svg>")
    return root


@pytest.fixture
def make_app(site):
    """Build an app over ``site`` with test-friendly defaults."""

    def factory(**overrides: object) -> App:
        options: dict[str, object] = {"root": site, "debounce": 0.05, "open_browser": False}
        options.update(overrides)
        return App(ServeConfig(**options))

    return factory
