"""Tests for the lazily-resolved top-level ``glint`` API."""

import pytest

import glint


class TestLazyImports:
    @pytest.mark.parametrize("name", glint.__all__)
    def test_public_names_resolve(self, name) -> None:
        assert getattr(glint, name) is not None

    def test_app_is_class(self) -> None:
        from glint.app import App

        assert glint.App is App

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            glint.nope  # noqa: B018

    def test_version(self) -> None:
        assert isinstance(glint.__version__, str)
