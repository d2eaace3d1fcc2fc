"""Compiled router with exact-path matching.

The file server only ever exposes a handful of fixed endpoints (the
reload stream), so paths are matched literally; everything else is the
static file middleware's business.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from glint.errors import MethodNotAllowed, NotFound


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None


class Router:
    """Immutable path -> method -> route table."""

    __slots__ = ("_table",)

    def __init__(self, routes: Iterable[Route]) -> None:
        table: dict[str, dict[str, Route]] = {}
        for route in routes:
            by_method = table.setdefault(route.path, {})
            for method in route.methods:
                by_method[method] = route
        self._table = table

    def match(self, method: str, path: str) -> Route:
        """Match a request path and method against compiled routes.

        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        by_method = self._table.get(path)
        if not by_method:
            raise NotFound(f"No route matches {method} {path!r}")
        route = by_method.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(by_method))
        return route
