"""Routing: exact-path route table.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.
"""

from glint.routing.router import Route, Router

__all__ = ["Route", "Router"]
