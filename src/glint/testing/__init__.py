"""Test utilities for glint applications.

Provides an in-process test client and SSE parsing helpers::

    from glint.testing import TestClient
"""

from glint.testing.client import TestClient
from glint.testing.sse import SSETestResult, parse_sse_frames

__all__ = [
    "SSETestResult",
    "TestClient",
    "parse_sse_frames",
]
