"""Fake implementations of core ports for testing.

These in-memory implementations allow the core engine to be tested
without touching the real stdout or the filesystem:

- FakeConsole: Records everything written to the primary channel
- FakeLogSink: Records runner writes and captured test output
"""

from .console import FakeConsole
from .sink import FakeLogSink

__all__ = [
    "FakeConsole",
    "FakeLogSink",
]
