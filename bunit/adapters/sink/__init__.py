"""Log sink adapters for captured test output.

- FileLogSink: persist output to a log file
- NullLogSink: discard output entirely
"""

from .file import FileLogSink
from .null import NullLogSink

__all__ = ["FileLogSink", "NullLogSink"]
