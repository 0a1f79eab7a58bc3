"""Discarding log sink adapter.

Used when capture logging is disabled: whatever a test prints is neither
shown nor persisted.
"""

import io
from typing import TextIO

from bunit.core.ports import LogSinkPort


class _DiscardStream(io.TextIOBase):
    """Text stream that accepts and drops every write."""

    def writable(self) -> bool:
        return True

    def write(self, s: str) -> int:
        return len(s)


class NullLogSink(LogSinkPort):
    """Sink that discards everything written to it."""

    def __init__(self) -> None:
        self._stream = _DiscardStream()

    @property
    def enabled(self) -> bool:
        return False

    @property
    def stream(self) -> TextIO:
        return self._stream  # type: ignore[return-value]

    def close(self) -> None:
        self._stream.close()
