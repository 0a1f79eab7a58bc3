"""Scoped redirection of the diagnostic output channel.

While a test runs, anything it prints to ``sys.stdout`` is diverted to the
configured sink. The runner's own report lines are written through the
console port, which holds its stream directly and is unaffected.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

logger = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """Raised when a capture is started while another one is active."""


class Capture:
    """Single-level save/restore of one process-wide stream slot.

    ``begin`` swaps the stream for the sink and remembers the prior one;
    ``end`` puts the prior one back. Nesting is not supported.
    """

    def __init__(self, stream_name: str = "stdout"):
        if stream_name not in ("stdout", "stderr"):
            raise ValueError(f"stream_name must be 'stdout' or 'stderr', got {stream_name!r}")
        self.stream_name = stream_name
        self._saved: TextIO | None = None
        self._sink: TextIO | None = None

    @property
    def active(self) -> bool:
        return self._saved is not None

    @property
    def sink(self) -> TextIO | None:
        """The sink currently receiving output, if a capture is active."""
        return self._sink

    def begin(self, sink: TextIO) -> None:
        """Make sink the active diagnostic target.

        Raises:
            CaptureError: If a capture is already active.
        """
        if self._saved is not None:
            raise CaptureError(f"sys.{self.stream_name} is already being captured")
        self._saved = getattr(sys, self.stream_name)
        self._sink = sink
        setattr(sys, self.stream_name, sink)

    def end(self) -> None:
        """Restore the target that was active before begin. Safe to repeat."""
        if self._saved is None:
            return
        sink = self._sink
        setattr(sys, self.stream_name, self._saved)
        self._saved = None
        self._sink = None
        if sink is not None:
            try:
                sink.flush()
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to flush capture sink: {e}")

    @contextmanager
    def redirect(self, sink: TextIO) -> Iterator[TextIO]:
        """Capture for the duration of a with block, restoring on any exit."""
        self.begin(sink)
        try:
            yield sink
        finally:
            self.end()
