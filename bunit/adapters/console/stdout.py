"""Stdout console adapter.

Implements ConsolePort by writing status lines to the process stdout.
"""

import logging
import sys
from typing import TextIO

from bunit.core.ports import ConsolePort

logger = logging.getLogger(__name__)


class StdoutConsole(ConsolePort):
    """Writes report lines to the stream that was stdout at construction."""

    def __init__(self, stream: TextIO | None = None):
        """Initialize stdout console adapter.

        Args:
            stream: Stream to write to. Defaults to ``sys.stdout`` as it is
                    now, so later redirections of ``sys.stdout`` do not
                    affect this console.
        """
        self.stream = stream if stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()
