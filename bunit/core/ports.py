"""Port interfaces for the bunit test engine.

These abstract base classes define the boundaries between the core
engine and its output channels. Implementations live in the adapters/
package.

Port Interface Categories:

1. **ConsolePort** - the primary report channel. Progress, verdicts and
   summaries always go here, never through the captured stream.
2. **LogSinkPort** - the destination for captured test output plus the
   per-test banners and verdicts written alongside it.
"""

from abc import ABC, abstractmethod
from typing import TextIO


class ConsolePort(ABC):
    """Port for the primary (uncaptured) status channel.

    Implementations must keep writing to their own stream even while
    ``sys.stdout`` is redirected by a capture.
    """

    @abstractmethod
    def write(self, text: str) -> None:
        """Write text as-is, without appending a newline.

        Args:
            text: Text to emit.
        """

    def write_line(self, text: str = "") -> None:
        """Write text followed by a newline."""
        self.write(f"{text}\n")


class LogSinkPort(ABC):
    """Port for the sink that receives diagnostic output during capture.

    A disabled sink discards everything: writes are accepted and dropped,
    and its ``stream`` swallows whatever a test prints.

    Implementations must handle:
    - Providing a text stream suitable for assignment to ``sys.stdout``
    - Keeping runner writes and captured output in one ordered stream
    - Releasing any underlying handle on close
    """

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether written output is persisted anywhere."""

    @property
    @abstractmethod
    def stream(self) -> TextIO:
        """Text stream that captured output is redirected into."""

    def write(self, text: str) -> None:
        """Write runner text into the sink if it is enabled."""
        if self.enabled:
            self.stream.write(text)

    def write_line(self, text: str = "") -> None:
        self.write(f"{text}\n")

    @abstractmethod
    def close(self) -> None:
        """Flush and release the sink. Safe to call more than once."""
