"""Log file sink adapter.

Implements LogSinkPort by writing captured test output, together with the
runner's banners and verdicts, to a single log file. The file is truncated
when the sink is created.
"""

import logging
from pathlib import Path
from typing import TextIO

from bunit.core.ports import LogSinkPort

logger = logging.getLogger(__name__)


class FileLogSink(LogSinkPort):
    """Persists captured output to a log file."""

    def __init__(self, log_path: str, encoding: str = "utf-8"):
        """Open the log file for writing.

        Args:
            log_path: Path of the log file. Missing parent directories are
                      created.
            encoding: Text encoding of the log file.

        Raises:
            ValueError: If log_path is empty or names a directory.
            OSError: If the file or its parent directory cannot be created.
        """
        if not log_path or not log_path.strip():
            raise ValueError("log_path must be a non-empty string")

        self.path = Path(log_path).resolve()
        if self.path.is_dir():
            raise ValueError(f"log_path is a directory: {log_path}")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"Failed to create log directory {self.path.parent}: {e}") from e

        try:
            self._stream: TextIO = open(self.path, "w", encoding=encoding)
        except OSError as e:
            raise OSError(f"Failed to open log file {self.path}: {e}") from e

        logger.debug(f"Writing test log to {self.path}")

    @property
    def enabled(self) -> bool:
        return True

    @property
    def stream(self) -> TextIO:
        return self._stream

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.flush()
            self._stream.close()
