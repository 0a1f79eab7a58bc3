"""Failure signaling for test actions.

A test expresses expectations through ``check``. A false condition raises
``TestFailure`` carrying a short ``"<file>:<line>"`` location that the
runner reports at the per-test boundary.
"""

import inspect
from pathlib import PureWindowsPath
from types import FrameType, TracebackType

UNKNOWN_LOCATION = "<unknown>"


class TestFailure(AssertionError):
    """Recognized failure signal raised by a failed expectation."""

    __test__ = False

    def __init__(self, location: str, message: str | None = None):
        self.location = location
        self.message = message
        text = f"failed at '{location}'"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


def short_location(filename: str, lineno: int | None) -> str:
    """Build a location descriptor from the last path component of filename.

    Both separators are honoured so the descriptor is the same for paths
    produced on any platform.

    Examples:
        >>> short_location("/src/tests/test_tokens.py", 12)
        'test_tokens.py:12'
        >>> short_location("C:\\\\src\\\\test_tokens.py", 7)
        'test_tokens.py:7'
    """
    basename = PureWindowsPath(filename).name or filename
    if lineno is None:
        return basename
    return f"{basename}:{lineno}"


def frame_location(frame: FrameType) -> str:
    """Location descriptor for the line a frame is currently executing."""
    return short_location(frame.f_code.co_filename, frame.f_lineno)


def traceback_location(tb: TracebackType | None) -> str | None:
    """Location descriptor of the innermost frame in a traceback."""
    if tb is None:
        return None
    while tb.tb_next is not None:
        tb = tb.tb_next
    return short_location(tb.tb_frame.f_code.co_filename, tb.tb_lineno)


def _caller_location() -> str:
    # Two frames up: past the public helper, into the test action
    frame = inspect.currentframe()
    try:
        caller = frame.f_back.f_back if frame and frame.f_back else None
        return frame_location(caller) if caller is not None else UNKNOWN_LOCATION
    finally:
        del frame


def check(condition: object, message: str | None = None) -> None:
    """Raise TestFailure at the caller's location when condition is false.

    Args:
        condition: Value evaluated for truthiness.
        message: Optional text appended to the failure.

    Raises:
        TestFailure: If condition is falsy.
    """
    if not condition:
        raise TestFailure(_caller_location(), message)


def fail(message: str | None = None) -> None:
    """Unconditionally raise TestFailure at the caller's location."""
    raise TestFailure(_caller_location(), message)


def failure_location(error: AssertionError) -> str:
    """Location for a recognized failure, whether TestFailure or bare assert."""
    if isinstance(error, TestFailure):
        return error.location
    return traceback_location(error.__traceback__) or UNKNOWN_LOCATION
