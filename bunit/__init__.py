"""bunit: a minimal test registration and execution engine.

Declare tests with ``case`` or ``declare_test``, express expectations with
``check``, and run everything with the ``bunit`` command.
"""

from bunit.core import (
    UNGROUPED,
    ExitStatus,
    TestFailure,
    case,
    check,
    declare_test,
    default_registry,
    fail,
)

__version__ = "1.3.0"

__all__ = [
    "ExitStatus",
    "TestFailure",
    "UNGROUPED",
    "case",
    "check",
    "declare_test",
    "default_registry",
    "fail",
]
