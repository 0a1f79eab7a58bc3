"""Core engine for the bunit test runner.

This package contains zero external dependencies and represents
the pure engine: registry, failure signaling, capture, runner and
reporter. Concrete output channels are handled by the adapters package.
"""

from .assertions import TestFailure, check, fail
from .models import (
    UNGROUPED,
    ExitStatus,
    Outcome,
    RunCounters,
    RunResult,
    TestResult,
    TestUnit,
)
from .registry import RegistryFrozenError, TestRegistry, case, declare_test, default_registry

__all__ = [
    "ExitStatus",
    "Outcome",
    "RegistryFrozenError",
    "RunCounters",
    "RunResult",
    "TestFailure",
    "TestRegistry",
    "TestResult",
    "TestUnit",
    "UNGROUPED",
    "case",
    "check",
    "declare_test",
    "default_registry",
    "fail",
]
