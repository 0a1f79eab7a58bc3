"""Domain models for the bunit test engine.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, TypeAlias

UNGROUPED = "ungrouped"

TestAction: TypeAlias = Callable[[], Any]


class Outcome(Enum):
    """How a single test invocation ended.

    - PASSED: the action returned normally
    - FAILED: the action raised the recognized failure signal
    - ERRORED: the action raised anything else and the error was contained
    """

    PASSED = "passed"
    FAILED = "failed"
    ERRORED = "errored"


class ExitStatus(IntEnum):
    """Process-level result of a run."""

    PASS = 0
    FAIL = -1


@dataclass(frozen=True, eq=False)
class TestUnit:
    """One registered, named, groupable, zero-argument test action.

    Instances are identity-bound to a single registration: they compare
    by identity and refuse to be copied.
    """

    __test__ = False

    name: str
    group: str
    action: TestAction

    def __post_init__(self) -> None:
        """Validate test unit invariants on creation."""
        if not self.group or not self.group.strip():
            raise ValueError("group must be a non-empty string")
        if not callable(self.action):
            raise TypeError(f"action for test '{self.name}' is not callable")

    def __copy__(self) -> "TestUnit":
        raise TypeError(f"test unit '{self.name}' cannot be copied")

    def __deepcopy__(self, memo: dict[int, Any]) -> "TestUnit":
        raise TypeError(f"test unit '{self.name}' cannot be copied")

    def __call__(self) -> None:
        self.action()


@dataclass
class RunCounters:
    """Pass/total bookkeeping for a single run.

    ``passed`` only ever moves forward by one per successful test.
    """

    total: int
    passed: int = 0

    def __post_init__(self) -> None:
        if self.total < 0:
            raise ValueError(f"total must be non-negative, got {self.total}")

    def record_pass(self) -> None:
        """Count one more passing test."""
        if self.passed >= self.total:
            raise ValueError(
                f"passed count cannot exceed total ({self.total})"
            )
        self.passed += 1

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def all_passed(self) -> bool:
        return self.passed == self.total


@dataclass(frozen=True)
class TestResult:
    """Outcome of one test invocation."""

    __test__ = False

    name: str
    group: str
    outcome: Outcome
    location: str | None = None
    error: str | None = None
    duration_seconds: float = 0.0

    @property
    def passed(self) -> bool:
        return self.outcome is Outcome.PASSED


@dataclass(frozen=True)
class RunResult:
    """Summary of a complete run, results in execution order."""

    results: tuple[TestResult, ...] = field(default_factory=tuple)

    @property
    def passed(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def total(self) -> int:
        return len(self.results)

    def by_outcome(self, outcome: Outcome) -> tuple[TestResult, ...]:
        """Return the results that ended with ``outcome``."""
        return tuple(r for r in self.results if r.outcome is outcome)
