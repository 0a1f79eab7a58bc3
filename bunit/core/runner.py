"""Test execution loop.

This module drives a frozen registry group by group, running each test
under capture, classifying the outcome and reporting a status line.
A failure in one test never stops the run.
"""

import logging
import time

from .assertions import UNKNOWN_LOCATION, failure_location, traceback_location
from .capture import Capture
from .models import Outcome, RunCounters, RunResult, TestResult, TestUnit
from .ports import ConsolePort, LogSinkPort
from .registry import TestRegistry
from .reporter import SEPARATOR

logger = logging.getLogger(__name__)


class TestAbortedError(RuntimeError):
    """Raised when a test tries to exit the process and errors are not contained."""

    __test__ = False


def format_verdict(result: TestResult) -> str:
    """Status text for a result, shared by the console and the log sink."""
    if result.outcome is Outcome.PASSED:
        return "passed."
    if result.outcome is Outcome.FAILED:
        verdict = f"failed at '{result.location}'"
    else:
        verdict = f"errored with '{result.error}' at '{result.location}'"
    return f"{verdict}."


class TestRunner:
    """Runs every registered test exactly once, in registry order.

    Per test: redirect diagnostic output to the sink, invoke the action,
    classify the outcome, restore output and report the verdict.

    Assertion failures (``TestFailure`` or a bare ``assert``) are always
    contained. Any other exception is contained when ``contain_errors`` is
    set; otherwise it propagates and aborts the run.

    A ``SystemExit`` raised by an action is treated like any other error so
    it can never end the process with a passing status; uncontained, it is
    re-raised as ``TestAbortedError``. ``KeyboardInterrupt`` always
    propagates.
    """

    __test__ = False

    def __init__(
        self,
        registry: TestRegistry,
        console: ConsolePort,
        sink: LogSinkPort,
        capture: Capture | None = None,
        counters: RunCounters | None = None,
        contain_errors: bool = True,
    ):
        self.registry = registry
        self.console = console
        self.sink = sink
        self.capture = capture or Capture()
        self.counters = counters
        self.contain_errors = contain_errors
        self._has_run = False

    def run(self) -> RunResult:
        """Execute all tests and return their results in run order.

        Raises:
            RuntimeError: If this runner has already run.
            TestAbortedError: If an action called sys.exit and errors are not contained.
            Exception: Whatever an action raised, when errors are not contained.
        """
        if self._has_run:
            raise RuntimeError("TestRunner.run() may only be called once")
        self._has_run = True
        self.registry.freeze()
        if self.counters is None:
            self.counters = RunCounters(total=self.registry.total_test_count())

        if self.registry.total_test_count() == 0:
            logger.info("No tests registered, nothing to run")
            return RunResult()

        self.console.write_line("RUNNING TESTS...")

        results: list[TestResult] = []
        index = 0
        for group, tests in self.registry.groups():
            header = f"Group: '{group}'"
            self.console.write_line(header)
            self.sink.write_line(header)
            for unit in tests:
                index += 1
                results.append(self._run_one(index, unit))

        return RunResult(results=tuple(results))

    def _run_one(self, index: int, unit: TestUnit) -> TestResult:
        self.console.write(f"\t[{index}] : '{unit.name}' ")

        error: BaseException | None = None
        started = time.perf_counter()
        with self.capture.redirect(self.sink.stream):
            self.sink.write_line(SEPARATOR)
            self.sink.write_line(f"Test '{unit.name}' log:")
            self.sink.write_line()
            try:
                unit()
            except AssertionError as e:
                result = TestResult(
                    name=unit.name,
                    group=unit.group,
                    outcome=Outcome.FAILED,
                    location=failure_location(e),
                    duration_seconds=time.perf_counter() - started,
                )
            except (Exception, SystemExit) as e:
                if not self.contain_errors:
                    if isinstance(e, SystemExit):
                        raise TestAbortedError(
                            f"test '{unit.name}' called sys.exit({e.code!r})"
                        ) from e
                    raise
                error = e
                result = TestResult(
                    name=unit.name,
                    group=unit.group,
                    outcome=Outcome.ERRORED,
                    location=traceback_location(e.__traceback__) or UNKNOWN_LOCATION,
                    error=f"{type(e).__name__}: {e}",
                    duration_seconds=time.perf_counter() - started,
                )
            else:
                self.counters.record_pass()
                result = TestResult(
                    name=unit.name,
                    group=unit.group,
                    outcome=Outcome.PASSED,
                    duration_seconds=time.perf_counter() - started,
                )

            verdict = format_verdict(result)
            self.sink.write_line()
            self.sink.write_line(verdict)
            self.sink.write_line(SEPARATOR)

        self.console.write_line(verdict)

        if error is not None:
            logger.error(
                f"Unexpected error in test '{unit.name}' (group '{unit.group}')",
                exc_info=error,
            )
        logger.debug(
            f"Test '{unit.name}' {result.outcome.value} in {result.duration_seconds:.4f}s"
        )
        return result
