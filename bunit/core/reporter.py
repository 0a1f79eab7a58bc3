"""Pre- and post-run summaries and the program-level verdict."""

from .models import ExitStatus, RunCounters
from .ports import ConsolePort, LogSinkPort
from .registry import TestRegistry

SEPARATOR = "-" * 80


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


class Reporter:
    """Prints run summaries and derives the exit status.

    Summary computation reads the counters only, so printing it any
    number of times yields the same figures.
    """

    def __init__(
        self,
        registry: TestRegistry,
        counters: RunCounters,
        console: ConsolePort,
        sink: LogSinkPort,
    ):
        self.registry = registry
        self.counters = counters
        self.console = console
        self.sink = sink

    def print_pre_run_summary(self) -> None:
        """Announce how many tests and groups are about to run."""
        lines = [
            SEPARATOR,
            "INFO:\tIf all tests pass (or no tests fail), the program will return success.",
            "\t\tOtherwise, it will return failure.",
            f"INFO:\tFound {_plural(self.registry.total_test_count(), 'test')} "
            f"in {_plural(self.registry.group_count(), 'group')}.",
            SEPARATOR,
        ]
        for line in lines:
            self.console.write_line(line)

    def summary_line(self) -> str:
        return f"Passed {self.counters.passed} out of {self.counters.total} tests."

    def print_post_run_summary(self) -> None:
        """Write the pass count to the console and the log sink."""
        lines = [SEPARATOR, "SUMMARY:", f"\t{self.summary_line()}", SEPARATOR]
        for line in lines:
            self.console.write_line(line)
        for line in lines:
            self.sink.write_line(line)

    def exit_status(self) -> ExitStatus:
        """PASS when every test passed, including when there were none."""
        if self.counters.all_passed:
            return ExitStatus.PASS
        return ExitStatus.FAIL
