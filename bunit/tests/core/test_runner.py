"""Tests for the test execution loop.

Drives TestRunner against in-memory console and sink fakes and checks
classification, counting, capture discipline and output layout.
"""

import inspect
import sys

import pytest

from bunit.core.assertions import check
from bunit.core.capture import Capture
from bunit.core.models import Outcome, RunCounters
from bunit.core.registry import TestRegistry
from bunit.core.reporter import SEPARATOR
from bunit.core.runner import TestAbortedError, TestRunner, format_verdict
from bunit.tests.fakes import FakeConsole, FakeLogSink

# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def registry() -> TestRegistry:
    return TestRegistry()


@pytest.fixture
def console() -> FakeConsole:
    return FakeConsole()


@pytest.fixture
def sink() -> FakeLogSink:
    return FakeLogSink()


def make_runner(
    registry: TestRegistry,
    console: FakeConsole,
    sink: FakeLogSink,
    **kwargs,
) -> TestRunner:
    registry.freeze()
    return TestRunner(registry, console, sink, **kwargs)


def passing() -> None:
    check(True)


def failing() -> None:
    check(False)


FAILING_LINE = inspect.getsourcelines(failing)[1] + 1


# ============================================================================
# Classification
# ============================================================================


def test_single_passing_test(registry, console, sink) -> None:
    """One true assertion: counted as passed and reported as such."""
    registry.register("ungrouped", "t1", passing)
    runner = make_runner(registry, console, sink)

    result = runner.run()

    assert runner.counters.passed == 1
    assert runner.counters.total == 1
    assert [r.outcome for r in result.results] == [Outcome.PASSED]
    assert "\t[1] : 't1' passed." in console.lines


def test_single_failing_test_reports_location(registry, console, sink) -> None:
    """A false assertion fails with its file:line location."""
    registry.register("ungrouped", "t2", failing)
    runner = make_runner(registry, console, sink)

    result = runner.run()

    assert runner.counters.passed == 0
    [test_result] = result.results
    assert test_result.outcome is Outcome.FAILED
    assert test_result.location == f"test_runner.py:{FAILING_LINE}"
    assert f"\t[1] : 't2' failed at 'test_runner.py:{FAILING_LINE}'." in console.lines


def test_bare_assert_is_a_failure(registry, console, sink) -> None:
    def uses_assert() -> None:
        assert 1 == 2

    registry.register("ungrouped", "bare", uses_assert)
    result = make_runner(registry, console, sink).run()

    [test_result] = result.results
    assert test_result.outcome is Outcome.FAILED
    assert test_result.location.startswith("test_runner.py:")


def test_failure_does_not_halt_run(registry, console, sink) -> None:
    ran: list[str] = []

    def record_then_fail() -> None:
        ran.append("first")
        check(False)

    def record() -> None:
        ran.append("second")

    registry.register("g", "first", record_then_fail)
    registry.register("g", "second", record)
    runner = make_runner(registry, console, sink)

    result = runner.run()

    assert ran == ["first", "second"]
    assert runner.counters.passed == 1
    assert [r.outcome for r in result.results] == [Outcome.FAILED, Outcome.PASSED]


def test_unexpected_error_is_contained_by_default(registry, console, sink) -> None:
    def explode() -> None:
        raise ValueError("boom")

    registry.register("g", "explodes", explode)
    registry.register("g", "after", passing)
    runner = make_runner(registry, console, sink)

    result = runner.run()

    errored, after = result.results
    assert errored.outcome is Outcome.ERRORED
    assert errored.error == "ValueError: boom"
    assert errored.location.startswith("test_runner.py:")
    assert after.outcome is Outcome.PASSED
    assert runner.counters.passed == 1
    assert any("'explodes' errored with 'ValueError: boom'" in line for line in console.lines)


def test_unexpected_error_propagates_when_not_contained(registry, console, sink) -> None:
    """With containment off, an unrecognized error aborts the run."""
    ran: list[str] = []

    def explode() -> None:
        raise KeyError("missing")

    registry.register("g", "explodes", explode)
    registry.register("g", "never", lambda: ran.append("never"))
    runner = make_runner(registry, console, sink, contain_errors=False)
    original = sys.stdout

    with pytest.raises(KeyError, match="missing"):
        runner.run()

    assert ran == []
    assert sys.stdout is original
    assert runner.counters.passed == 0


def test_keyboard_interrupt_is_never_contained(registry, console, sink) -> None:
    def interrupt() -> None:
        raise KeyboardInterrupt

    registry.register("g", "interrupt", interrupt)
    runner = make_runner(registry, console, sink)

    with pytest.raises(KeyboardInterrupt):
        runner.run()


def test_sys_exit_is_contained_as_error(registry, console, sink) -> None:
    """A test calling sys.exit(0) errors and the run carries on."""
    ran: list[str] = []

    def bails() -> None:
        sys.exit(0)

    def never_passes() -> None:
        ran.append("after")
        raise AssertionError("still runs")

    registry.register("g", "bails", bails)
    registry.register("g", "after", never_passes)
    runner = make_runner(registry, console, sink)
    original = sys.stdout

    result = runner.run()

    bailed, after = result.results
    assert bailed.outcome is Outcome.ERRORED
    assert bailed.error == "SystemExit: 0"
    assert bailed.location.startswith("test_runner.py:")
    assert after.outcome is Outcome.FAILED
    assert ran == ["after"]
    assert runner.counters.passed == 0
    assert not runner.counters.all_passed
    assert sys.stdout is original


def test_sys_exit_aborts_when_not_contained(registry, console, sink) -> None:
    def bails() -> None:
        sys.exit(0)

    registry.register("g", "bails", bails)
    registry.register("g", "never", passing)
    runner = make_runner(registry, console, sink, contain_errors=False)
    original = sys.stdout

    with pytest.raises(TestAbortedError, match=r"'bails' called sys.exit\(0\)") as exc_info:
        runner.run()

    assert isinstance(exc_info.value.__cause__, SystemExit)
    assert sys.stdout is original
    assert runner.counters.passed == 0


def test_passed_never_exceeds_total(registry, console, sink) -> None:
    for i in range(5):
        registry.register(f"g{i % 2}", f"t{i}", passing if i % 3 else failing)
    runner = make_runner(registry, console, sink)

    result = runner.run()

    assert runner.counters.passed <= runner.counters.total
    assert runner.counters.passed == result.passed == 3
    assert result.total == 5


# ============================================================================
# Registry interaction
# ============================================================================


def test_duplicate_registration_runs_last_action_only(registry, console, sink) -> None:
    ran: list[str] = []
    registry.register("g1", "t1", lambda: ran.append("first"))
    registry.register("g1", "t1", lambda: ran.append("second"))

    runner = make_runner(registry, console, sink)
    runner.run()

    assert ran == ["second"]
    assert runner.counters.total == 1


def test_same_name_in_two_groups_runs_both(registry, console, sink) -> None:
    ran: list[str] = []
    registry.register("g1", "t1", lambda: ran.append("g1"))
    registry.register("g2", "t1", lambda: ran.append("g2"))

    runner = make_runner(registry, console, sink)
    runner.run()

    assert ran == ["g1", "g2"]
    assert runner.counters.passed == 2


def test_run_freezes_registry(registry, console, sink) -> None:
    registry.register("g1", "t1", passing)
    runner = TestRunner(registry, console, sink)
    runner.run()
    assert registry.frozen


def test_total_includes_tests_registered_after_construction(registry, console, sink) -> None:
    registry.register("g1", "a", passing)
    runner = TestRunner(registry, console, sink)
    registry.register("g1", "b", passing)

    result = runner.run()

    assert runner.counters.total == 2
    assert runner.counters.passed == 2
    assert result.passed == 2


def test_run_only_once(registry, console, sink) -> None:
    registry.register("g1", "t1", passing)
    runner = make_runner(registry, console, sink)
    runner.run()
    with pytest.raises(RuntimeError, match="only be called once"):
        runner.run()


# ============================================================================
# Capture discipline
# ============================================================================


class RecordingCapture(Capture):
    """Capture that counts how often it is started."""

    def __init__(self):
        super().__init__()
        self.begin_call_count = 0

    def begin(self, sink) -> None:
        self.begin_call_count += 1
        super().begin(sink)


def test_empty_registry_never_captures(registry, console, sink) -> None:
    capture = RecordingCapture()
    runner = make_runner(registry, console, sink, capture=capture)

    result = runner.run()

    assert capture.begin_call_count == 0
    assert result.total == 0
    assert runner.counters.passed == 0
    assert runner.counters.all_passed
    assert "RUNNING TESTS..." not in console.lines


def test_one_capture_per_test(registry, console, sink) -> None:
    capture = RecordingCapture()
    registry.register("g1", "a", passing)
    registry.register("g1", "b", failing)
    registry.register("g2", "c", passing)

    make_runner(registry, console, sink, capture=capture).run()

    assert capture.begin_call_count == 3
    assert not capture.active


def test_test_output_goes_to_sink_not_console(registry, console, sink) -> None:
    def chatty() -> None:
        print("diagnostic chatter")

    registry.register("g1", "chatty", chatty)
    make_runner(registry, console, sink).run()

    assert "diagnostic chatter" in sink.output
    assert "diagnostic chatter" not in console.output


def test_stdout_restored_after_each_outcome(registry, console, sink) -> None:
    original = sys.stdout
    seen: list[object] = []

    def record_stdout() -> None:
        seen.append(sys.stdout)

    registry.register("g1", "passes", passing)
    registry.register("g1", "fails", failing)
    registry.register("g1", "records", record_stdout)
    make_runner(registry, console, sink).run()

    assert seen == [sink.stream]
    assert sys.stdout is original


def test_disabled_sink_discards_output(registry, console) -> None:
    sink = FakeLogSink(enabled=False)

    def chatty() -> None:
        print("dropped")

    registry.register("g1", "chatty", chatty)
    runner = make_runner(registry, console, sink)
    runner.run()

    assert sink.output == ""
    assert "dropped" not in console.output
    assert "\t[1] : 'chatty' passed." in console.lines


# ============================================================================
# Output layout
# ============================================================================


def test_log_layout_for_single_test(registry, console, sink) -> None:
    def chatty() -> None:
        print("hello from test")

    registry.register("g1", "chatty", chatty)
    make_runner(registry, console, sink).run()

    assert sink.lines == [
        "Group: 'g1'",
        SEPARATOR,
        "Test 'chatty' log:",
        "",
        "hello from test",
        "",
        "passed.",
        SEPARATOR,
    ]


def test_groups_are_contiguous_in_log(registry, console, sink) -> None:
    """Each group's header precedes its tests and its entries stay together."""
    registry.register("g1", "a", passing)
    registry.register("g2", "b", passing)
    registry.register("g1", "c", passing)

    make_runner(registry, console, sink).run()

    log = sink.lines
    g1 = log.index("Group: 'g1'")
    g2 = log.index("Group: 'g2'")
    a = log.index("Test 'a' log:")
    b = log.index("Test 'b' log:")
    c = log.index("Test 'c' log:")
    assert g1 < a < c < g2 < b


def test_console_layout(registry, console, sink) -> None:
    registry.register("g1", "a", passing)
    registry.register("g2", "b", failing)

    make_runner(registry, console, sink).run()

    assert console.lines == [
        "RUNNING TESTS...",
        "Group: 'g1'",
        "\t[1] : 'a' passed.",
        "Group: 'g2'",
        f"\t[2] : 'b' failed at 'test_runner.py:{FAILING_LINE}'.",
    ]


def test_shared_counters_are_updated(registry, console, sink) -> None:
    registry.register("g1", "a", passing)
    registry.freeze()
    counters = RunCounters(total=registry.total_test_count())

    TestRunner(registry, console, sink, counters=counters).run()

    assert counters.passed == 1


def test_format_verdict_errored() -> None:
    from bunit.core.models import TestResult

    result = TestResult(
        name="t",
        group="g",
        outcome=Outcome.ERRORED,
        location="suite.py:4",
        error="OSError: disk full",
    )
    assert format_verdict(result) == "errored with 'OSError: disk full' at 'suite.py:4'."
