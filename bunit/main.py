"""Composition root for the bunit test engine.

This module is the ONLY location that imports both the core engine and
concrete adapter implementations. All wiring of dependencies happens here,
creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Explicit initialization phase (import test modules, freeze registry)
- Adapter instantiation
- Run and report
"""

import importlib
import logging
import os
import sys

from bunit.adapters.console.stdout import StdoutConsole
from bunit.adapters.sink.file import FileLogSink
from bunit.adapters.sink.null import NullLogSink
from bunit.config import Settings, load_settings
from bunit.core.capture import Capture
from bunit.core.models import ExitStatus, RunCounters
from bunit.core.ports import ConsolePort, LogSinkPort
from bunit.core.registry import TestRegistry, default_registry
from bunit.core.reporter import Reporter
from bunit.core.runner import TestRunner


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure engine logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.WARNING)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # stderr keeps engine diagnostics apart from the report on stdout
    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def load_test_modules(module_names: list[str]) -> None:
    """Import each module so its test declarations run.

    Modules are resolved through the current ``sys.path``.

    Raises:
        ImportError: If a module cannot be imported.
    """
    logger = logging.getLogger(__name__)
    for name in module_names:
        logger.info(f"Loading test module {name}")
        importlib.import_module(name)


def build_log_sink(settings: Settings) -> LogSinkPort:
    """Select the log sink based on configuration.

    Raises:
        OSError: If the log file cannot be created.
    """
    if settings.capture_enabled:
        return FileLogSink(settings.log_file)
    return NullLogSink()


def run_tests(
    registry: TestRegistry,
    settings: Settings,
    console: ConsolePort | None = None,
    sink: LogSinkPort | None = None,
) -> ExitStatus:
    """Run every test in a registry and report the results.

    Freezes the registry, prints the pre-run summary, runs all tests,
    prints the post-run summary and closes the sink.

    Returns:
        ExitStatus.PASS if every test passed (or none exist), else FAIL.

    Raises:
        OSError: If the log sink cannot be created.
        Exception: Any error raised by a test when errors are not contained.
    """
    logger = logging.getLogger(__name__)
    registry.freeze()

    console = console or StdoutConsole()
    sink = sink or build_log_sink(settings)
    try:
        counters = RunCounters(total=registry.total_test_count())
        reporter = Reporter(registry, counters, console, sink)
        runner = TestRunner(
            registry,
            console,
            sink,
            capture=Capture(),
            counters=counters,
            contain_errors=settings.contain_errors,
        )

        reporter.print_pre_run_summary()
        result = runner.run()
        reporter.print_post_run_summary()

        logger.info(
            f"Run complete: {result.passed} passed, "
            f"{result.total - result.passed} did not pass"
        )
        return reporter.exit_status()
    finally:
        sink.close()


def bootstrap() -> ExitStatus:
    """Load configuration, collect tests, wire adapters and run.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Import test modules (registration phase)
    4. Run against the frozen default registry

    Raises:
        ValidationError: On invalid configuration
        ImportError: If a test module cannot be imported
        OSError: If the log sink cannot be created
    """
    # Step 1: Load configuration
    settings = load_settings()

    # Step 2: Configure logging
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    # Step 3: Registration phase, resolving test modules from the working directory
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    load_test_modules(settings.test_modules)
    logger.info(
        f"Collected {default_registry.total_test_count()} tests "
        f"from {len(settings.test_modules)} modules"
    )

    # Step 4: Run
    return run_tests(default_registry, settings)


def main() -> None:
    """Application entry point. Takes no arguments.

    Exit codes:
        0: All tests passed, or none were registered
        -1: At least one test did not pass
        1: Fatal configuration, collection or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        status = bootstrap()
    except KeyboardInterrupt:
        logger.warning("Test run interrupted by user (SIGINT)")
        sys.exit(130)
    except SystemExit as e:
        logger.error(f"Fatal error: sys.exit({e.code!r}) called outside a test")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    sys.exit(int(status))


if __name__ == "__main__":
    main()
