"""The test suite base class and its run lifecycle."""

import json
import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from liteunit.config import SuiteConfig
from liteunit.core.assertions import Assertions
from liteunit.core.coverage import CoverageProvider
from liteunit.core.discovery import TestDiscovery
from liteunit.core.errors import HandledFault, NoActiveTestError
from liteunit.core.faults import FaultInterceptor, default_fault_labels, fault_from_exception
from liteunit.core.models import AssertionTally, SuiteResult, TestCase, TestState

if TYPE_CHECKING:
    from liteunit.report.base import Report

_UNSET: Any = object()


@dataclass
class RunContext:
    """State that only exists while a suite is running."""

    suite: "TestSuite"
    current: Optional[TestCase] = None
    fixtures: dict[str, Any] = field(default_factory=dict)


_active_run: ContextVar[Optional[RunContext]] = ContextVar("liteunit_active_run", default=None)


class TestSuite(Assertions):
    """Base class for unit tests.

    Subclass it and add public methods; each one becomes a test. Override
    :meth:`setup` and :meth:`teardown` for work shared by every test, and
    call the assertion methods (``ok``, ``equal``, ``expect``, ...) from
    the tests. Then call :meth:`run`.
    """

    __test__ = False

    def __init__(
        self,
        config: Optional[SuiteConfig] = None,
        coverage: Optional[CoverageProvider] = None,
    ):
        """Initialize the suite and discover its tests.

        Args:
            config: Suite configuration; defaults apply when omitted
            coverage: Optional code-coverage provider
        """
        self.config = config or SuiteConfig()
        self.title = self.config.title or type(self).__name__
        self.fault_labels = default_fault_labels()
        self.warning_codes = self.config.faults.warning_codes()
        self.coverage = coverage
        self.report: Optional["Report"] = None
        self.tests: list[TestCase] = TestDiscovery(TestSuite).discover(self)
        self._context: Optional[RunContext] = None

    def setup(self) -> None:
        """Override this to prepare fixtures before each test."""

    def teardown(self) -> None:
        """Override this to clean up after each test."""

    @property
    def current_test(self) -> Optional[TestCase]:
        """The test that is currently running, if any."""
        context = self._context
        return context.current if context else None

    def _require_context(self) -> RunContext:
        context = _active_run.get()
        if context is None or context.suite is not self:
            raise NoActiveTestError(f"{self.title} is not running")
        return context

    def _active_test(self) -> TestCase:
        test = self._require_context().current
        if test is None:
            raise NoActiveTestError("Assertions can only be made while a test is running")
        return test

    def fixture(self, key: str, value: Any = _UNSET) -> Any:
        """Store or retrieve a fixture for the current test.

        ``self.fixture("db", conn)`` stores a value, ``self.fixture("db")``
        retrieves it. Fixtures are cleared after every test's teardown.
        """
        fixtures = self._require_context().fixtures
        if value is not _UNSET:
            fixtures[key] = value
        if key not in fixtures:
            raise KeyError(f"No fixture named {key!r}")
        return fixtures[key]

    def reset_fixtures(self) -> None:
        """Remove all fixtures."""
        self._require_context().fixtures.clear()

    def out(self, message: str) -> None:
        """Send a message to the report."""
        if self.report:
            self.report.render_message(message)

    def debug_out(self, message: str) -> None:
        """Send a debug message to the report."""
        if self.report:
            self.report.render_message(message, True)

    def _guarded(self, test: TestCase, step: Callable[[], Any]) -> bool:
        """Call one step of a test, recording whatever it raises.

        Returns:
            True if the step completed without raising
        """
        try:
            step()
        except HandledFault:
            return False  # already recorded by the fault interceptor
        except Exception as exc:
            test.faults.append(fault_from_exception(exc))
            return False
        return True

    def run_test(self, test: TestCase) -> None:
        """Run a single test with setup and teardown around it.

        Faults raised by the test never propagate; they are recorded on the
        test. A failing setup skips the test body, but teardown still runs.
        """
        context = self._require_context()
        self.out(f'Running test "{test.name}" ...')

        test.reset()
        test.state = TestState.RUNNING
        context.current = test

        try:
            time_started = time.perf_counter()
            setup_ok = self._guarded(test, self.setup)
            time_after_setup = time.perf_counter()

            if setup_ok:
                self._guarded(test, test.entry)
            time_after_run = time.perf_counter()

            self._guarded(test, self.teardown)
            self.reset_fixtures()
            time_after_teardown = time.perf_counter()
        finally:
            context.current = None

        test.timing.setup = time_after_setup - time_started
        test.timing.run = time_after_run - time_after_setup
        test.timing.teardown = time_after_teardown - time_after_run
        test.timing.total = time_after_teardown - time_started

        test.run = True
        test.state = TestState.COMPLETED
        test.passed = test.evaluate()

        self.debug_out("Timing: " + json.dumps(test.timing.to_dict()))

    def run_tests(self, filter: Optional[str] = None) -> None:
        """Run every test, or those whose name contains ``filter``."""
        needle = filter.lower() if filter else None
        for test in self.tests:
            if needle is None or needle in test.name.lower():
                self.run_test(test)

    def _resolve_report(self, report: Union["Report", bool, None]) -> Optional["Report"]:
        if report is True:
            from liteunit.report.console import ConsoleReport

            return ConsoleReport(
                debug=self.config.report.debug,
                color=self.config.report.color,
            )
        if report is False or report is None:
            return None
        return report

    def run(self, report: Union["Report", bool, None] = True, filter: Optional[str] = None) -> int:
        """Run the tests and render a report.

        Args:
            report: The Report to render; True for the default console report, False for none
            filter: Optional test name filter (defaults to the configured filter)

        Returns:
            0 if no faults were recorded (expected or not), otherwise 1
        """
        self.report = self._resolve_report(report)
        if filter is None:
            filter = self.config.filter

        if self.report:
            self.report.render_header(self)

        context = RunContext(self)
        token = _active_run.set(context)
        self._context = context
        try:
            with FaultInterceptor(lambda: context.current, self.fault_labels, self.warning_codes):
                if self.coverage:
                    self.coverage.enable(self)
                try:
                    self.run_tests(filter)
                finally:
                    if self.coverage:
                        self.coverage.disable(self)
        finally:
            self._context = None
            _active_run.reset(token)

        if self.report:
            self.report.render_body(self)
            self.report.render_footer(self)

        return 1 if self.fault_count() > 0 else 0

    def assertion_counts(self) -> AssertionTally:
        """Sum of the assertion tallies of every test."""
        total = AssertionTally()
        for test in self.tests:
            total = total + test.assertion_count
        return total

    @property
    def results(self) -> SuiteResult:
        """Summary of how many tests ran and passed."""
        result = SuiteResult(total=len(self.tests))
        for test in self.tests:
            if test.run:
                result.run += 1
            if test.passed:
                result.passed += 1
        return result

    def error_count(self) -> int:
        """Number of unexpected faults recorded across all tests."""
        return sum(len(test.unexpected_faults) for test in self.tests)

    def fault_count(self) -> int:
        """Number of faults recorded across all tests, expected or not."""
        return sum(len(test.faults) for test in self.tests)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "results": self.results.to_dict(),
            "assertion_count": self.assertion_counts().to_dict(),
            "error_count": self.error_count(),
            "tests": [test.to_dict() for test in self.tests],
        }
