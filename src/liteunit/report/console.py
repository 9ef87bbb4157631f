"""Console report rendered with rich."""

from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.markup import escape

from liteunit.core.models import AssertionRecord, FaultRecord, TestCase
from liteunit.report.base import Report

if TYPE_CHECKING:
    from liteunit.core.suite import TestSuite


class ConsoleReport(Report):
    """Plain-text report for the terminal."""

    debug_color = "blue"

    def __init__(self, debug: bool = False, color: bool = True, console: Optional[Console] = None):
        """Initialize the console report.

        Args:
            debug: Toggle verbose output
            color: Enable colors (only used when the terminal supports them)
            console: Console to print to; a new stdout console by default
        """
        super().__init__(debug)
        self.color = color
        self.console = console or Console(highlight=False, no_color=not color)

    def out(self, text: str = "") -> None:
        """Print a line of rich markup."""
        self.console.print(text, highlight=False, soft_wrap=True)

    def paint(self, text: object, color: str) -> str:
        """Wrap text in a color tag, escaping any markup it contains."""
        text = escape(str(text))
        if not self.color:
            return text
        return f"[{color}]{text}[/{color}]"

    def render_header(self, suite: "TestSuite") -> None:
        self.out(f"UNIT TEST: {escape(suite.title)}")
        self.out()

    def render_message(self, message: str, debug: bool = False) -> None:
        if debug:
            if self.debug:
                self.out(self.paint(message, self.debug_color))
        else:
            self.out(escape(message))

    def _test_color(self, test: TestCase) -> str:
        if test.passed:
            return "green"
        if test.assertion_count.warnings > 0 and not test.unexpected_faults:
            return "yellow"
        return "red"

    def format_assertion(self, assertion: AssertionRecord) -> str:
        """Format one assertion as a report line."""
        if assertion.is_warning:
            color = "yellow"
        else:
            color = "green" if assertion.result else "red"

        status = "PASS" if assertion.result else "FAIL"
        args = assertion.formatted if (not assertion.result or self.debug) else "..."
        msg = assertion.message or ""
        expected = " (expected)" if assertion.is_warning else ""

        return f" * {status}: " + self.paint(f"{assertion.operation}({args}) {msg}{expected}", color)

    def format_fault(self, fault: FaultRecord) -> str:
        """Format one fault as a report line, with a backtrace in debug mode."""
        if not fault.expected and self.debug and fault.backtrace:
            sep = "\n  -> "
            source = sep + sep.join(fault.backtrace)
        else:
            source = fault.location

        color = "cyan" if fault.expected else "blue"
        return " * " + self.paint(f"{fault.label}: {fault.message} in {source}", color)

    def render_body(self, suite: "TestSuite") -> None:
        self.out()
        self.out("RESULTS")
        self.out("--------------------------------------------")

        for test in suite.tests:
            counts = test.assertion_count
            self.out(
                "TEST: " + self.paint(f"{test.name} ({counts.passed}/{counts.count}):", self._test_color(test))
            )

            for assertion in test.assertions:
                self.out(self.format_assertion(assertion))

            for fault in test.faults:
                self.out(self.format_fault(fault))

            self.out()

        if suite.coverage:
            self.out("CODE COVERAGE")
            for file in suite.coverage.get_results(suite):
                uncovered = len(file.uncovered_lines)
                self.out(f" * {escape(file.path)}: {uncovered} of {len(file.lines)} lines uncovered")
            self.out()

        err_count = suite.error_count()
        self.out("ERRORS/EXCEPTIONS: " + self.paint(err_count, "red" if err_count > 0 else "white"))

        totals = suite.assertion_counts()
        self.out(
            "ASSERTIONS: "
            + self.paint(f"{totals.count} total", "white")
            + " ("
            + self.paint(f"{totals.passed} passed", "green")
            + ", "
            + self.paint(f"{totals.failed} failed", "red")
            + ", "
            + self.paint(f"{totals.warnings} warnings", "yellow")
            + ")"
        )

        results = suite.results
        self.out(
            f"TESTS: {results.run} run, "
            + self.paint(f"{results.passed} passed", "green")
            + ", "
            + self.paint(f"{results.total} total", "white")
        )

    def render_footer(self, suite: "TestSuite") -> None:
        pass
