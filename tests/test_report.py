"""Tests for the console and HTML reports."""

import io
from datetime import datetime

from rich.console import Console

from liteunit.core.coverage import FileCoverage
from liteunit.core.faults import FaultCode, trigger
from liteunit.core.models import AssertionRecord, FaultRecord
from liteunit.core.suite import TestSuite
from liteunit.report import ConsoleReport, HtmlReport


class MixedSuite(TestSuite):
    def a_test(self):
        self.ok(1)
        self.ok(0, "zero is falsy")
        raise Exception("boom")

    def warning_test(self):
        self.warn("write this test")

    def expected_test(self):
        self.expect(FaultCode.USER_ERROR, lambda: trigger("planned", FaultCode.USER_ERROR))


class StaticCoverage:
    def enable(self, suite):
        pass

    def disable(self, suite):
        pass

    def get_results(self, suite):
        return [FileCoverage(path="module.py", lines=["a = 1", "b = 2", "c = 3"], covered={2})]


def console_report(debug=False):
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, color_system=None, highlight=False)
    return ConsoleReport(debug=debug, color=False, console=console), buffer


class TestConsoleReport:
    """Tests for ConsoleReport."""

    def test_renders_results(self):
        """Test the per-test lines and the totals."""
        report, buffer = console_report()
        MixedSuite().run(report)
        output = buffer.getvalue()

        assert "UNIT TEST: MixedSuite" in output
        assert 'Running test "a test" ...' in output
        assert "RESULTS" in output
        assert "TEST: a test (1/2):" in output
        assert " * PASS: ok(...)" in output
        assert " * FAIL: ok(0) zero is falsy" in output
        assert " * EXCEPTION: Exception: boom in " in output
        assert " * FAIL: fail() write this test (expected)" in output
        assert "ERRORS/EXCEPTIONS: 1" in output
        assert "ASSERTIONS: 4 total (2 passed, 1 failed, 1 warnings)" in output
        assert "TESTS: 3 run, 2 passed, 3 total" in output

    def test_hides_debug_output(self):
        """Test that debug messages need debug mode."""
        report, buffer = console_report()
        MixedSuite().run(report)
        output = buffer.getvalue()

        assert "Expected: 0 to be truthy" not in output
        assert "Timing:" not in output

    def test_debug_output(self):
        """Test operands, debug messages and backtraces in debug mode."""
        report, buffer = console_report(debug=True)
        MixedSuite().run(report)
        output = buffer.getvalue()

        assert " * PASS: ok(1)" in output
        assert "Expected: 0 to be truthy" in output
        assert "Timing: " in output
        assert "  -> " in output

    def test_escapes_markup(self):
        """Test that text that looks like markup is printed literally."""
        report, buffer = console_report()
        report.render_message("[bold]not markup[/bold]")
        assert "[bold]not markup[/bold]" in buffer.getvalue()

    def test_format_assertion(self):
        """Test formatting of a single assertion."""
        report, _ = console_report()
        line = report.format_assertion(AssertionRecord("equal", (1, 2), False, "numbers"))
        assert line == " * FAIL: equal(1, 2) numbers"

    def test_format_expected_fault(self):
        """Test that an expected fault shows its location even in debug mode."""
        report, _ = console_report(debug=True)
        fault = FaultRecord(
            code=8,
            label="USER ERROR",
            message="planned",
            file="x.py",
            line=3,
            expected=True,
            backtrace=("x.py#3 f(...)",),
        )
        assert report.format_fault(fault) == " * USER ERROR: planned in x.py#3"

    def test_coverage_section(self):
        """Test the coverage summary."""
        report, buffer = console_report()
        MixedSuite(coverage=StaticCoverage()).run(report)
        output = buffer.getvalue()

        assert "CODE COVERAGE" in output
        assert " * module.py: 2 of 3 lines uncovered" in output


class TestHtmlReport:
    """Tests for HtmlReport."""

    def test_writes_report(self, tmp_path):
        """Test that the report is written where it was asked to be."""
        output = tmp_path / "reports" / "report.html"
        report = HtmlReport(output)

        MixedSuite().run(report)

        assert output.exists()
        html = output.read_text(encoding="utf-8")
        assert "<h1>MixedSuite</h1>" in html
        assert "a test" in html
        assert "EXCEPTION: Exception: boom" in html
        assert "1 errors/exceptions logged" in html
        assert 'class="expected-error"' in html

    def test_buffers_messages(self, tmp_path):
        """Test that progress messages end up in the page."""
        report = HtmlReport(tmp_path / "report.html")

        MixedSuite().run(report)

        assert 'Running test "a test" ...' in report.messages
        assert "&#34;a test&#34;" in report.html or "&quot;a test&quot;" in report.html

    def test_debug_messages(self, tmp_path):
        """Test that debug messages are only kept in debug mode."""
        quiet = HtmlReport(tmp_path / "quiet.html")
        quiet.render_message("details", debug=True)
        assert quiet.messages == []

        loud = HtmlReport(tmp_path / "loud.html", debug=True)
        loud.render_message("details", debug=True)
        assert loud.messages == ["details"]

    def test_escapes_content(self, tmp_path):
        """Test that recorded text is HTML-escaped."""

        class MarkupSuite(TestSuite):
            def a_test(self):
                self.ok(False, "<script>")

        report = HtmlReport(tmp_path / "report.html")
        MarkupSuite().run(report)

        assert "<script>" not in report.html
        assert "&lt;script&gt;" in report.html

    def test_coverage(self, tmp_path):
        """Test the coverage summary in the page."""
        report = HtmlReport(tmp_path / "report.html")
        MixedSuite(coverage=StaticCoverage()).run(report)
        assert "module.py: 2 of 3 lines uncovered" in report.html

    def test_format_datetime(self):
        """Test formatting of the report timestamp."""
        assert HtmlReport._format_datetime(datetime(2024, 3, 5, 7, 8, 9)) == "2024-03-05 07:08:09"

    def test_format_duration(self):
        """Test duration formatting."""
        assert HtmlReport._format_duration(12.34) == "12.3ms"
        assert HtmlReport._format_duration(1500) == "1.50s"
        assert HtmlReport._format_duration(90000) == "1m 30.0s"
