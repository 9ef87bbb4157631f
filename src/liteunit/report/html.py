"""HTML report generation using Jinja2 templates."""

import platform
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from liteunit.report.base import Report

if TYPE_CHECKING:
    from liteunit.core.suite import TestSuite


class HtmlReport(Report):
    """Renders a static HTML page with the results of a suite."""

    def __init__(self, output_path: Path | str, debug: bool = False):
        """Initialize the HTML report.

        Args:
            output_path: File the report is written to by ``render_footer``
            debug: Toggle verbose output
        """
        super().__init__(debug)
        self.output_path = Path(output_path)
        self.messages: list[str] = []
        self.html: Optional[str] = None

        # Set up Jinja2 environment
        template_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

        # Add custom filters
        self.env.filters["duration_format"] = self._format_duration
        self.env.filters["datetime_format"] = self._format_datetime
        self.env.filters["percentage"] = self._format_percentage

    def render_header(self, suite: "TestSuite") -> None:
        self.messages = []
        self.html = None

    def render_message(self, message: str, debug: bool = False) -> None:
        if debug and not self.debug:
            return
        self.messages.append(message)

    def render_body(self, suite: "TestSuite") -> None:
        template = self.env.get_template("report.html")
        self.html = template.render(**self._prepare_context(suite))

    def render_footer(self, suite: "TestSuite") -> None:
        if self.html is None:
            return
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text(self.html, encoding="utf-8")

    def _prepare_context(self, suite: "TestSuite") -> dict[str, Any]:
        """Prepare context for template rendering.

        Args:
            suite: The finished suite

        Returns:
            Template context dictionary
        """
        results = suite.results
        totals = suite.assertion_counts()
        pass_rate = (results.passed / results.run * 100) if results.run > 0 else 0

        coverage = []
        if suite.coverage:
            coverage = [file.to_dict() for file in suite.coverage.get_results(suite)]

        tests = []
        for test in suite.tests:
            tests.append(
                {
                    "name": test.name,
                    "run": test.run,
                    "passed": test.passed,
                    "counts": test.assertion_count,
                    "assertions": test.assertions,
                    "faults": test.faults,
                    "duration_ms": test.timing.total * 1000,
                }
            )

        return {
            "title": suite.title,
            "generated_at": datetime.now(),
            "python_version": platform.python_version(),
            "debug": self.debug,
            "messages": self.messages,
            # Statistics
            "results": results,
            "totals": totals,
            "pass_rate": pass_rate,
            "error_count": suite.error_count(),
            # Test results
            "tests": tests,
            "coverage": coverage,
        }

    @staticmethod
    def _format_duration(ms: float) -> str:
        """Format duration in milliseconds to human-readable string."""
        if ms < 1000:
            return f"{ms:.1f}ms"
        elif ms < 60000:
            return f"{ms / 1000:.2f}s"
        else:
            minutes = int(ms // 60000)
            seconds = (ms % 60000) / 1000
            return f"{minutes}m {seconds:.1f}s"

    @staticmethod
    def _format_datetime(dt: datetime) -> str:
        """Format the report timestamp."""
        return dt.strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def _format_percentage(value: float) -> str:
        """Format a decimal as percentage."""
        return f"{value:.1f}%"
