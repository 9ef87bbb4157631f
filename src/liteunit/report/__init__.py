"""Report rendering for finished test suites."""

from liteunit.report.base import Report
from liteunit.report.console import ConsoleReport
from liteunit.report.html import HtmlReport

__all__ = ["ConsoleReport", "HtmlReport", "Report"]
